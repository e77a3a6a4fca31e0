# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Optional

from lxml_pathselect.config import DefaultQueryOptions
from lxml_pathselect.exceptions import InvalidOperation, NullOrigin

if TYPE_CHECKING:
    from lxml_pathselect.tree import TreeProvider
    from lxml_pathselect.typing import Node


def _absolute(expression: str) -> str:
    """
    Anchors a path expression at a document's root.

    >>> _absolute('A/B')
    '/A/B'

    >>> _absolute('/A/B')
    '/A/B'

    """
    return expression if expression.startswith("/") else "/" + expression


def _split_location_path(expression: str) -> Iterator[tuple[int, str]]:
    """
    Split a path expression into its location step expressions, each paired with its
    offset in the whole expression. Slashes within quotes or brackets are ignored and a
    slash that directly follows a separator is kept with the subsequent location step.

    >>> list(_split_location_path('A//B/C'))
    [(0, 'A'), (2, '/B'), (5, 'C')]

    >>> list(_split_location_path("/A/B[@href='a/b']"))
    [(0, '/A'), (3, "B[@href='a/b']")]

    >>> list(_split_location_path("A/B[@href=a/b]/C"))
    [(0, 'A'), (2, 'B[@href=a/b]'), (15, 'C')]

    >>> list(_split_location_path('A/'))
    [(0, 'A'), (2, '')]

    """
    offset = 0
    part = ""
    quote = ""
    bracket_level = 0

    for i, character in enumerate(expression):
        if quote:
            if character == quote:
                quote = ""
        elif character in ("'", '"'):
            quote = character
        elif character == "[":
            bracket_level += 1
        elif character == "]":
            bracket_level = max(bracket_level - 1, 0)
        elif character == "/" and not bracket_level and part.strip("/"):
            yield offset, part
            offset, part = i + 1, ""
            continue

        part += character

    yield offset, part


def attribute_value(
    node: Optional[Node],
    name: str,
    raise_if_missing: bool = False,
    provider: Optional[TreeProvider] = None,
) -> str:
    """
    Returns a node's attribute value or an empty string if the node has no such
    attribute.

    :param node: The node whose attribute is looked up.
    :param name: The attribute's name, possibly with a prefix.
    :param raise_if_missing: Raise :exc:`InvalidOperation` instead of returning an
                             empty string.
    """
    if node is None:
        raise NullOrigin
    if not name:
        raise InvalidOperation("An attribute name is required.")

    value = (provider or DefaultQueryOptions.tree_provider).attribute(node, name)
    if value is not None:
        return value
    if raise_if_missing:
        raise InvalidOperation(f"The node has no attribute `{name}`.")
    return ""


def text(node: Optional[Node], provider: Optional[TreeProvider] = None) -> str:
    """Returns a node's text or an empty string if it has none."""
    if node is None:
        raise NullOrigin
    return (provider or DefaultQueryOptions.tree_provider).text(node) or ""


__all__ = (attribute_value.__name__, text.__name__)
