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

"""
Functions that add new nodes to a tree. They either succeed entirely or leave the tree
as it was before the call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from lxml_pathselect.config import DefaultQueryOptions
from lxml_pathselect.exceptions import (
    InsertionFailed,
    NodeCreationFailed,
    NullOrigin,
    OrphanedSibling,
)
from lxml_pathselect.selection import find_element
from lxml_pathselect.xpath import build_path

if TYPE_CHECKING:
    from lxml_pathselect.tree import TreeProvider
    from lxml_pathselect.typing import AttributesArgument, Node


logger = logging.getLogger(__name__)


def append_element(
    parent: Optional[Node],
    expression: str,
    attributes: Optional[AttributesArgument] = None,
    text: str = "",
    provider: Optional[TreeProvider] = None,
) -> Node:
    """
    Creates a new branch of nodes along a path expression and adds it behind the last
    child node of ``parent``. Attribute constraints of the expression's location steps
    are set as attributes of the created nodes.

    :param parent: The node to add the branch to. Absolute paths are evaluated from
                   the document's root node instead.
    :param expression: A path expression that consists only of named child steps,
                       e.g. ``entry/sense[@n='1']/cit``.
    :param attributes: Additional attributes for the last node of the branch.
    :param text: Text content for the last node of the branch.
    :returns: The last node of the created branch.
    """
    return _add_branch(parent, expression, attributes, text, True, provider)


def prepend_element(
    parent: Optional[Node],
    expression: str,
    attributes: Optional[AttributesArgument] = None,
    text: str = "",
    provider: Optional[TreeProvider] = None,
) -> Node:
    """
    Like :func:`append_element`, but each created node becomes the first child of its
    parent.
    """
    return _add_branch(parent, expression, attributes, text, False, provider)


def fetch_or_create_element(
    parent: Optional[Node],
    expression: str,
    attributes: Optional[AttributesArgument] = None,
    text: str = "",
    provider: Optional[TreeProvider] = None,
) -> Node:
    """
    Returns the first node that matches the path expression in relation to ``parent``
    or appends a new branch with :func:`append_element` if there is none. The
    ``attributes`` and ``text`` are only used for a created node.
    """
    if (result := find_element(parent, expression, provider=provider)) is not None:
        return result
    return append_element(parent, expression, attributes, text, provider)


def insert_next_element(
    sibling: Optional[Node],
    name: str,
    attributes: Optional[AttributesArgument] = None,
    text: str = "",
    provider: Optional[TreeProvider] = None,
) -> Node:
    """
    Creates a new node and adds it directly after ``sibling``.

    :param sibling: The node after which the new node is inserted. It must have a
                    parent node.
    :param name: The new node's name.
    :returns: The new node.
    """
    if sibling is None:
        raise NullOrigin
    if provider is None:
        provider = DefaultQueryOptions.tree_provider

    parent = provider.parent(sibling)
    if parent is None:
        raise OrphanedSibling

    node = provider.create_node(parent, name)
    try:
        if not provider.insert_after(parent, sibling, node):
            raise InsertionFailed(f"Couldn't insert a node named `{name}`.")
        _set_content(provider, node, attributes, text)
    except InsertionFailed:
        logger.debug("Removing the node `%s` after a failed insertion.", name)
        provider.delete_node(node)
        raise

    return node


def _add_branch(
    parent: Optional[Node],
    expression: str,
    attributes: Optional[AttributesArgument],
    text: str,
    add_at_back: bool,
    provider: Optional[TreeProvider],
) -> Node:
    if provider is None:
        provider = DefaultQueryOptions.tree_provider

    path = build_path(parent, expression, provider=provider)
    node = path.anchor
    if node is None:
        raise NullOrigin("The path's anchor node doesn't exist.")

    # the anchor already exists
    location_steps = path.location_steps[1:]
    if not location_steps:
        raise InsertionFailed("The path expression doesn't describe any node to add.")
    for step in location_steps:
        if not step._is_materializable:
            raise InsertionFailed(
                f"The location step `{step}` can't be created, only named child "
                "steps are supported."
            )

    created: list[Node] = []
    try:
        for step in location_steps:
            new_node = provider.create_node(node, step.name_test)
            created.append(new_node)
            logger.debug("Adding a node named `%s`.", step.name_test)
            if not _insert(provider, node, new_node, add_at_back):
                raise InsertionFailed(
                    f"Couldn't insert a node named `{step.name_test}`."
                )
            for constraint in step.attribute_constraints:
                provider.set_attribute(new_node, constraint.name, constraint.value)
            node = new_node

        _set_content(provider, node, attributes, text)

    except InsertionFailed as e:
        logger.debug("Removing %d created node(s) after a failure.", len(created))
        for created_node in reversed(created):
            provider.delete_node(created_node)
        if isinstance(e, NodeCreationFailed):
            raise InsertionFailed(
                f"Couldn't add the branch `{expression}`: {e}"
            ) from e
        raise

    return node


def _insert(
    provider: TreeProvider, parent: Node, node: Node, add_at_back: bool
) -> bool:
    # the last child node keeps its tail text in front of the appended node
    if add_at_back and (last_child := provider.last_child(parent)) is not None:
        return provider.insert_after(parent, last_child, node)
    return provider.insert_first_child(parent, node)


def _set_content(
    provider: TreeProvider,
    node: Node,
    attributes: Optional[AttributesArgument],
    text: str,
):
    if attributes:
        for name, value in attributes.items():
            provider.set_attribute(node, name, value)
    if text:
        provider.set_text(node, text)


__all__ = (
    append_element.__name__,
    fetch_or_create_element.__name__,
    insert_next_element.__name__,
    prepend_element.__name__,
)
