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
This is not an XPath implementation. Path expressions are compiled to a sequence of
location steps that resemble a small subset of XPath's abbreviated syntax:

- ``name`` selects child nodes with that name, ``*`` any child node.
- ``.`` refers to the context node itself, ``..`` to its parent.
- A leading ``/`` anchors the path at the document's root node, the first step must
  then name the root node or be a wildcard.
- ``//name`` selects descendant nodes at any depth with that name.
- ``[@attribute]`` tests for the presence of an attribute, ``[@attribute='value']``
  for an attribute value. Quotes are optional, filters can be repeated.

Any other predicate, e.g. ``[1]`` or ``[last()]``, is recognized but marks a step as
never matching.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum, auto
from typing import TYPE_CHECKING, NamedTuple, Optional

from lxml_pathselect.config import DefaultQueryOptions, EmptyPathMode
from lxml_pathselect.exceptions import MalformedPath, NullOrigin, RootNameMismatch
from lxml_pathselect.utils import _split_location_path

if TYPE_CHECKING:
    from lxml_pathselect.tree import TreeProvider
    from lxml_pathselect.typing import Node


logger = logging.getLogger(__name__)


class LocationKind(Enum):
    Children = auto()
    AnyChild = auto()
    AllDescendants = auto()
    Self = auto()
    Parent = auto()
    Root = auto()
    Unsupported = auto()


class _ParseState(Enum):
    Name = auto()
    AttributeFilter = auto()
    AttributeName = auto()
    AttributeAssignment = auto()
    AttributeValue = auto()
    Predicate = auto()


class AttributeConstraint(NamedTuple):
    """
    Tests a node for an attribute. With an empty ``value`` the attribute only needs to
    be present.
    """

    name: str
    value: str = ""

    def __str__(self):
        if not self.value:
            return f"[@{self.name}]"
        quote = '"' if "'" in self.value else "'"
        return f"[@{self.name}={quote}{self.value}{quote}]"


class LocationStep:
    """
    A compiled location step. Its node test and attribute constraints aren't altered
    after compilation.
    """

    __slots__ = ("attribute_constraints", "kind", "name_test")

    def __init__(
        self,
        name_test: str = "",
        kind: LocationKind = LocationKind.Children,
        attribute_constraints: Iterable[AttributeConstraint] = (),
    ):
        self.name_test = name_test
        self.kind = kind
        self.attribute_constraints = tuple(attribute_constraints)

    def __eq__(self, other):
        if not isinstance(other, LocationStep):
            return NotImplemented
        return (
            self.name_test == other.name_test
            and self.kind is other.kind
            and self.attribute_constraints == other.attribute_constraints
        )

    def __hash__(self):
        return hash((self.name_test, self.kind, self.attribute_constraints))

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} {self.kind.name} "
            f"name_test={self.name_test!r} "
            f"attribute_constraints={list(self.attribute_constraints)!r}>"
        )

    def __str__(self):
        match self.kind:
            case LocationKind.AnyChild:
                result = "*"
            case LocationKind.AllDescendants | LocationKind.Root:
                result = "/" + (self.name_test or "*")
            case LocationKind.Self:
                result = "."
            case LocationKind.Parent:
                result = ".."
            case _:
                result = self.name_test
        return result + "".join(str(x) for x in self.attribute_constraints)

    @property
    def name_filter(self) -> Optional[str]:
        """The name that nodes must have or :obj:`None` if any name matches."""
        return self.name_test or None

    @property
    def _is_materializable(self) -> bool:
        return self.kind is LocationKind.Children and bool(self.name_test)

    def matches_attributes(self, node: Node, provider: TreeProvider) -> bool:
        for constraint in self.attribute_constraints:
            value = provider.attribute(node, constraint.name)
            if value is None:
                return False
            if constraint.value and value != constraint.value:
                return False
        return True

    def matches_name(self, name: str) -> bool:
        return not self.name_test or name == self.name_test


class LocationPath:
    """
    An ordered sequence of location steps. The first one is the anchor step whose
    node is already determined, it's the origin of a search and isn't matched itself.
    """

    __slots__ = ("anchor", "location_steps")

    def __init__(self, anchor: Optional[Node], location_steps: list[LocationStep]):
        self.anchor = anchor
        self.location_steps = location_steps

    def __iter__(self) -> Iterator[LocationStep]:
        return iter(self.location_steps)

    def __len__(self) -> int:
        return len(self.location_steps)

    def __str__(self):
        anchor_step, *steps = self.location_steps
        result = "/".join(str(x) for x in steps)
        if anchor_step.kind is LocationKind.Root:
            return f"{anchor_step}/{result}" if steps else str(anchor_step)
        if steps and steps[0].kind is LocationKind.AllDescendants:
            return "/" + result
        return result


def parse_location_step(expression: str, offset: int = 0) -> LocationStep:  # noqa: C901
    """
    Compiles a single location step expression.

    :param expression: The location step's expression.
    :param offset: The position of the expression within the whole path expression.
                   A slash at position ``0`` anchors the step at the document's root.

    >>> parse_location_step("B[@id='one']")
    <LocationStep Children name_test='B' attribute_constraints=[AttributeConstraint(name='id', value='one')]>

    >>> parse_location_step("/C", offset=2).kind
    <LocationKind.AllDescendants: 3>

    """  # noqa: E501
    kind = LocationKind.Children
    name = ""
    wildcard = filtered = False
    constraints: list[AttributeConstraint] = []
    attribute_name = attribute_value = quote = ""
    state = _ParseState.Name

    def malformed(position: int, message: str) -> MalformedPath:
        return MalformedPath(expression, position, message)

    for position, character in enumerate(expression, start=offset):
        if state is _ParseState.AttributeValue:
            if character == quote:
                state, quote = _ParseState.AttributeAssignment, ""
            elif character == "]":
                constraints.append(
                    AttributeConstraint(attribute_name.strip(), attribute_value)
                )
                attribute_name = attribute_value = quote = ""
                state = _ParseState.Name
            else:
                attribute_value += character
            continue

        if state is _ParseState.Predicate:
            if character == "[":
                raise malformed(position, "Nested predicates aren't supported.")
            if character == "]":
                filtered = True
                state = _ParseState.Name
            continue

        match character:
            case "[":
                if state is not _ParseState.Name:
                    raise malformed(position, "Unexpected `[`.")
                state = _ParseState.AttributeFilter

            case "]":
                if state is _ParseState.Name:
                    raise malformed(position, "Unexpected `]`.")
                if state is not _ParseState.AttributeFilter:
                    if not attribute_name.strip():
                        raise malformed(position, "Missing attribute name.")
                    constraints.append(
                        AttributeConstraint(attribute_name.strip(), attribute_value)
                    )
                    attribute_name = attribute_value = ""
                filtered = True
                state = _ParseState.Name

            case "@":
                if state is not _ParseState.AttributeFilter:
                    raise malformed(position, "Unexpected `@`.")
                state = _ParseState.AttributeName

            case "=":
                if state is not _ParseState.AttributeName or not attribute_name.strip():
                    raise malformed(position, "Unexpected `=`.")
                state = _ParseState.AttributeAssignment

            case "'" | '"':
                if state is not _ParseState.AttributeAssignment:
                    raise malformed(position, f"Unexpected `{character}`.")
                quote = character
                state = _ParseState.AttributeValue

            case _ if state is _ParseState.AttributeFilter:
                if not character.isspace():
                    kind = LocationKind.Unsupported
                    state = _ParseState.Predicate

            case _ if state is _ParseState.AttributeName:
                attribute_name += character

            case _ if state is _ParseState.AttributeAssignment:
                if not character.isspace():
                    attribute_value += character

            case ".":
                if filtered or wildcard:
                    raise malformed(position, "Unexpected `.`.")
                if kind is LocationKind.Children and not name:
                    kind = LocationKind.Self
                elif kind is LocationKind.Self:
                    kind = LocationKind.Parent
                elif kind is LocationKind.Children:
                    name += character
                else:
                    raise malformed(position, "Unexpected `.`.")

            case "*":
                if name or filtered or wildcard or kind not in (
                    LocationKind.Children,
                    LocationKind.Root,
                    LocationKind.AllDescendants,
                ):
                    raise malformed(position, "Unexpected `*`.")
                wildcard = True
                if kind is LocationKind.Children:
                    kind = LocationKind.AnyChild

            case "/":
                if name or filtered or wildcard:
                    raise malformed(position, "Unexpected `/`.")
                if kind is LocationKind.Children:
                    kind = (
                        LocationKind.Root
                        if position == 0
                        else LocationKind.AllDescendants
                    )
                elif kind is LocationKind.Root and position == 1:
                    kind = LocationKind.AllDescendants
                else:
                    raise malformed(position, "Unexpected `/`.")

            case _:
                if filtered or wildcard or kind in (
                    LocationKind.Self,
                    LocationKind.Parent,
                ):
                    raise malformed(position, f"Unexpected `{character}`.")
                name += character

    if state is not _ParseState.Name:
        raise malformed(offset + len(expression), "Unterminated predicate.")

    return LocationStep(name, kind, constraints)


def build_path(
    origin: Optional[Node],
    expression: str,
    provider: Optional[TreeProvider] = None,
    empty_path: Optional[EmptyPathMode] = None,
) -> LocationPath:
    """
    Compiles a path expression that is evaluated in relation to the ``origin`` node.

    :param origin: The node that relative paths start from. For absolute paths it is
                   only used to determine the document's root node.
    :param expression: The path expression.
    :param provider: The :class:`lxml_pathselect.tree.TreeProvider` to inspect nodes
                     with, defaults to the configured one.
    :param empty_path: Overrides the configured interpretation of an empty
                       ``expression``.
    """
    if origin is None:
        raise NullOrigin
    if provider is None:
        provider = DefaultQueryOptions.tree_provider

    anchor_step = LocationStep(provider.name(origin))

    if not expression:
        if (empty_path or DefaultQueryOptions.empty_path) is EmptyPathMode.Children:
            return LocationPath(
                origin, [anchor_step, LocationStep(kind=LocationKind.AnyChild)]
            )
        return LocationPath(origin, [anchor_step])

    location_steps = [
        parse_location_step(x, offset) for offset, x in _split_location_path(expression)
    ]

    if expression.startswith("/") and not expression.startswith("//"):
        root_step = location_steps[0]
        anchor = provider.root_of(origin)
        if root_step.kind is LocationKind.Unsupported:
            anchor = None
        elif anchor is not None:
            root_name = provider.name(anchor)
            if not root_step.matches_name(root_name):
                raise RootNameMismatch(root_step.name_test, root_name)
            if not root_step.matches_attributes(anchor, provider):
                anchor = None
        result = LocationPath(anchor, location_steps)
    else:
        result = LocationPath(origin, [anchor_step] + location_steps)

    logger.debug("Compiled `%s` to %r.", expression, result.location_steps)
    return result


__all__ = (
    AttributeConstraint.__name__,
    LocationKind.__name__,
    LocationPath.__name__,
    LocationStep.__name__,
    build_path.__name__,
    parse_location_step.__name__,
)
