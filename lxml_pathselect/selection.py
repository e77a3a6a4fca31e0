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

from typing import TYPE_CHECKING, Optional

from lxml_pathselect.config import DefaultQueryOptions
from lxml_pathselect.exceptions import InvalidCodePath
from lxml_pathselect.xpath import LocationKind, build_path

if TYPE_CHECKING:
    from lxml_pathselect.config import EmptyPathMode
    from lxml_pathselect.tree import TreeProvider
    from lxml_pathselect.typing import Node
    from lxml_pathselect.xpath import LocationPath, LocationStep


class _Cursor:
    __slots__ = ("match", "step")

    def __init__(self, step: LocationStep):
        self.step = step
        self.match: Optional[Node] = None

    def __repr__(self):
        return f"<_Cursor {self.step!r} match={self.match!r}>"


class MatchIterator:
    """
    Yields the nodes that match a compiled :class:`lxml_pathselect.xpath.LocationPath`
    in document order. The first match is determined on construction, subsequent ones
    only when they're requested. An iterator can't be restarted.

    The tree must not be modified while an iterator over it is in use.
    """

    __slots__ = ("_cursors", "_pending", "_provider")

    def __init__(
        self,
        path: Optional[LocationPath] = None,
        provider: Optional[TreeProvider] = None,
    ):
        self._provider = provider or DefaultQueryOptions.tree_provider
        self._cursors: list[_Cursor] = []
        self._pending = False

        if path is None:
            return
        if not len(path):
            raise InvalidCodePath

        self._cursors = [_Cursor(x) for x in path]
        self._cursors[0].match = path.anchor

        if self._descend(0):
            self._pending = True
        else:
            self._cursors.clear()

    def __eq__(self, other):
        if not isinstance(other, MatchIterator):
            return NotImplemented
        return self.current is other.current

    __hash__ = None  # type: ignore

    def __iter__(self) -> MatchIterator:
        return self

    def __next__(self) -> Node:
        if self._pending:
            self._pending = False
        else:
            self.advance()

        result = self.current
        if result is None:
            raise StopIteration
        return result

    def __repr__(self):
        return f"<{self.__class__.__name__} current={self.current!r}>"

    @property
    def current(self) -> Optional[Node]:
        """The node the iterator is positioned on, :obj:`None` when exhausted."""
        if self._cursors:
            return self._cursors[-1].match
        return None

    @property
    def exhausted(self) -> bool:
        return not self._cursors

    def advance(self):
        """
        Moves to the next match. The deepest location step tries its following
        candidates first, when there are none left it's reset and the next step
        upwards advances.
        """
        self._pending = False
        index = len(self._cursors) - 1

        # the anchor at index 0 is never advanced
        while index > 0:
            cursor = self._cursors[index]
            context_node = self._cursors[index - 1].match
            assert cursor.match is not None
            assert context_node is not None

            cursor.match = self._next_candidate(cursor.step, context_node, cursor.match)
            if self._settle(index, context_node):
                return
            index -= 1

        self._cursors.clear()

    def _descend(self, index: int) -> bool:
        context_node = self._cursors[index].match
        if context_node is None:
            return False
        if index == len(self._cursors) - 1:
            return True

        cursor = self._cursors[index + 1]
        cursor.match = self._first_candidate(cursor.step, context_node)
        return self._settle(index + 1, context_node)

    def _settle(self, index: int, context_node: Node) -> bool:
        # moves sideways from the current candidate until one is found that matches
        # and below which the remaining steps can be matched
        cursor = self._cursors[index]
        while cursor.match is not None:
            if cursor.step.matches_attributes(
                cursor.match, self._provider
            ) and self._descend(index):
                return True
            cursor.match = self._next_candidate(cursor.step, context_node, cursor.match)
        return False

    def _first_candidate(
        self, step: LocationStep, context_node: Node
    ) -> Optional[Node]:
        provider = self._provider

        match step.kind:
            case LocationKind.Children | LocationKind.AnyChild:
                return provider.first_child(context_node, step.name_filter)
            case LocationKind.AllDescendants:
                return self._following_descendant(step, context_node, context_node)
            case LocationKind.Self:
                candidate = context_node
            case LocationKind.Parent:
                candidate = provider.parent(context_node)
            case _:
                return None

        if candidate is not None and step.matches_name(provider.name(candidate)):
            return candidate
        return None

    def _next_candidate(
        self, step: LocationStep, context_node: Node, current: Node
    ) -> Optional[Node]:
        match step.kind:
            case LocationKind.Children | LocationKind.AnyChild:
                return self._provider.next_sibling(current, step.name_filter)
            case LocationKind.AllDescendants:
                return self._following_descendant(step, context_node, current)
        # the remaining kinds have at most one candidate
        return None

    def _following_descendant(
        self, step: LocationStep, context_node: Node, node: Node
    ) -> Optional[Node]:
        provider = self._provider
        while (node := self._next_in_subtree(context_node, node)) is not None:
            if step.matches_name(provider.name(node)):
                return node
        return None

    def _next_in_subtree(self, subtree_root: Node, node: Node) -> Optional[Node]:
        provider = self._provider

        if (child := provider.first_child(node)) is not None:
            return child

        while node is not subtree_root:
            if (sibling := provider.next_sibling(node)) is not None:
                return sibling
            parent = provider.parent(node)
            assert parent is not None
            node = parent

        return None


class Selector:
    """
    Stores an origin node and a path expression for a deferred evaluation. Each
    iteration over a selector evaluates the path anew.
    """

    __slots__ = ("empty_path", "expression", "origin", "provider")

    def __init__(
        self,
        origin: Optional[Node],
        expression: str = "",
        provider: Optional[TreeProvider] = None,
        empty_path: Optional[EmptyPathMode] = None,
    ):
        self.origin = origin
        self.expression = expression
        self.provider = provider
        self.empty_path = empty_path

    def __iter__(self) -> MatchIterator:
        return self.begin()

    def begin(self) -> MatchIterator:
        """Returns an iterator that is positioned on the first match, if any."""
        if self.origin is None:
            return self.end()
        return MatchIterator(
            build_path(
                self.origin,
                self.expression,
                provider=self.provider,
                empty_path=self.empty_path,
            ),
            provider=self.provider,
        )

    @staticmethod
    def end() -> MatchIterator:
        """Returns an exhausted iterator."""
        return MatchIterator()

    def first(self) -> Optional[Node]:
        return self.begin().current


def find_element(
    origin: Optional[Node],
    expression: str = "",
    provider: Optional[TreeProvider] = None,
    empty_path: Optional[EmptyPathMode] = None,
) -> Optional[Node]:
    """
    Returns the first node that matches a path expression in relation to the ``origin``
    or :obj:`None` if there's none.
    """
    return Selector(
        origin, expression, provider=provider, empty_path=empty_path
    ).first()


__all__ = (
    MatchIterator.__name__,
    Selector.__name__,
    find_element.__name__,
)
