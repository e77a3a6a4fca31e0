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

from typing import TYPE_CHECKING, Any, Optional

from lxml import etree

from lxml_pathselect.builder import (
    append_element,
    fetch_or_create_element,
    insert_next_element,
    prepend_element,
)
from lxml_pathselect.config import DefaultQueryOptions, EmptyPathMode
from lxml_pathselect.exceptions import (
    DocumentParseFailed,
    InsertionFailed,
    InvalidOperation,
    MalformedPath,
    NodeCreationFailed,
    NullOrigin,
    OrphanedSibling,
    PathSelectBaseException,
    RootNameMismatch,
)
from lxml_pathselect.loaders import load_tree, text_loader
from lxml_pathselect.selection import MatchIterator, Selector
from lxml_pathselect.selection import find_element as _find_element
from lxml_pathselect.tree import LxmlTreeProvider, TreeProvider
from lxml_pathselect.utils import _absolute, attribute_value, text
from lxml_pathselect.xpath import (
    AttributeConstraint,
    LocationKind,
    LocationPath,
    LocationStep,
    build_path,
    parse_location_step,
)

if TYPE_CHECKING:
    from lxml_pathselect.typing import Node


# constants

# https://lxml.de/FAQ.html#why-doesn-t-the-pretty-print-option-reformat-my-xml-output
DEFAULT_PARSER = etree.XMLParser(remove_blank_text=True)


# api


class Document:
    """
    This class represents an XML document with one or no root node.

    :param source: Anything that one of the :data:`lxml_pathselect.loaders
                   .configured_loaders` can load, e.g. a string with markup, a
                   :class:`pathlib.Path` or a file-like object. An empty document is
                   created if omitted.
    :param parser: The lxml parser that is used to parse a ``source``.
    """

    __slots__ = ("_parser", "_tree")

    def __init__(self, source: Any = None, parser: etree.XMLParser = DEFAULT_PARSER):
        self._parser = parser
        if source is None:
            self._tree: etree._ElementTree = etree.ElementTree()
        else:
            self._tree = load_tree(source, parser)

    def __contains__(self, node: Node) -> bool:
        """Tests whether a node is part of a document instance."""
        root = self.root
        return root is not None and node.getroottree().getroot() is root

    def __str__(self):
        if self.root is None:
            return ""
        return etree.tostring(self._tree, encoding="unicode")

    def find_element(self, expression: str = "") -> Optional[Node]:
        """Returns the first node that matches the path expression from the root."""
        return find_element(self, expression)

    def parse(self, text: str | bytes):
        """
        Replaces the document's content with the parsed markup.

        :raises DocumentParseFailed: When the markup isn't well-formed.
        """
        result = text_loader(text, self._parser)
        if not isinstance(result, etree._ElementTree):
            raise DocumentParseFailed(text, {text_loader: result})
        self._tree = result

    @property
    def root(self) -> Optional[Node]:
        """The root node of a document instance."""
        return self._tree.getroot()

    def selection(self, expression: str = "") -> Selector:
        """Selects the nodes that match the path expression from the root."""
        return selection(self, expression)


def load_document(text: str | bytes) -> Document:
    """Returns a new document that is parsed from the given markup."""
    document = Document()
    document.parse(text)
    return document


def selection(
    origin: Document | Node | None,
    expression: str = "",
    provider: Optional[TreeProvider] = None,
) -> Selector:
    """
    Returns a :class:`Selector` for the nodes that match the path expression. When a
    :class:`Document` is passed as ``origin`` the path is evaluated as absolute path.
    """
    if isinstance(origin, Document):
        return Selector(origin.root, _absolute(expression), provider=provider)
    return Selector(origin, expression, provider=provider)


def find_element(
    origin: Document | Node | None,
    expression: str = "",
    provider: Optional[TreeProvider] = None,
) -> Optional[Node]:
    """
    Returns the first node that matches the path expression or :obj:`None`. When a
    :class:`Document` is passed as ``origin`` the path is evaluated as absolute path.
    """
    if isinstance(origin, Document):
        return _find_element(origin.root, _absolute(expression), provider=provider)
    return _find_element(origin, expression, provider=provider)


__all__ = (
    AttributeConstraint.__name__,
    DefaultQueryOptions.__name__,
    Document.__name__,
    DocumentParseFailed.__name__,
    EmptyPathMode.__name__,
    InsertionFailed.__name__,
    InvalidOperation.__name__,
    LocationKind.__name__,
    LocationPath.__name__,
    LocationStep.__name__,
    LxmlTreeProvider.__name__,
    MalformedPath.__name__,
    MatchIterator.__name__,
    NodeCreationFailed.__name__,
    NullOrigin.__name__,
    OrphanedSibling.__name__,
    PathSelectBaseException.__name__,
    RootNameMismatch.__name__,
    Selector.__name__,
    TreeProvider.__name__,
    append_element.__name__,
    attribute_value.__name__,
    build_path.__name__,
    fetch_or_create_element.__name__,
    find_element.__name__,
    insert_next_element.__name__,
    load_document.__name__,
    parse_location_step.__name__,
    prepend_element.__name__,
    selection.__name__,
    text.__name__,
)
