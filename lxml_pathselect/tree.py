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
The query and mutation functions of this package don't operate on lxml's element API
directly, but through the narrow set of capabilities that is defined by
:class:`TreeProvider`. :class:`LxmlTreeProvider` is the implementation that is used
unless another one is configured in :class:`lxml_pathselect.config.DefaultQueryOptions`
or passed explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from lxml import etree

from lxml_pathselect.exceptions import NodeCreationFailed

if TYPE_CHECKING:
    from lxml_pathselect.typing import Node


XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class TreeProvider(ABC):
    """
    Defines the interface to a tree of nodes. Only nodes that can have a name,
    attributes and children are exposed, any other content like comments is skipped
    when children and siblings are retrieved.
    """

    @abstractmethod
    def name(self, node: Node) -> str:
        pass

    @abstractmethod
    def attribute(self, node: Node, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_attribute(self, node: Node, name: str, value: str):
        """Must raise :exc:`NodeCreationFailed` for names it can't represent."""
        pass

    @abstractmethod
    def first_child(self, node: Node, name: Optional[str] = None) -> Optional[Node]:
        pass

    @abstractmethod
    def next_sibling(self, node: Node, name: Optional[str] = None) -> Optional[Node]:
        pass

    @abstractmethod
    def last_child(self, node: Node) -> Optional[Node]:
        pass

    @abstractmethod
    def parent(self, node: Node) -> Optional[Node]:
        pass

    @abstractmethod
    def root_of(self, node: Node) -> Optional[Node]:
        """Returns the root node of the document that contains ``node``."""
        pass

    @abstractmethod
    def create_node(self, context: Node, name: str) -> Node:
        """
        Creates a detached node. The ``context`` node is the designated parent and
        can be considered to resolve the name. Must raise :exc:`NodeCreationFailed`
        when no node can be created.
        """
        pass

    @abstractmethod
    def insert_first_child(self, parent: Node, node: Node) -> bool:
        pass

    @abstractmethod
    def insert_after(self, parent: Node, reference: Node, node: Node) -> bool:
        pass

    @abstractmethod
    def delete_node(self, node: Node):
        pass

    @abstractmethod
    def text(self, node: Node) -> Optional[str]:
        pass

    @abstractmethod
    def set_text(self, node: Node, text: str):
        """Must raise :exc:`NodeCreationFailed` for text it can't represent."""
        pass


class LxmlTreeProvider(TreeProvider):
    """
    Exposes :class:`lxml.etree._Element` objects. Node and attribute names are handled
    in their prefixed form, e.g. ``tei:div`` or ``xml:id``, with prefixes resolved
    against the namespace declarations that are in effect for a node.
    """

    def name(self, node: Node) -> str:
        local_name = etree.QName(node).localname
        prefix = node.prefix
        return f"{prefix}:{local_name}" if prefix else local_name

    def attribute(self, node: Node, name: str) -> Optional[str]:
        universal_name = self._universal_attribute_name(node, name)
        if universal_name is None:
            return None
        return node.get(universal_name)

    def set_attribute(self, node: Node, name: str, value: str):
        universal_name = self._universal_attribute_name(node, name)
        if universal_name is None:
            raise NodeCreationFailed(
                f"The attribute name `{name}` uses an undeclared prefix."
            )
        try:
            node.set(universal_name, value)
        except ValueError as e:
            raise NodeCreationFailed(str(e)) from e

    def first_child(self, node: Node, name: Optional[str] = None) -> Optional[Node]:
        for child in node.iterchildren(tag=etree.Element):
            if name is None or self.name(child) == name:
                return child
        return None

    def next_sibling(self, node: Node, name: Optional[str] = None) -> Optional[Node]:
        for sibling in node.itersiblings(tag=etree.Element):
            if name is None or self.name(sibling) == name:
                return sibling
        return None

    def last_child(self, node: Node) -> Optional[Node]:
        for child in node.iterchildren(reversed=True, tag=etree.Element):
            return child
        return None

    def parent(self, node: Node) -> Optional[Node]:
        return node.getparent()

    def root_of(self, node: Node) -> Optional[Node]:
        return node.getroottree().getroot()

    def create_node(self, context: Node, name: str) -> Node:
        prefix, _, local_name = name.rpartition(":")
        namespace = context.nsmap.get(prefix or None)
        if prefix and namespace is None:
            raise NodeCreationFailed(
                f"The node name `{name}` uses an undeclared prefix."
            )

        try:
            if namespace is None:
                return etree.Element(local_name)
            return etree.Element(
                etree.QName(namespace, local_name), nsmap={prefix or None: namespace}
            )
        except ValueError as e:
            raise NodeCreationFailed(f"Can't create a node named `{name}`: {e}") from e

    def insert_first_child(self, parent: Node, node: Node) -> bool:
        try:
            parent.insert(0, node)
        except (TypeError, ValueError):
            return False
        return True

    def insert_after(self, parent: Node, reference: Node, node: Node) -> bool:
        if reference.getparent() is not parent:
            return False
        try:
            reference.addnext(node)
        except (TypeError, ValueError):
            return False
        return True

    def delete_node(self, node: Node):
        parent = node.getparent()
        if parent is not None:
            parent.remove(node)

    def text(self, node: Node) -> Optional[str]:
        return node.text

    def set_text(self, node: Node, text: str):
        try:
            node.text = text
        except ValueError as e:
            raise NodeCreationFailed(f"Can't set the text {text!r}: {e}") from e

    @staticmethod
    def _universal_attribute_name(node: Node, name: str) -> Optional[str]:
        prefix, _, local_name = name.rpartition(":")
        if not prefix:
            return name
        namespace = XML_NAMESPACE if prefix == "xml" else node.nsmap.get(prefix)
        if namespace is None:
            return None
        return f"{{{namespace}}}{local_name}"


__all__ = (LxmlTreeProvider.__name__, TreeProvider.__name__)
