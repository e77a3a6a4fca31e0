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

"""These are the specific exceptions of lxml-pathselect."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lxml_pathselect.typing import Loader


class PathSelectBaseException(Exception):
    pass


class DocumentParseFailed(PathSelectBaseException):
    """Raised when no loader could turn a source into a document."""

    def __init__(self, source: Any, excuses: dict[Loader, str | Exception]):
        self.source = source
        self.excuses = excuses

    def __str__(self):
        excuses = ", ".join(
            f"{loader.__name__}: {excuse}" for loader, excuse in self.excuses.items()
        )
        return f"Couldn't load {self.source!r} with these loaders: {excuses}"


class InsertionFailed(PathSelectBaseException):
    """
    Raised when new nodes couldn't be linked into a tree. Any nodes that were created
    during the failed operation have been removed from the tree when this is raised.
    """

    pass


class NodeCreationFailed(InsertionFailed):
    """Raised when the tree provider refuses to create a node or set an attribute."""

    pass


class InvalidCodePath(PathSelectBaseException, RuntimeError):
    """Raised when a code path that is not expected to be executed is reached."""

    def __init__(self):  # pragma: no cover
        super().__init__(
            "An unintended path was taken through the code. Please report this bug."
        )


class InvalidOperation(PathSelectBaseException):
    """Raised when an invalid operation is attempted by the client code."""

    pass


class MalformedPath(PathSelectBaseException, ValueError):
    """Raised when a path expression can't be parsed."""

    def __init__(self, expression: str, position: int, message: str):
        self.expression = expression
        self.position = position
        self.message = message

    def __str__(self):
        return (
            f"Malformed path at character {self.position} (`{self.expression}`): "
            f"{self.message}"
        )


class NullOrigin(InvalidOperation):
    """Raised when an operation is given an absent node as origin."""

    def __init__(self, message: str = "The origin node is absent."):
        super().__init__(message)


class OrphanedSibling(InvalidOperation):
    """Raised when a node shall be added next to a node without a parent."""

    def __init__(self):
        super().__init__("The sibling node has no parent.")


class RootNameMismatch(PathSelectBaseException):
    """
    Raised when the first location step of an absolute path names another node than
    the document's root node.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual

    def __str__(self):
        return (
            f"The path addresses a root node named `{self.expected}`, but the "
            f"document's root node is named `{self.actual}`."
        )


__all__ = (
    DocumentParseFailed.__name__,
    InsertionFailed.__name__,
    InvalidCodePath.__name__,
    InvalidOperation.__name__,
    MalformedPath.__name__,
    NodeCreationFailed.__name__,
    NullOrigin.__name__,
    OrphanedSibling.__name__,
    PathSelectBaseException.__name__,
    RootNameMismatch.__name__,
)
