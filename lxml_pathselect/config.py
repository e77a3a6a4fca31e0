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

from enum import Enum
from typing import ClassVar

from lxml_pathselect.tree import LxmlTreeProvider, TreeProvider


class EmptyPathMode(Enum):
    """Determines what an empty path expression selects relative to its origin."""

    Self = "self"
    """The origin node itself."""
    Children = "children"
    """The origin's child nodes, hence a lookup yields the first child."""


class DefaultQueryOptions:
    """
    This object's class variables are used to configure the evaluation of path
    expressions where no specific arguments are passed to the query and mutation
    functions.

    .. attention::

        Use this once to define behaviour on *application level*. Think thrice whether
        you want to use this facility in a library.
    """

    empty_path: ClassVar[EmptyPathMode] = EmptyPathMode.Self
    """
    How an empty path expression is interpreted. Default:
    :attr:`EmptyPathMode.Self`.
    """
    tree_provider: ClassVar[TreeProvider] = LxmlTreeProvider()
    """The :class:`TreeProvider` that queries and mutations are performed with."""

    @classmethod
    def reset_defaults(cls):
        """Restores the factory settings."""
        cls.empty_path = EmptyPathMode.Self
        cls.tree_provider = LxmlTreeProvider()


__all__ = (DefaultQueryOptions.__name__, EmptyPathMode.__name__)
