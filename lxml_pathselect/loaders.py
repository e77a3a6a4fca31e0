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
Loaders turn the sources that a :class:`lxml_pathselect.Document` is instantiated
with into an lxml tree. Each loader either returns a tree or a string that explains
why it didn't load the source.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from io import IOBase
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, cast

from lxml import etree

from lxml_pathselect.exceptions import DocumentParseFailed

if TYPE_CHECKING:
    from lxml_pathselect.typing import Loader, LoaderResult


logger = logging.getLogger(__name__)


def buffer_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    if isinstance(data, IOBase):
        try:
            return etree.parse(cast(IO, data), parser=parser)
        except etree.XMLSyntaxError as e:
            return f"The buffer's content isn't well-formed: {e}"
    return "The input value is not a buffer."


def etree_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    if isinstance(data, etree._ElementTree):
        return deepcopy(data)
    if isinstance(data, etree._Element):
        return etree.ElementTree(element=deepcopy(data), parser=parser)
    return "The input value is neither an lxml tree nor element."


def path_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    if isinstance(data, Path):
        try:
            return etree.parse(str(data.resolve()), parser=parser)
        except (OSError, etree.XMLSyntaxError) as e:
            return f"The file couldn't be parsed: {e}"
    return "The input value is not a path."


def text_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    if isinstance(data, str):
        data = data.encode()
    if isinstance(data, bytes):
        try:
            return etree.ElementTree(element=etree.fromstring(data, parser))
        except etree.XMLSyntaxError as e:
            return f"The text isn't well-formed: {e}"
    return "The input value is neither a string nor bytes."


configured_loaders: list[Loader] = [
    path_loader,
    buffer_loader,
    text_loader,
    etree_loader,
]


def load_tree(source: Any, parser: etree.XMLParser) -> etree._ElementTree:
    """
    Tries the :data:`configured_loaders` in their order and returns the tree from the
    first one that succeeds.

    :raises DocumentParseFailed: When no loader could load the source.
    """
    excuses: dict[Loader, str | Exception] = {}
    for loader in configured_loaders:
        result = loader(source, parser)
        if isinstance(result, etree._ElementTree):
            return result
        logger.debug("%s didn't load the source: %s", loader.__name__, result)
        excuses[loader] = result
    raise DocumentParseFailed(source, excuses)


__all__ = ("configured_loaders", load_tree.__name__)
