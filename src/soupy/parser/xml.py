"""XML documents, parsed with :mod:`xml.etree.ElementTree`.

Element text and tails become text nodes so the resulting tree has the
same shape as an HTML one: elements, text and comments in source order.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from typing import IO, Any

from ..errors import ParseError
from ..node import Document


def _local_name(tag: str) -> str:
    # "{uri}local" -> "local"
    if tag.startswith("{"):
        return tag.rpartition("}")[2]
    return tag


class XMLParser:
    """Parse XML into a Document.

    Names are case-sensitive. With ``strip_namespaces=True`` element and
    attribute names lose their ``{uri}`` prefix.
    """

    __slots__ = ("keep_whitespace", "strip_namespaces")

    keep_whitespace: bool
    strip_namespaces: bool

    def __init__(self, keep_whitespace: bool = True, strip_namespaces: bool = False) -> None:
        self.keep_whitespace = bool(keep_whitespace)
        self.strip_namespaces = bool(strip_namespaces)

    def parse(self, source: str | bytes | IO[Any]) -> Document:
        """
        Parse an XML document.

        Args:
            source: XML text, bytes, or a readable file object

        Returns:
            A frozen Document

        Raises:
            ParseError: If the input is not well-formed XML
        """
        target = ET.TreeBuilder(insert_comments=True)
        parser = ET.XMLParser(target=target)
        text: str | None = None
        try:
            if isinstance(source, (str, bytes, bytearray)):
                if isinstance(source, str):
                    text = source
                parser.feed(source)
            else:
                for chunk in iter(lambda: source.read(65536), ""):
                    if not chunk:
                        break
                    parser.feed(chunk)
            root = parser.close()
        except ET.ParseError as exc:
            line, column = exc.position
            code = "empty-document" if exc.code == 3 else "malformed-xml"  # XML_ERROR_NO_ELEMENTS
            raise ParseError(code, line=line, column=column + 1, source=text) from exc

        document = Document()
        self._build(document, root)
        return document.freeze()

    def _name(self, name: str) -> str:
        return _local_name(name) if self.strip_namespaces else name

    def _text(self, document: Document, parent: int, data: str | None) -> None:
        if not data:
            return
        if not self.keep_whitespace and not data.strip():
            return
        document.append_text(parent, data)

    def _append(self, document: Document, parent: int, element: ET.Element) -> int | None:
        if element.tag is ET.Comment:
            document.append_comment(parent, element.text or "")
            return None
        if element.tag is ET.ProcessingInstruction:
            return None
        attrs = {self._name(key): value for key, value in element.attrib.items()}
        index = document.append_element(parent, self._name(element.tag), attrs)
        self._text(document, index, element.text)
        return index

    def _build(self, document: Document, root: ET.Element) -> None:
        index = self._append(document, 0, root)
        if index is None:
            return

        # Entries: (children iterator, element index, tail to emit after the subtree, parent index)
        stack: list[tuple[Iterator[ET.Element], int, str | None, int]] = [(iter(root), index, None, 0)]
        while stack:
            children, current, tail, parent = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                self._text(document, parent, tail)
                continue
            child_index = self._append(document, current, child)
            if child_index is None:
                self._text(document, current, child.tail)
            else:
                stack.append((iter(child), child_index, child.tail, current))
