"""HTML tree building on top of the standard library tokenizer.

Both parsers share one tree builder. The lenient parser recovers from
stray end tags, misnested tags and unclosed elements the way browsers
roughly do; the strict parser raises :class:`~soupy.errors.ParseError` at
the first such problem.
"""

from __future__ import annotations

import logging
from html.parser import HTMLParser

from ..errors import ParseError
from ..node import Document

logger = logging.getLogger(__name__)

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Start tag -> open elements it implicitly closes (lenient mode only)
IMPLIED_END: dict[str, frozenset[str]] = {
    "p": frozenset({"p"}),
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "option": frozenset({"option"}),
    "tr": frozenset({"tr", "td", "th"}),
    "td": frozenset({"td", "th"}),
    "th": frozenset({"td", "th"}),
}


class _TreeBuilder(HTMLParser):
    """Receives tokenizer callbacks and appends nodes to a Document."""

    document: Document
    open_elements: list[tuple[int, str]]
    strict: bool
    keep_whitespace: bool
    source: str

    def __init__(self, source: str, strict: bool, keep_whitespace: bool) -> None:
        super().__init__(convert_charrefs=True)
        self.document = Document()
        self.open_elements = []
        self.strict = strict
        self.keep_whitespace = keep_whitespace
        self.source = source

    @property
    def current(self) -> int:
        if self.open_elements:
            return self.open_elements[-1][0]
        return 0

    def _error(self, code: str, tag_name: str | None = None) -> None:
        line, offset = self.getpos()
        if self.strict:
            raise ParseError(code, line=line, column=offset + 1, tag_name=tag_name, source=self.source)
        logger.debug("Recovered from %s (%s) at %d:%d", code, tag_name, line, offset + 1)

    def _attrs(self, attrs: list[tuple[str, str | None]]) -> dict[str, str]:
        result: dict[str, str] = {}
        for name, value in attrs:
            # First occurrence wins for duplicate attributes
            if name not in result:
                result[name] = value if value is not None else ""
        return result

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if not self.strict:
            closes = IMPLIED_END.get(tag)
            while closes and self.open_elements and self.open_elements[-1][1] in closes:
                self.open_elements.pop()

        index = self.document.append_element(self.current, tag, self._attrs(attrs))
        if tag not in VOID_ELEMENTS:
            self.open_elements.append((index, tag))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.document.append_element(self.current, tag, self._attrs(attrs))

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            self._error("end-tag-on-void-element", tag)
            return

        for depth in range(len(self.open_elements) - 1, -1, -1):
            if self.open_elements[depth][1] == tag:
                break
        else:
            self._error("unexpected-end-tag", tag)
            return

        if depth != len(self.open_elements) - 1:
            self._error("mismatched-end-tag", tag)
        del self.open_elements[depth:]

    def handle_data(self, data: str) -> None:
        if not data:
            return
        if not self.keep_whitespace and not data.strip():
            return
        self.document.append_text(self.current, data)

    def handle_comment(self, data: str) -> None:
        self.document.append_comment(self.current, data)

    def finish(self) -> Document:
        self.close()
        if self.open_elements:
            self._error("expected-closing-tag-but-got-eof", self.open_elements[-1][1])
            self.open_elements.clear()
        return self.document.freeze()


def _decode(source: str | bytes | bytearray) -> str:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8", errors="replace")
    if not isinstance(source, str):
        raise TypeError(f"Expected str or bytes, got {type(source).__name__}")
    return source


class LenientHTMLParser:
    """Error-tolerant HTML parser. Never raises on malformed markup."""

    __slots__ = ("keep_whitespace",)

    keep_whitespace: bool

    def __init__(self, keep_whitespace: bool = True) -> None:
        self.keep_whitespace = bool(keep_whitespace)

    def parse(self, source: str | bytes | bytearray) -> Document:
        text = _decode(source)
        builder = _TreeBuilder(text, strict=False, keep_whitespace=self.keep_whitespace)
        builder.feed(text)
        return builder.finish()


class StrictHTMLParser:
    """HTML parser that rejects stray, misnested or unclosed tags.

    Raises:
        ParseError: On the first structural error, with line and column
    """

    __slots__ = ("keep_whitespace",)

    keep_whitespace: bool

    def __init__(self, keep_whitespace: bool = True) -> None:
        self.keep_whitespace = bool(keep_whitespace)

    def parse(self, source: str | bytes | bytearray) -> Document:
        text = _decode(source)
        builder = _TreeBuilder(text, strict=True, keep_whitespace=self.keep_whitespace)
        builder.feed(text)
        return builder.finish()
