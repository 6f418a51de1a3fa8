"""Soup: a parsed document plus the query entry points."""

from __future__ import annotations

from collections.abc import Iterator
from typing import IO, Any

from .css import compile_css
from .engine import evaluate
from .matchset import MatchSet
from .node import ArenaNode, Document, iter_descendants
from .parser import LenientHTMLParser, StrictHTMLParser, XMLParser
from .query import Query
from .selector import Selector


class Soup:
    __slots__ = ("document",)

    document: Document

    def __init__(self, document: Document) -> None:
        if not isinstance(document, Document):
            raise TypeError(f"Expected a Document, got {type(document).__name__}")
        self.document = document

    @classmethod
    def html(cls, source: str | bytes, keep_whitespace: bool = True) -> Soup:
        """Parse HTML leniently. Malformed markup is repaired, never rejected."""
        return cls(LenientHTMLParser(keep_whitespace=keep_whitespace).parse(source))

    @classmethod
    def html_strict(cls, source: str | bytes, keep_whitespace: bool = True) -> Soup:
        """
        Parse HTML, rejecting stray, misnested or unclosed tags.

        Raises:
            ParseError: If the markup is malformed
        """
        return cls(StrictHTMLParser(keep_whitespace=keep_whitespace).parse(source))

    @classmethod
    def xml(cls, source: str | bytes | IO[Any], keep_whitespace: bool = True, strip_namespaces: bool = False) -> Soup:
        """
        Parse an XML document.

        Raises:
            ParseError: If the document is not well-formed
        """
        parser = XMLParser(keep_whitespace=keep_whitespace, strip_namespaces=strip_namespaces)
        return cls(parser.parse(source))

    def __repr__(self) -> str:
        return f"<Soup nodes={len(self.document)}>"

    def __iter__(self) -> Iterator[ArenaNode]:
        """Every node of the document in document order, root excluded."""
        return iter_descendants(self.root)

    @property
    def root(self) -> ArenaNode:
        return self.document.root

    def query(self, selector: Selector, recursive: bool = True, limit: int | None = None) -> MatchSet:
        return evaluate(self.root, selector, recursive=recursive, limit=limit)

    def select(self, css: str, limit: int | None = None) -> MatchSet:
        """Query the document using a CSS selector string."""
        return evaluate(self.root, compile_css(css), limit=limit)

    # Fluent entry points, mirroring Query

    def _query(self) -> Query:
        return Query(self.root)

    def where(self, selector: Selector) -> Query:
        return self._query().where(selector)

    def tag(self, name: Any) -> Query:
        return self._query().tag(name)

    def attr(self, name: Any, value: Any = True) -> Query:
        return self._query().attr(name, value)

    def attr_name(self, name: Any) -> Query:
        return self._query().attr_name(name)

    def attr_value(self, value: Any) -> Query:
        return self._query().attr_value(value)

    def class_(self, token: str) -> Query:
        return self._query().class_(token)

    def id_(self, value: str) -> Query:
        return self._query().id_(value)

    def text(self, value: Any) -> Query:
        return self._query().text(value)

    def strict(self) -> Query:
        return self._query().strict()

    def recursive(self) -> Query:
        return self._query().recursive()
