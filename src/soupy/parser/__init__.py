"""Parsers that turn source documents into queryable :class:`~soupy.node.Document` trees."""

from __future__ import annotations

from typing import Any, Protocol

from ..node import Document
from .html import LenientHTMLParser, StrictHTMLParser
from .xml import XMLParser


class Parser(Protocol):
    def parse(self, source: Any) -> Document: ...


__all__ = ["LenientHTMLParser", "Parser", "StrictHTMLParser", "XMLParser"]
