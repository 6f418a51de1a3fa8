"""Query HTML and XML trees with composable, immutable selectors."""

from __future__ import annotations

import logging

from .css import compile_css, select
from .engine import evaluate, matches
from .errors import CapabilityError, ParseError, PatternError, SelectorError, StructuralFaultError
from .matchset import MatchSet
from .node import ArenaNode, Document, Node
from .parser import LenientHTMLParser, StrictHTMLParser, XMLParser
from .query import Query
from .selector import (
    ANY,
    AdjacentSibling,
    And,
    AnyNode,
    AttributeEquals,
    AttributeMatchesPattern,
    AttributePresent,
    AttributeValue,
    Child,
    Descendant,
    HasClass,
    IdIs,
    Not,
    Or,
    Selector,
    TagIs,
    TextMatches,
    adjacent_to,
    and_,
    any_,
    attr,
    attr_pattern,
    attr_value,
    child_of,
    class_,
    descendant_of,
    id_,
    not_,
    or_,
    tag,
    text,
    text_pattern,
)
from .soup import Soup

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ANY",
    "AdjacentSibling",
    "And",
    "AnyNode",
    "ArenaNode",
    "AttributeEquals",
    "AttributeMatchesPattern",
    "AttributePresent",
    "AttributeValue",
    "CapabilityError",
    "Child",
    "Descendant",
    "Document",
    "HasClass",
    "IdIs",
    "LenientHTMLParser",
    "MatchSet",
    "Node",
    "Not",
    "Or",
    "ParseError",
    "PatternError",
    "Query",
    "Selector",
    "SelectorError",
    "Soup",
    "StrictHTMLParser",
    "StructuralFaultError",
    "TagIs",
    "TextMatches",
    "XMLParser",
    "adjacent_to",
    "and_",
    "any_",
    "attr",
    "attr_pattern",
    "attr_value",
    "child_of",
    "class_",
    "compile_css",
    "descendant_of",
    "evaluate",
    "id_",
    "matches",
    "not_",
    "or_",
    "select",
    "tag",
    "text",
    "text_pattern",
]
