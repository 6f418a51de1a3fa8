# CSS selector strings for soupy
# Compiles a subset of CSS selector syntax into the same Selector values the
# builder functions produce.

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .errors import SelectorError
from .matcher import Pattern, TokenSet
from .selector import (
    ANY,
    AdjacentSibling,
    And,
    AttributeEquals,
    AttributeIs,
    AttributePresent,
    Child,
    Descendant,
    HasClass,
    IdIs,
    Not,
    Or,
    Selector,
    TagIs,
)

if TYPE_CHECKING:
    from .matchset import MatchSet

_WHITESPACE: str = " \t\n\r\f"
_COMBINATORS: str = ">+"

# Attribute operators that compile to a regular expression around the escaped value
_PATTERN_OPERATORS: dict[str, str] = {
    "^=": "^{}",
    "$=": "{}\\Z",
    "*=": "{}",
    "|=": "^{}(?:-|\\Z)",
}

_NEVER: Selector = Not(ANY)


class CSSCompiler:
    """Recursive-descent compiler from a selector string to a Selector.

    Supported: type, ``*``, ``#id``, ``.class``, ``[attr]``, ``[attr=v]``,
    ``[attr~=v]``, ``[attr^=v]``, ``[attr$=v]``, ``[attr*=v]``,
    ``[attr|=v]``, ``:not(...)``, the descendant (whitespace), child
    (``>``) and adjacent sibling (``+``) combinators, and comma lists.
    Names are case-sensitive.
    """

    __slots__ = ("length", "pos", "source")

    source: str
    pos: int
    length: int

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.length = len(source)

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < self.length:
            return self.source[pos]
        return ""

    def _error(self, message: str) -> SelectorError:
        return SelectorError(f"{message} at position {self.pos} in {self.source!r}")

    def _skip_whitespace(self) -> bool:
        start = self.pos
        while self.pos < self.length and self.source[self.pos] in _WHITESPACE:
            self.pos += 1
        return self.pos > start

    def _is_name_char(self, ch: str) -> bool:
        return ch.isalnum() or ch in "_-" or ord(ch) > 127

    def _read_name(self, what: str) -> str:
        start = self.pos
        while self.pos < self.length and self._is_name_char(self.source[self.pos]):
            self.pos += 1
        if self.pos == start:
            raise self._error(f"Expected {what}")
        return self.source[start : self.pos]

    def _read_value(self) -> str:
        quote = self._peek()
        if quote not in "\"'":
            start = self.pos
            while self.pos < self.length and self.source[self.pos] not in _WHITESPACE + "]":
                self.pos += 1
            return self.source[start : self.pos]

        self.pos += 1
        parts: list[str] = []
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(parts)
            if ch == "\\" and self.pos + 1 < self.length:
                self.pos += 1
                ch = self.source[self.pos]
            parts.append(ch)
            self.pos += 1
        raise self._error("Unterminated string")

    def compile(self) -> Selector:
        self._skip_whitespace()
        selector = self._selector_list(nested=False)
        if self.pos < self.length:
            raise self._error(f"Unexpected character {self._peek()!r}")
        return selector

    def _selector_list(self, nested: bool) -> Selector:
        result = self._complex()
        while self._peek() == ",":
            self.pos += 1
            self._skip_whitespace()
            result = Or(result, self._complex())
        if nested and self._peek() != ")":
            raise self._error("Expected )")
        return result

    def _complex(self) -> Selector:
        result = self._compound()
        while True:
            had_space = self._skip_whitespace()
            ch = self._peek()
            if ch and ch in _COMBINATORS:
                self.pos += 1
                self._skip_whitespace()
                target = self._compound()
                if ch == ">":
                    result = Child(result, target)
                else:
                    result = AdjacentSibling(result, target)
            elif had_space and ch and ch not in ",)":
                result = Descendant(result, self._compound())
            else:
                return result

    def _compound(self) -> Selector:
        parts: list[Selector] = []
        while self.pos < self.length:
            ch = self._peek()
            if ch == "*":
                self.pos += 1
                parts.append(ANY)
            elif ch == "#":
                self.pos += 1
                parts.append(IdIs(self._read_name("identifier after #")))
            elif ch == ".":
                self.pos += 1
                parts.append(HasClass(self._read_name("identifier after .")))
            elif ch == "[":
                parts.append(self._attribute())
            elif ch == ":":
                parts.append(self._pseudo())
            elif self._is_name_char(ch) and not parts:
                parts.append(TagIs(self._read_name("tag name")))
            else:
                break

        if not parts:
            if self.pos >= self.length:
                raise self._error("Expected selector")
            raise self._error(f"Unexpected character {self._peek()!r}")

        result = parts[0]
        for part in parts[1:]:
            result = And(result, part)
        return result

    def _attribute(self) -> Selector:
        self.pos += 1  # [
        self._skip_whitespace()
        name = self._read_name("attribute name")
        self._skip_whitespace()

        if self._peek() == "]":
            self.pos += 1
            return AttributePresent(name)

        operator = self._peek()
        if operator == "=":
            self.pos += 1
        elif operator and operator in "~|^$*" and self._peek(1) == "=":
            operator += "="
            self.pos += 2
        else:
            raise self._error("Expected attribute operator")

        self._skip_whitespace()
        value = self._read_value()
        self._skip_whitespace()
        if self._peek() != "]":
            raise self._error("Expected ]")
        self.pos += 1

        return _attribute_selector(name, operator, value)

    def _pseudo(self) -> Selector:
        self.pos += 1  # :
        name = self._read_name("pseudo-class name")
        if name.lower() != "not":
            raise self._error(f"Unsupported pseudo-class :{name}")
        if self._peek() != "(":
            raise self._error("Expected ( after :not")
        self.pos += 1
        self._skip_whitespace()
        inner = self._selector_list(nested=True)
        self.pos += 1  # )
        return Not(inner)


def _attribute_selector(name: str, operator: str, value: str) -> Selector:
    if operator == "=":
        return AttributeEquals(name, value)
    if operator == "~=":
        # A token with whitespace, or an empty one, never matches
        if not value or value.split() != [value]:
            return And(AttributePresent(name), _NEVER)
        return AttributeIs(name, TokenSet(value))
    if not value and operator != "|=":
        return And(AttributePresent(name), _NEVER)
    template = _PATTERN_OPERATORS[operator]
    return AttributeIs(name, Pattern(template.format(re.escape(value))))


def compile_css(selector: str) -> Selector:
    """
    Compile a CSS selector string.

    Raises:
        SelectorError: If the string is empty or not valid in the supported subset
        CapabilityError: If it uses ^=, $=, *= or |= while pattern matching is disabled
    """
    if not isinstance(selector, str):
        raise TypeError(f"Expected a string, got {type(selector).__name__}")
    if not selector.strip():
        raise SelectorError("Empty selector")
    return CSSCompiler(selector).compile()


def select(node: Any, selector: str, limit: int | None = None) -> MatchSet:
    """Query the subtree below `node` with a CSS selector string."""
    from .engine import evaluate

    return evaluate(node, compile_css(selector), limit=limit)
