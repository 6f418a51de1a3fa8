# Attribute value rules used by the selector leaves.
# Every rule answers one question: does this (possibly absent) string match?

from __future__ import annotations

import re
from typing import Any

from . import config
from .errors import CapabilityError, PatternError, SelectorError


class Rule:
    """Base class for value rules. Rules are immutable and compare by value."""

    __slots__ = ()

    def matches(self, value: str | None) -> bool:
        raise NotImplementedError

    def _key(self) -> tuple[Any, ...]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, *self._key()))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")


class Exact(Rule):
    """Case-sensitive equality."""

    __slots__ = ("value",)

    value: str

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            raise SelectorError(f"Expected a string, got {type(value).__name__}")
        object.__setattr__(self, "value", value)

    def matches(self, value: str | None) -> bool:
        return value is not None and value == self.value

    def _key(self) -> tuple[Any, ...]:
        return (self.value,)

    def __repr__(self) -> str:
        return f"Exact({self.value!r})"


class TokenSet(Rule):
    """Whitespace-separated word match, as used for the class attribute."""

    __slots__ = ("token",)

    token: str

    def __init__(self, token: str) -> None:
        if not isinstance(token, str):
            raise SelectorError(f"Expected a string, got {type(token).__name__}")
        if not token or token.split() != [token]:
            raise SelectorError(f"Token must be a single non-empty word, got {token!r}")
        object.__setattr__(self, "token", token)

    def matches(self, value: str | None) -> bool:
        if not value:
            return False
        return self.token in value.split()

    def _key(self) -> tuple[Any, ...]:
        return (self.token,)

    def __repr__(self) -> str:
        return f"TokenSet({self.token!r})"


class Present(Rule):
    """Matches any value as long as there is one."""

    __slots__ = ()

    def matches(self, value: str | None) -> bool:
        return value is not None

    def _key(self) -> tuple[Any, ...]:
        return ()

    def __repr__(self) -> str:
        return "Present()"


class Pattern(Rule):
    """Regular expression search against the value.

    The expression is compiled here, once. A bad expression fails now
    rather than during evaluation.

    Raises:
        CapabilityError: If pattern matching is disabled
        PatternError: If the expression does not compile
    """

    __slots__ = ("regex",)

    regex: re.Pattern[str]

    def __init__(self, pattern: str | re.Pattern[str], flags: int = 0) -> None:
        if not config.PATTERNS_ENABLED:
            raise CapabilityError()
        if isinstance(pattern, re.Pattern):
            if flags:
                raise SelectorError("Cannot pass flags with a compiled pattern")
            compiled = pattern
        elif isinstance(pattern, str):
            try:
                compiled = re.compile(pattern, flags)
            except re.error as exc:
                raise PatternError(pattern, str(exc)) from exc
        else:
            raise SelectorError(f"Expected a pattern string, got {type(pattern).__name__}")
        if not isinstance(compiled.pattern, str):
            raise SelectorError("Byte patterns cannot match attribute values")
        object.__setattr__(self, "regex", compiled)

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def flags(self) -> int:
        """Flags given at compile time, without the implicit re.UNICODE."""
        return int(self.regex.flags & ~re.UNICODE)

    def matches(self, value: str | None) -> bool:
        return value is not None and self.regex.search(value) is not None

    def _key(self) -> tuple[Any, ...]:
        return (self.regex.pattern, self.regex.flags)

    def __repr__(self) -> str:
        if self.flags:
            return f"Pattern({self.regex.pattern!r}, flags={self.flags})"
        return f"Pattern({self.regex.pattern!r})"


def coerce_rule(value: Any) -> Rule:
    """Turn caller input into a rule.

    - A string means exact match.
    - A compiled ``re.Pattern`` means pattern match.
    - ``True`` means the value only has to be present.
    - A Rule is returned unchanged.
    """
    if isinstance(value, Rule):
        return value
    if value is True:
        return Present()
    if isinstance(value, str):
        return Exact(value)
    if isinstance(value, re.Pattern):
        return Pattern(value)
    raise SelectorError(f"Cannot match against {value!r}")
