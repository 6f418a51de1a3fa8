from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .engine import check_limit, evaluate
from .matchset import MatchSet
from .selector import (
    ANY,
    And,
    Selector,
    attr,
    attr_value,
    class_,
    id_,
    tag,
    text,
)


class Query:
    """A selector bound to a source node (or MatchSet), a scope and a limit.

    Every refinement returns a new Query; nothing runs until the query is
    iterated or one of `all()`, `first()` or `len()` is called.
    """

    __slots__ = ("_limit", "_recursive", "selector", "source")

    source: Any
    selector: Selector
    _recursive: bool
    _limit: int | None

    def __init__(
        self,
        source: Any,
        selector: Selector = ANY,
        recursive: bool = True,
        limit: int | None = None,
    ) -> None:
        check_limit(limit)
        self.source = source
        self.selector = selector
        self._recursive = bool(recursive)
        self._limit = limit

    def __repr__(self) -> str:
        return f"Query({self.selector!r}, recursive={self._recursive}, limit={self._limit})"

    def _replace(self, **changes: Any) -> Query:
        fields = {
            "source": self.source,
            "selector": self.selector,
            "recursive": self._recursive,
            "limit": self._limit,
        }
        fields.update(changes)
        return Query(**fields)

    def where(self, selector: Selector) -> Query:
        """AND another selector into this query."""
        if self.selector is ANY:
            return self._replace(selector=selector)
        return self._replace(selector=And(self.selector, selector))

    def tag(self, name: Any) -> Query:
        return self.where(tag(name))

    def attr(self, name: Any, value: Any = True) -> Query:
        return self.where(attr(name, value))

    def attr_name(self, name: Any) -> Query:
        return self.where(attr(name))

    def attr_value(self, value: Any) -> Query:
        return self.where(attr_value(value))

    def class_(self, token: str) -> Query:
        return self.where(class_(token))

    def id_(self, value: str) -> Query:
        return self.where(id_(value))

    def text(self, value: Any) -> Query:
        return self.where(text(value))

    def recursive(self) -> Query:
        """Search the whole subtree (the default)."""
        return self._replace(recursive=True)

    def strict(self) -> Query:
        """Only match direct children of the source."""
        return self._replace(recursive=False)

    def limit(self, limit: int | None) -> Query:
        return self._replace(limit=limit)

    @property
    def is_recursive(self) -> bool:
        return self._recursive

    def all(self) -> MatchSet:
        if isinstance(self.source, MatchSet):
            return self.source.query(self.selector, recursive=self._recursive, limit=self._limit)
        return evaluate(self.source, self.selector, recursive=self._recursive, limit=self._limit)

    def first(self) -> Any | None:
        if self._limit == 0:
            return None
        return self.limit(1).all().first()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())
