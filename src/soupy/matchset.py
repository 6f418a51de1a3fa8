from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, overload

from .node import all_text, document_path, tree_root

if TYPE_CHECKING:
    from .selector import Selector


class MatchSet(Sequence[Any]):
    """Nodes produced by one evaluation, in document order.

    A MatchSet never changes after it is built and can be iterated any
    number of times. `query()` searches below each member and returns a new
    MatchSet.
    """

    __slots__ = ("_nodes",)

    _nodes: tuple[Any, ...]

    def __init__(self, nodes: Iterable[Any] = ()) -> None:
        self._nodes = tuple(nodes)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> MatchSet: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return MatchSet(self._nodes[index])
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MatchSet):
            return self._nodes == other._nodes
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return f"MatchSet({list(self._nodes)!r})"

    def first(self) -> Any | None:
        return self._nodes[0] if self._nodes else None

    def last(self) -> Any | None:
        return self._nodes[-1] if self._nodes else None

    def query(self, selector: Selector, recursive: bool = True, limit: int | None = None) -> MatchSet:
        """
        Search below every member and merge the results.

        Each member is an independent scope: its own subtree is searched and
        nothing outside it is consulted. Results are merged into document
        order with duplicates removed (nested members can find the same
        node twice). When members come from different trees, each tree's
        results form one block, in the order the trees first appear.

        Args:
            selector: The selector to evaluate
            recursive: Search all descendants (True) or only direct children
            limit: Keep at most this many of the merged results

        Returns:
            A new MatchSet
        """
        from .engine import check_limit, evaluate

        check_limit(limit)
        if limit == 0 or not self._nodes:
            return MatchSet()
        if len(self._nodes) == 1:
            return evaluate(self._nodes[0], selector, recursive=recursive, limit=limit)

        # Trees are ordered by their first member; nodes within a tree by document order.
        ranks: dict[Any, int] = {}
        seen: set[Any] = set()
        merged: list[tuple[int, tuple[int, ...], Any]] = []
        for member in self._nodes:
            rank = ranks.setdefault(tree_root(member), len(ranks))
            # Each member can contribute at most `limit` nodes to the final prefix.
            for node in evaluate(member, selector, recursive=recursive, limit=limit):
                if node not in seen:
                    seen.add(node)
                    merged.append((rank, document_path(node), node))
        merged.sort(key=lambda entry: entry[:2])
        nodes = [node for _, _, node in merged]
        if limit is not None:
            nodes = nodes[:limit]
        return MatchSet(nodes)

    def filter(self, selector: Selector) -> MatchSet:
        """Keep only the members that themselves match `selector`."""
        return MatchSet(node for node in self._nodes if selector.matches(node))

    # Read-only projections

    def names(self) -> list[str | None]:
        return [node.name for node in self._nodes]

    def attrs(self, name: str) -> list[str | None]:
        """Value of attribute `name` for each member (None where absent)."""
        return [node.attrs.get(name) for node in self._nodes]

    def texts(self, separator: str = "", strip: bool = False) -> list[str]:
        return [all_text(node, separator=separator, strip=strip) for node in self._nodes]
