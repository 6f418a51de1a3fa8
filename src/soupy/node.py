"""Read-only node contract and the arena tree the bundled parsers build.

Any object that provides ``name``, ``attrs``, ``children``, ``parent`` and
``text`` can be queried. The parsers in :mod:`soupy.parser` produce a
:class:`Document`, an arena where every node is an integer position and
parent/child links are indices, so the tree holds no reference cycles.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from . import config
from .errors import StructuralFaultError

if TYPE_CHECKING:
    from .matchset import MatchSet
    from .selector import Selector


@runtime_checkable
class Node(Protocol):
    """What the matching engine needs from a tree position.

    Every accessor must be O(1) or O(fan-out). Two objects that denote the
    same position must compare equal and hash equally.
    """

    @property
    def name(self) -> str | None: ...

    @property
    def attrs(self) -> Mapping[str, str]: ...

    @property
    def children(self) -> Sequence[Any]: ...

    @property
    def parent(self) -> Any | None: ...

    @property
    def text(self) -> str | None: ...


KIND_DOCUMENT: str = "#document"
KIND_ELEMENT: str = "element"
KIND_TEXT: str = "#text"
KIND_COMMENT: str = "#comment"

_EMPTY_ATTRS: Mapping[str, str] = MappingProxyType({})


class Document:
    """Arena storage for one parsed tree.

    Position 0 is the document root. Nodes are appended under an existing
    parent and get the next free position, so a builder that appends in
    source order numbers the tree in document order.
    """

    __slots__ = ("_attrs", "_children", "_data", "_frozen", "_kinds", "_names", "_parents", "_sibling_index")

    _kinds: list[str]
    _names: list[str | None]
    _attrs: list[Mapping[str, str]]
    _data: list[str | None]
    _parents: list[int]
    _children: list[list[int]]
    _sibling_index: list[int]
    _frozen: bool

    def __init__(self) -> None:
        self._kinds = [KIND_DOCUMENT]
        self._names = [None]
        self._attrs = [_EMPTY_ATTRS]
        self._data = [None]
        self._parents = [-1]
        self._children = [[]]
        self._sibling_index = [0]
        self._frozen = False

    def __len__(self) -> int:
        return len(self._kinds)

    def __repr__(self) -> str:
        return f"<Document nodes={len(self)}>"

    @property
    def root(self) -> ArenaNode:
        return ArenaNode(self, 0)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> Document:
        """Disallow further appends. Parsers call this before handing the tree out."""
        self._frozen = True
        return self

    def node(self, index: int) -> ArenaNode:
        if not 0 <= index < len(self._kinds):
            raise IndexError(f"No node at position {index}")
        return ArenaNode(self, index)

    def _append(self, parent: int, kind: str, name: str | None, attrs: Mapping[str, str], data: str | None) -> int:
        if self._frozen:
            raise RuntimeError("Document is frozen")
        if not 0 <= parent < len(self._kinds):
            raise IndexError(f"No parent at position {parent}")
        if self._kinds[parent] not in (KIND_DOCUMENT, KIND_ELEMENT):
            raise ValueError(f"Node {parent} ({self._kinds[parent]}) cannot have children")

        index = len(self._kinds)
        siblings = self._children[parent]
        self._kinds.append(kind)
        self._names.append(name)
        self._attrs.append(attrs)
        self._data.append(data)
        self._parents.append(parent)
        self._children.append([])
        self._sibling_index.append(len(siblings))
        siblings.append(index)
        return index

    def append_element(self, parent: int, name: str, attrs: Mapping[str, str] | None = None) -> int:
        """Append an element and return its position."""
        frozen_attrs = MappingProxyType(dict(attrs)) if attrs else _EMPTY_ATTRS
        return self._append(parent, KIND_ELEMENT, name, frozen_attrs, None)

    def append_text(self, parent: int, data: str) -> int:
        """Append text, merging into the previous sibling when that is text too."""
        siblings = self._children[parent] if 0 <= parent < len(self._children) else []
        if siblings and not self._frozen:
            last = siblings[-1]
            if self._kinds[last] == KIND_TEXT:
                self._data[last] = (self._data[last] or "") + data
                return last
        return self._append(parent, KIND_TEXT, None, _EMPTY_ATTRS, data)

    def append_comment(self, parent: int, data: str) -> int:
        return self._append(parent, KIND_COMMENT, None, _EMPTY_ATTRS, data)


class ArenaNode:
    """A view of one position in a :class:`Document`.

    Views are created on demand and hold nothing but the document and the
    position, so building one never copies tree structure.
    """

    __slots__ = ("document", "index")

    document: Document
    index: int

    def __init__(self, document: Document, index: int) -> None:
        self.document = document
        self.index = index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArenaNode):
            return NotImplemented
        return self.document is other.document and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.document), self.index))

    def __repr__(self) -> str:
        kind = self.kind
        if kind == KIND_ELEMENT:
            return f"<{self.name} #{self.index}>"
        if kind == KIND_DOCUMENT:
            return "<#document>"
        data = self.document._data[self.index] or ""
        if len(data) > 20:
            data = data[:17] + "..."
        return f"<{kind} #{self.index} {data!r}>"

    @property
    def kind(self) -> str:
        return self.document._kinds[self.index]

    @property
    def name(self) -> str | None:
        return self.document._names[self.index]

    @property
    def attrs(self) -> Mapping[str, str]:
        return self.document._attrs[self.index]

    @property
    def children(self) -> tuple[ArenaNode, ...]:
        doc = self.document
        return tuple(ArenaNode(doc, i) for i in doc._children[self.index])

    @property
    def parent(self) -> ArenaNode | None:
        parent = self.document._parents[self.index]
        if parent < 0:
            return None
        return ArenaNode(self.document, parent)

    @property
    def text(self) -> str | None:
        """Text payload. Only text nodes have one; see `all_text()` for elements."""
        if self.kind == KIND_TEXT:
            return self.document._data[self.index]
        return None

    @property
    def data(self) -> str | None:
        """Raw character data of a text or comment node."""
        return self.document._data[self.index]

    @property
    def previous_sibling(self) -> ArenaNode | None:
        doc = self.document
        parent = doc._parents[self.index]
        position = doc._sibling_index[self.index]
        if parent < 0 or position == 0:
            return None
        return ArenaNode(doc, doc._children[parent][position - 1])

    @property
    def next_sibling(self) -> ArenaNode | None:
        doc = self.document
        parent = doc._parents[self.index]
        if parent < 0:
            return None
        siblings = doc._children[parent]
        position = doc._sibling_index[self.index] + 1
        if position >= len(siblings):
            return None
        return ArenaNode(doc, siblings[position])

    def has_child_nodes(self) -> bool:
        return bool(self.document._children[self.index])

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def descendants(self) -> Iterator[ArenaNode]:
        return iter_descendants(self)

    def all_text(self, separator: str = "", strip: bool = False) -> str:
        return all_text(self, separator=separator, strip=strip)

    def query(self, selector: Selector, recursive: bool = True, limit: int | None = None) -> MatchSet:
        """
        Query this subtree with a selector.

        Args:
            selector: A selector built with the functions in soupy.selector
            recursive: Search all descendants (True) or only direct children
            limit: Stop after this many matches

        Returns:
            A MatchSet of matching nodes in document order
        """
        from .engine import evaluate

        return evaluate(self, selector, recursive=recursive, limit=limit)

    def select(self, css: str, limit: int | None = None) -> MatchSet:
        """Query this subtree using a CSS selector string.

        Raises:
            SelectorError: If the selector is invalid
        """
        from .css import select

        return select(self, css, limit=limit)


# Backend-agnostic helpers. These only use the Node contract, with fast
# paths for backends that expose sibling links directly.


def previous_sibling(node: Any) -> Any | None:
    """Return the node immediately before `node` under the same parent."""
    if isinstance(node, ArenaNode):
        return node.previous_sibling
    parent = node.parent
    if parent is None:
        return None
    prev: Any | None = None
    for child in parent.children:
        if child == node:
            return prev
        prev = child
    return None  # node not in parent.children (detached)


def iter_descendants(node: Any, recursive: bool = True) -> Iterator[Any]:
    """Yield the descendants of `node` in document order, excluding `node`.

    With ``recursive=False`` only the direct children are yielded.

    Raises:
        StructuralFaultError: If nesting exceeds ``config.MAX_DEPTH``
    """
    if not recursive:
        yield from node.children
        return

    max_depth = config.MAX_DEPTH
    stack: list[Iterator[Any]] = [iter(node.children)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        yield child
        if child.children:
            if len(stack) >= max_depth:
                raise StructuralFaultError(max_depth)
            stack.append(iter(child.children))


def iter_ancestors(node: Any, stop: Any | None = None) -> Iterator[Any]:
    """Yield the proper ancestors of `node`, nearest first.

    Stops after yielding `stop` when it is given.

    Raises:
        StructuralFaultError: If the parent chain is longer than ``config.MAX_DEPTH``
    """
    max_depth = config.MAX_DEPTH
    steps = 0
    ancestor = node.parent
    while ancestor is not None:
        yield ancestor
        if stop is not None and ancestor == stop:
            return
        steps += 1
        ancestor = ancestor.parent
        if ancestor is not None and steps >= max_depth:
            raise StructuralFaultError(max_depth, where="parent links")


def tree_root(node: Any) -> Any:
    """The topmost ancestor of `node`, or `node` itself when it has no parent."""
    if isinstance(node, ArenaNode):
        return node.document.root
    root = node
    for root in iter_ancestors(node):
        pass
    return root


def document_path(node: Any) -> tuple[int, ...]:
    """Sibling indices from the root down to `node`.

    Comparing paths orders nodes of one tree in document order.
    """
    path: list[int] = []
    current = node
    for ancestor in iter_ancestors(node):
        if isinstance(current, ArenaNode):
            path.append(current.document._sibling_index[current.index])
        else:
            for i, child in enumerate(ancestor.children):
                if child == current:
                    path.append(i)
                    break
        current = ancestor
    path.reverse()
    return tuple(path)


def all_text(node: Any, separator: str = "", strip: bool = False) -> str:
    """Return the concatenated text payloads of `node` and its descendants.

    - `separator` controls how text nodes are joined.
    - `strip=True` strips each text node and drops empty segments.
    """
    parts: list[str] = []
    for current in _self_and_descendants(node):
        data = current.text
        if not data:
            continue
        if strip:
            data = data.strip()
            if not data:
                continue
        parts.append(data)
    return separator.join(parts)


def _self_and_descendants(node: Any) -> Iterator[Any]:
    yield node
    yield from iter_descendants(node)
