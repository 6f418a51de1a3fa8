# Selector model for soupy
# Selectors are immutable expression trees: leaf predicates that look at a
# single node, boolean combinators, and structural combinators that look
# along the ancestor, parent or preceding-sibling axis.

from __future__ import annotations

import re
from typing import Any

from .matcher import Exact, Pattern, Present, Rule, TokenSet, coerce_rule
from .node import iter_ancestors, previous_sibling


class Selector:
    """Base class of every selector value.

    `matches(node, scope)` checks one node. When `scope` is given,
    structural combinators never look at nodes outside the subtree rooted
    at `scope`.
    """

    __slots__ = ()

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        raise NotImplementedError

    def _key(self) -> tuple[Any, ...]:
        return ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, *self._key()))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        args = ", ".join(repr(part) for part in self._key())
        return f"{type(self).__name__}({args})"

    def __and__(self, other: Selector) -> And:
        return And(self, other)

    def __or__(self, other: Selector) -> Or:
        return Or(self, other)

    def __invert__(self) -> Not:
        return Not(self)


def _check_selector(value: Any) -> Selector:
    if not isinstance(value, Selector):
        raise TypeError(f"Expected a Selector, got {type(value).__name__}")
    return value


def _name_rule(name: Any, what: str = "name") -> tuple[str | None, Rule]:
    """Split a name argument into its literal form (if any) and the rule that tests it."""
    if not isinstance(name, (str, Rule, re.Pattern)) and name is not True:
        raise TypeError(f"Expected a string, pattern or Rule as {what}, got {type(name).__name__}")
    rule = coerce_rule(name)
    if isinstance(rule, Exact):
        return rule.value, rule
    return None, rule


# Leaf predicates


class AnyNode(Selector):
    """Wildcard: matches every node, text and comments included."""

    __slots__ = ()

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return True


class TagIs(Selector):
    """Element whose name equals `name`, or satisfies it when it is a pattern or Rule."""

    __slots__ = ("name", "rule")

    name: str | None
    rule: Rule

    def __init__(self, name: str | re.Pattern[str] | Rule) -> None:
        literal, rule = _name_rule(name)
        object.__setattr__(self, "name", literal)
        object.__setattr__(self, "rule", rule)

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return node.name is not None and self.rule.matches(node.name)

    def _key(self) -> tuple[Any, ...]:
        return (self.name if self.name is not None else self.rule,)


class AttributeIs(Selector):
    """Element with an attribute named `attr` whose value satisfies `rule`.

    `attr` may itself be a pattern or Rule, in which case any attribute
    whose name satisfies it and whose value satisfies `rule` will do.
    """

    __slots__ = ("attr", "name_rule", "rule")

    attr: str | None
    name_rule: Rule
    rule: Rule

    def __init__(self, attr: str | re.Pattern[str] | Rule, rule: Rule) -> None:
        literal, name_rule = _name_rule(attr, "attribute name")
        object.__setattr__(self, "attr", literal)
        object.__setattr__(self, "name_rule", name_rule)
        object.__setattr__(self, "rule", rule)

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        if node.name is None:
            return False
        if self.attr is not None:
            return self.rule.matches(node.attrs.get(self.attr))
        return any(
            self.name_rule.matches(name) and self.rule.matches(value) for name, value in node.attrs.items()
        )

    def _attr_key(self) -> Any:
        return self.attr if self.attr is not None else self.name_rule

    def _key(self) -> tuple[Any, ...]:
        return (self._attr_key(), self.rule)


class IdIs(AttributeIs):
    __slots__ = ()

    def __init__(self, value: str) -> None:
        super().__init__("id", Exact(value))

    def _key(self) -> tuple[Any, ...]:
        return (self.rule.value,)  # type: ignore[attr-defined]


class HasClass(AttributeIs):
    """`class="a b"` has classes a and b, but not ab."""

    __slots__ = ()

    def __init__(self, token: str) -> None:
        super().__init__("class", TokenSet(token))

    def _key(self) -> tuple[Any, ...]:
        return (self.rule.token,)  # type: ignore[attr-defined]


class AttributeEquals(AttributeIs):
    __slots__ = ()

    def __init__(self, attr: str | re.Pattern[str] | Rule, value: str) -> None:
        super().__init__(attr, Exact(value))

    def _key(self) -> tuple[Any, ...]:
        return (self._attr_key(), self.rule.value)  # type: ignore[attr-defined]


class AttributeMatchesPattern(AttributeIs):
    """Attribute value searched with a regular expression compiled up front."""

    __slots__ = ()

    def __init__(self, attr: str | re.Pattern[str] | Rule, pattern: str | re.Pattern[str], flags: int = 0) -> None:
        super().__init__(attr, Pattern(pattern, flags))

    def _key(self) -> tuple[Any, ...]:
        return (self._attr_key(), self.rule)

    def __repr__(self) -> str:
        rule: Pattern = self.rule  # type: ignore[assignment]
        args = f"{self._attr_key()!r}, {rule.pattern!r}"
        if rule.flags:
            args += f", flags={rule.flags}"
        return f"{type(self).__name__}({args})"


class AttributePresent(AttributeIs):
    __slots__ = ()

    def __init__(self, attr: str | re.Pattern[str] | Rule) -> None:
        super().__init__(attr, Present())

    def _key(self) -> tuple[Any, ...]:
        return (self._attr_key(),)


class AttributeValue(Selector):
    """Element with at least one attribute whose value satisfies `rule`."""

    __slots__ = ("rule",)

    rule: Rule

    def __init__(self, rule: Rule) -> None:
        object.__setattr__(self, "rule", rule)

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        if node.name is None:
            return False
        return any(self.rule.matches(value) for value in node.attrs.values())

    def _key(self) -> tuple[Any, ...]:
        return (self.rule,)


class TextMatches(Selector):
    """Text node whose payload satisfies `rule`."""

    __slots__ = ("rule",)

    rule: Rule

    def __init__(self, rule: Rule) -> None:
        object.__setattr__(self, "rule", rule)

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return self.rule.matches(node.text)

    def _key(self) -> tuple[Any, ...]:
        return (self.rule,)


# Boolean combinators


class And(Selector):
    __slots__ = ("left", "right")

    left: Selector
    right: Selector

    def __init__(self, left: Selector, right: Selector) -> None:
        object.__setattr__(self, "left", _check_selector(left))
        object.__setattr__(self, "right", _check_selector(right))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return self.left.matches(node, scope) and self.right.matches(node, scope)

    def _key(self) -> tuple[Any, ...]:
        return (self.left, self.right)


class Or(Selector):
    __slots__ = ("left", "right")

    left: Selector
    right: Selector

    def __init__(self, left: Selector, right: Selector) -> None:
        object.__setattr__(self, "left", _check_selector(left))
        object.__setattr__(self, "right", _check_selector(right))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return self.left.matches(node, scope) or self.right.matches(node, scope)

    def _key(self) -> tuple[Any, ...]:
        return (self.left, self.right)


class Not(Selector):
    __slots__ = ("operand",)

    operand: Selector

    def __init__(self, operand: Selector) -> None:
        object.__setattr__(self, "operand", _check_selector(operand))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        return not self.operand.matches(node, scope)

    def _key(self) -> tuple[Any, ...]:
        return (self.operand,)


# Structural combinators. Each tests the target against the node first and
# only then looks along its axis.


class Descendant(Selector):
    """`target` with some proper ancestor matching `ancestor`."""

    __slots__ = ("ancestor", "target")

    ancestor: Selector
    target: Selector

    def __init__(self, ancestor: Selector, target: Selector) -> None:
        object.__setattr__(self, "ancestor", _check_selector(ancestor))
        object.__setattr__(self, "target", _check_selector(target))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        if not self.target.matches(node, scope):
            return False
        if scope is not None and node == scope:
            return False
        return any(self.ancestor.matches(a, scope) for a in iter_ancestors(node, stop=scope))

    def _key(self) -> tuple[Any, ...]:
        return (self.ancestor, self.target)


class Child(Selector):
    """`target` whose immediate parent matches `parent`."""

    __slots__ = ("parent", "target")

    parent: Selector
    target: Selector

    def __init__(self, parent: Selector, target: Selector) -> None:
        object.__setattr__(self, "parent", _check_selector(parent))
        object.__setattr__(self, "target", _check_selector(target))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        if not self.target.matches(node, scope):
            return False
        if scope is not None and node == scope:
            return False
        parent = node.parent
        return parent is not None and self.parent.matches(parent, scope)

    def _key(self) -> tuple[Any, ...]:
        return (self.parent, self.target)


class AdjacentSibling(Selector):
    """`target` whose immediately preceding sibling, of any kind, matches `preceding`."""

    __slots__ = ("preceding", "target")

    preceding: Selector
    target: Selector

    def __init__(self, preceding: Selector, target: Selector) -> None:
        object.__setattr__(self, "preceding", _check_selector(preceding))
        object.__setattr__(self, "target", _check_selector(target))

    def matches(self, node: Any, scope: Any | None = None) -> bool:
        if not self.target.matches(node, scope):
            return False
        if scope is not None and node == scope:
            return False
        sibling = previous_sibling(node)
        return sibling is not None and self.preceding.matches(sibling, scope)

    def _key(self) -> tuple[Any, ...]:
        return (self.preceding, self.target)


ANY: AnyNode = AnyNode()


# Construction API. None of these touch a tree.


def any_() -> AnyNode:
    return ANY


def tag(name: str | re.Pattern[str] | Rule) -> TagIs:
    """Match elements by name: a string for exact match, or a compiled pattern or Rule."""
    return TagIs(name)


def id_(value: str) -> IdIs:
    return IdIs(value)


def class_(token: str) -> HasClass:
    return HasClass(token)


def attr(name: str | re.Pattern[str] | Rule, value: Any = True) -> AttributeIs:
    """
    Match elements by attribute.

    Args:
        name: Attribute name, or a compiled ``re.Pattern`` or Rule matched
            against every attribute name
        value: A string for exact match, a compiled ``re.Pattern``, a Rule,
            or True (the default) to only require the attribute

    Returns:
        An attribute selector
    """
    if value is True:
        return AttributePresent(name)
    if isinstance(value, str):
        return AttributeEquals(name, value)
    rule = coerce_rule(value)
    if isinstance(rule, Pattern):
        return AttributeMatchesPattern(name, rule.regex)
    return AttributeIs(name, rule)


def attr_pattern(
    name: str | re.Pattern[str] | Rule, pattern: str | re.Pattern[str], flags: int = 0
) -> AttributeMatchesPattern:
    """Match elements whose attribute `name` contains a match for `pattern`.

    Raises:
        PatternError: If `pattern` is not a valid regular expression
        CapabilityError: If pattern matching is disabled
    """
    return AttributeMatchesPattern(name, pattern, flags)


def attr_value(value: Any) -> AttributeValue:
    """Match elements where any attribute has the given value."""
    return AttributeValue(coerce_rule(value))


def text(value: Any) -> TextMatches:
    """Match text nodes by exact string, compiled pattern, or Rule."""
    return TextMatches(coerce_rule(value))


def text_pattern(pattern: str | re.Pattern[str], flags: int = 0) -> TextMatches:
    return TextMatches(Pattern(pattern, flags))


def and_(*selectors: Selector) -> Selector:
    if not selectors:
        raise TypeError("and_() needs at least one selector")
    result = _check_selector(selectors[0])
    for selector in selectors[1:]:
        result = And(result, selector)
    return result


def or_(*selectors: Selector) -> Selector:
    if not selectors:
        raise TypeError("or_() needs at least one selector")
    result = _check_selector(selectors[0])
    for selector in selectors[1:]:
        result = Or(result, selector)
    return result


def not_(selector: Selector) -> Not:
    return Not(selector)


def descendant_of(ancestor: Selector, target: Selector) -> Descendant:
    return Descendant(ancestor, target)


def child_of(parent: Selector, target: Selector) -> Child:
    return Child(parent, target)


def adjacent_to(preceding: Selector, target: Selector) -> AdjacentSibling:
    return AdjacentSibling(preceding, target)
