import re

import pytest

from soupy import config
from soupy.errors import CapabilityError, PatternError, SelectorError
from soupy.matcher import Exact
from soupy.selector import (
    ANY,
    AdjacentSibling,
    And,
    AnyNode,
    AttributeEquals,
    AttributeIs,
    AttributeMatchesPattern,
    AttributePresent,
    Child,
    Descendant,
    HasClass,
    IdIs,
    Not,
    Or,
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


class TestLeaves:

    def test_tag(self, two_paragraphs):
        assert tag("p").matches(two_paragraphs.node(2))
        assert not tag("P").matches(two_paragraphs.node(2))
        assert not tag("p").matches(two_paragraphs.node(3))

    def test_id(self, page):
        assert id_("item").matches(page.node(10))
        assert not id_("item").matches(page.node(9))

    def test_class_tokens(self, page):
        link = page.node(18)  # class="ext link"
        assert class_("ext").matches(link)
        assert class_("link").matches(link)
        assert not class_("extlink").matches(link)
        with pytest.raises(SelectorError):
            class_("ext link")

    def test_attribute_forms(self, page):
        link = page.node(15)
        assert attr("href").matches(link)
        assert attr("href", "https://example.com").matches(link)
        assert not attr("href", "https://example").matches(link)
        assert attr("href", re.compile("example")).matches(link)
        assert not attr("href").matches(page.node(13))

    def test_attr_value_matches_any_attribute(self, page):
        assert attr_value("item").matches(page.node(10))
        assert attr_value(re.compile("^http:")).matches(page.node(18))
        assert not attr_value("item").matches(page.node(9))

    def test_leaves_skip_text_nodes(self, page):
        text_node = page.node(12)
        assert not attr_value(True).matches(text_node)
        assert not attr("href").matches(text_node)
        assert not class_("a").matches(text_node)

    def test_text(self, page):
        assert text("Broken Link").matches(page.node(14))
        assert not text("Broken Link").matches(page.node(13))
        assert text_pattern(r"\bLink$").matches(page.node(16))
        assert text(re.compile("Other")).matches(page.node(19))

    def test_any_matches_every_kind(self, page):
        assert all(any_().matches(page.node(i)) for i in range(len(page)))
        assert any_() is ANY
        assert AnyNode() == ANY


class TestPatterns:

    def test_pattern_selector(self, page):
        secure = attr_pattern("href", "^https")
        assert secure.matches(page.node(15))
        assert not secure.matches(page.node(18))

    def test_invalid_pattern_fails_at_construction(self):
        with pytest.raises(PatternError):
            attr_pattern("x", "(unclosed")
        with pytest.raises(SelectorError):
            text_pattern("[")

    def test_disabled_capability(self, monkeypatch):
        monkeypatch.setattr(config, "PATTERNS_ENABLED", False)
        with pytest.raises(CapabilityError):
            attr_pattern("href", "^https")
        with pytest.raises(CapabilityError):
            attr("href", re.compile("x"))
        with pytest.raises(CapabilityError):
            text_pattern("x")
        # Non-pattern selectors are unaffected
        assert attr("href", "x") == AttributeEquals("href", "x")


class TestNamePatterns:

    def test_tag_pattern(self, page):
        heading = tag(re.compile("^h[1-6]$"))
        assert heading.matches(page.node(6))
        assert not heading.matches(page.node(5))
        assert not heading.matches(page.node(7))
        assert heading == TagIs(re.compile("^h[1-6]$"))
        assert heading != tag("h1")
        assert tag(Exact("p")) == tag("p")
        assert tag(True).matches(page.node(5))
        assert not tag(True).matches(page.node(7))

    def test_attribute_name_pattern(self, page):
        assert attr(re.compile("^hr")).matches(page.node(15))
        assert not attr(re.compile("^hr")).matches(page.node(13))
        assert attr(re.compile("^hr"), "http://other.com").matches(page.node(18))
        assert not attr(re.compile("^cl"), "http://other.com").matches(page.node(18))
        assert attr(re.compile("^cl"), re.compile("ext")).matches(page.node(18))
        assert attr(re.compile("^cl"), "x") != attr("cl", "x")

    def test_name_patterns_need_capability(self, monkeypatch):
        monkeypatch.setattr(config, "PATTERNS_ENABLED", False)
        assert tag("p") == TagIs("p")
        with pytest.raises(CapabilityError):
            tag(re.compile("p"))
        with pytest.raises(CapabilityError):
            attr(re.compile("h"), "x")

    def test_name_must_be_string_pattern_or_rule(self):
        with pytest.raises(TypeError):
            tag(5)
        with pytest.raises(TypeError):
            attr(None)


class TestCombinators:

    def test_and_or_not(self, two_paragraphs):
        p_a = two_paragraphs.node(2)
        p_b = two_paragraphs.node(4)
        selector = and_(tag("p"), class_("a"))
        assert selector.matches(p_a)
        assert not selector.matches(p_b)
        assert or_(class_("a"), class_("b")).matches(p_b)
        assert not_(class_("a")).matches(p_b)

    def test_operators(self):
        assert (tag("p") & class_("a")) == And(TagIs("p"), HasClass("a"))
        assert (tag("p") | class_("a")) == Or(TagIs("p"), HasClass("a"))
        assert ~tag("p") == Not(TagIs("p"))

    def test_nary_builders_fold_left(self):
        a, b, c = tag("a"), tag("b"), tag("c")
        assert and_(a, b, c) == And(And(a, b), c)
        assert or_(a, b, c) == Or(Or(a, b), c)
        assert and_(a) is a
        with pytest.raises(TypeError):
            and_()
        with pytest.raises(TypeError):
            or_()

    def test_and_short_circuits(self, two_paragraphs):
        calls = []

        class Spy(TagIs):
            __slots__ = ()

            def matches(self, node, scope=None):
                calls.append(node)
                return super().matches(node, scope)

        selector = And(TagIs("div"), Spy("p"))
        assert not selector.matches(two_paragraphs.node(2))
        assert calls == []
        assert Or(TagIs("p"), Spy("p")).matches(two_paragraphs.node(2))
        assert calls == []

    def test_structural(self, page):
        nested_p = page.node(11)
        assert descendant_of(tag("body"), tag("p")).matches(nested_p)
        assert not descendant_of(tag("p"), tag("p")).matches(nested_p)
        assert child_of(id_("item"), tag("p")).matches(nested_p)
        assert not child_of(tag("body"), tag("p")).matches(nested_p)
        assert adjacent_to(tag("p"), tag("a")).matches(page.node(13))
        assert not adjacent_to(tag("p"), tag("a")).matches(page.node(15))

    def test_adjacent_sibling_counts_every_node_kind(self, page):
        # body: h1, div, comment, a -- the comment sits between div and a
        assert not adjacent_to(tag("div"), tag("a")).matches(page.node(18))
        assert adjacent_to(any_(), tag("a")).matches(page.node(18))

    def test_scope_bounds_axes(self, page):
        item = page.node(10)
        nested_p = page.node(11)
        assert descendant_of(tag("body"), tag("p")).matches(nested_p)
        assert not descendant_of(tag("body"), tag("p")).matches(nested_p, scope=item)
        assert descendant_of(id_("item"), tag("p")).matches(nested_p, scope=item)
        # At the scope node itself nothing outside is visible
        assert not child_of(any_(), id_("item")).matches(item, scope=item)

    def test_combinators_require_selectors(self):
        with pytest.raises(TypeError):
            And(tag("p"), "p")
        with pytest.raises(TypeError):
            Descendant("div", tag("p"))
        with pytest.raises(TypeError):
            not_(None)


class TestValues:

    def test_equality_and_hash(self):
        first = descendant_of(tag("div"), and_(tag("p"), class_("a")))
        second = Descendant(TagIs("div"), And(TagIs("p"), HasClass("a")))
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1
        assert tag("p") != id_("p")
        assert IdIs("x") != AttributeEquals("id", "x")

    def test_pattern_flags_are_part_of_the_value(self):
        folded = attr_pattern("x", "abc", re.IGNORECASE)
        plain = attr_pattern("x", "abc")
        assert folded != plain
        assert len({folded, plain}) == 2
        assert folded == attr_pattern("x", "abc", re.IGNORECASE)
        assert repr(folded) == f"AttributeMatchesPattern('x', 'abc', flags={int(re.IGNORECASE)})"
        assert text_pattern("abc", re.IGNORECASE) != text_pattern("abc")

    def test_attribute_builder_types(self):
        assert isinstance(attr("a"), AttributePresent)
        assert isinstance(attr("a", "b"), AttributeEquals)
        assert isinstance(attr("a", re.compile("b")), AttributeMatchesPattern)
        assert isinstance(text("x"), TextMatches)
        assert type(attr("class", HasClass("x").rule)) is AttributeIs

    def test_immutable(self):
        selector = tag("p")
        with pytest.raises(AttributeError):
            selector.name = "div"
        combined = child_of(tag("ul"), tag("li"))
        with pytest.raises(AttributeError):
            combined.target = tag("p")

    def test_repr(self):
        assert repr(tag("p")) == "TagIs('p')"
        assert repr(and_(tag("p"), class_("a"))) == "And(TagIs('p'), HasClass('a'))"
        assert repr(attr_pattern("href", "^https")) == "AttributeMatchesPattern('href', '^https')"
        assert repr(ANY) == "AnyNode()"

    def test_child_and_adjacent_types(self):
        assert isinstance(child_of(tag("a"), tag("b")), Child)
        assert isinstance(adjacent_to(tag("a"), tag("b")), AdjacentSibling)
