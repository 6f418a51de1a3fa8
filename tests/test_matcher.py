import re

import pytest

from soupy import config
from soupy.errors import CapabilityError, PatternError, SelectorError
from soupy.matcher import Exact, Pattern, Present, TokenSet, coerce_rule


class TestExact:

    def test_case_sensitive(self):
        assert Exact("a").matches("a")
        assert not Exact("a").matches("A")

    def test_absent_never_matches(self):
        assert not Exact("").matches(None)

    def test_rejects_non_string(self):
        with pytest.raises(SelectorError):
            Exact(3)


class TestTokenSet:

    def test_membership(self):
        assert TokenSet("a").matches("a b")
        assert TokenSet("b").matches("a  b\t")
        assert not TokenSet("ab").matches("a b")
        assert not TokenSet("a").matches("")
        assert not TokenSet("a").matches(None)

    def test_rejects_multi_word_token(self):
        with pytest.raises(SelectorError):
            TokenSet("a b")
        with pytest.raises(SelectorError):
            TokenSet("")


class TestPresent:

    def test_any_value(self):
        assert Present().matches("")
        assert Present().matches("x")
        assert not Present().matches(None)


class TestPattern:

    def test_search_semantics(self):
        rule = Pattern("^https")
        assert rule.matches("https://x")
        assert not rule.matches("http://x")
        assert Pattern("x").matches("abxcd")

    def test_compiled_once(self):
        rule = Pattern("^a+$")
        assert isinstance(rule.regex, re.Pattern)
        assert rule.regex is rule.regex
        assert rule.pattern == "^a+$"

    def test_accepts_compiled_pattern(self):
        compiled = re.compile("b", re.IGNORECASE)
        assert Pattern(compiled).matches("ABC")

    def test_invalid_pattern_fails_fast(self):
        with pytest.raises(PatternError) as info:
            Pattern("(unclosed")
        assert info.value.pattern == "(unclosed"
        assert isinstance(info.value.__cause__, re.error)

    def test_disabled_capability(self, monkeypatch):
        monkeypatch.setattr(config, "PATTERNS_ENABLED", False)
        with pytest.raises(CapabilityError):
            Pattern("x")

    def test_rejects_byte_patterns(self):
        with pytest.raises(SelectorError):
            Pattern(re.compile(b"x"))


class TestRules:

    def test_value_equality(self):
        assert Exact("a") == Exact("a")
        assert Exact("a") != Exact("b")
        assert Exact("a") != TokenSet("a")
        assert hash(Pattern("x")) == hash(Pattern("x"))
        assert len({Present(), Present()}) == 1

    def test_immutable(self):
        rule = Exact("a")
        with pytest.raises(AttributeError):
            rule.value = "b"

    def test_coerce_rule(self):
        assert coerce_rule("a") == Exact("a")
        assert coerce_rule(True) == Present()
        assert coerce_rule(re.compile("x")) == Pattern("x")
        token = TokenSet("t")
        assert coerce_rule(token) is token
        with pytest.raises(SelectorError):
            coerce_rule(42)
