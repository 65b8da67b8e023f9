"""
Tests for case-rule comparison primitives.
"""

from narrow.caserule import CaseRule, IGNORE_CASE, STRICT, case_rule


class TestCaseRule:
    def test_bounded_compare(self):
        """Only the first n characters take part."""
        assert STRICT.compare("foobar", "foobaz", 5)
        assert not STRICT.compare("foobar", "foobaz", 6)

    def test_shorter_string_ends_comparison(self):
        """A bound past the shorter string acts as full equality."""
        assert not STRICT.compare("ab", "abc", 3)
        assert STRICT.compare("abc", "abc", 4)

    def test_insensitive(self):
        assert IGNORE_CASE.compare("FOO", "foo", 3)
        assert not STRICT.compare("FOO", "foo", 3)
        assert IGNORE_CASE.contains("Hello World", "WORLD")
        assert STRICT.find("Hello World", "World") == 6
        assert STRICT.find("Hello World", "world") == -1

    def test_startswith(self):
        assert STRICT.startswith("foobar", "foo")
        assert not STRICT.startswith("fo", "foo")
        assert IGNORE_CASE.startswith("FooBar", "foo")

    def test_case_rule_selector(self):
        assert case_rule(True) is IGNORE_CASE
        assert case_rule(False) is STRICT
        assert CaseRule().insensitive is False
