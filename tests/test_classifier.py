"""Tests for assignment classification."""

from offdays.classifier import classify_exhaustive, classify_matches, sort_by_name
from offdays.config import Category, Role
from offdays.models import StaffAssignment
from offdays.rules import PatternMatcher


def staff(name, assignment, role=None):
    return StaffAssignment(name=name, assignment=assignment, role=role)


ROSTER = [
    staff("Bob", "Janeway - B"),
    staff("Alice", "CCU - A"),
    staff("Eve", "Jeopardy CCU - A"),
]


class TestClassifyExhaustive:

    def test_example_day(self):
        rules = [(Category.OFF, PatternMatcher("CCU - A"))]
        result = classify_exhaustive(rules, ROSTER[:2])
        assert result[Category.OFF] == [staff("Alice", "CCU - A")]
        assert result[Category.MAYBE_OFF] == []
        assert result[Category.NOT_SURE] == [staff("Bob", "Janeway - B")]

    def test_every_member_in_exactly_one_bucket(self):
        rules = [
            (Category.OFF, PatternMatcher("CCU")),
            (Category.MAYBE_OFF, PatternMatcher("Jeopardy")),
        ]
        result = classify_exhaustive(rules, ROSTER)
        names = [e.name for entries in result.values() for e in entries]
        assert sorted(names) == ["Alice", "Bob", "Eve"]

    def test_last_matching_category_wins(self):
        """Eve matches both rules; MAYBE_OFF comes later, so it wins"""
        rules = [
            (Category.OFF, PatternMatcher("CCU")),
            (Category.MAYBE_OFF, PatternMatcher("Jeopardy")),
        ]
        result = classify_exhaustive(rules, ROSTER)
        assert [e.name for e in result[Category.OFF]] == ["Alice"]
        assert [e.name for e in result[Category.MAYBE_OFF]] == ["Eve"]

    def test_tie_break_follows_rule_order_not_category(self):
        rules = [
            (Category.MAYBE_OFF, PatternMatcher("Jeopardy")),
            (Category.OFF, PatternMatcher("CCU")),
        ]
        result = classify_exhaustive(rules, ROSTER)
        assert [e.name for e in result[Category.OFF]] == ["Alice", "Eve"]
        assert result[Category.MAYBE_OFF] == []

    def test_no_rules_means_not_sure(self):
        result = classify_exhaustive([], ROSTER)
        assert [e.name for e in result[Category.NOT_SURE]] == ["Alice", "Bob", "Eve"]
        assert result[Category.OFF] == []


class TestClassifyMatches:

    def test_member_can_appear_in_several_buckets(self):
        rules = [
            (Category.OFF, PatternMatcher("CCU")),
            (Category.MAYBE_OFF, PatternMatcher("Jeopardy")),
        ]
        result = classify_matches(rules, ROSTER)
        assert [e.name for e in result[Category.OFF]] == ["Alice", "Eve"]
        assert [e.name for e in result[Category.MAYBE_OFF]] == ["Eve"]

    def test_no_default_bucket(self):
        result = classify_matches([(Category.OFF, PatternMatcher("CCU - A"))], ROSTER)
        assert list(result) == [Category.OFF]
        assert Category.NOT_SURE not in result


class TestSortByName:

    def test_ordinal_and_stable(self):
        entries = [
            staff("bob", "x"),
            staff("Bob", "first", Role.INTERN),
            staff("Alice", "y"),
            staff("Bob", "second", Role.RESIDENT),
        ]
        ordered = sort_by_name(entries)
        assert [e.name for e in ordered] == ["Alice", "Bob", "Bob", "bob"]
        assert [e.assignment for e in ordered[1:3]] == ["first", "second"]

    def test_idempotent(self):
        once = sort_by_name(ROSTER)
        assert sort_by_name(once) == once
