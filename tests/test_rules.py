from __future__ import annotations

import pytest

from conformity.errors import Err, ErrorCode, Ok, SchemaError
from conformity.validation import ANY, Rule, RuleError, apply_rules, match_shape


def login_or_email(output):
    return Err("email or login must be present")


EITHER = Rule("either_login_or_email", login_or_email, guard={"email": None, "login": None})


class TestMatchShape:
    @pytest.mark.parametrize("pattern, value", [
        (None, None),
        (ANY, 1),
        ({"a": ANY}, {"a": 1, "b": 2}),
        ({"a": {"b": None}}, {"a": {"b": None, "c": 1}}),
        ([int, str], [1, "x"]),
        (str, "x"),
        (lambda v: v > 3, 4),
        (3, 3),
    ])
    def test_matches(self, pattern, value):
        assert match_shape(pattern, value)

    @pytest.mark.parametrize("pattern, value", [
        ({"a": ANY}, {"b": 1}),
        ({"a": None}, {"a": 1}),
        ({"a": ANY}, [1]),
        ([int, str], [1]),
        (str, 1),
        (lambda v: v > 3, 2),
        (3, "3"),
    ])
    def test_does_not_match(self, pattern, value):
        assert not match_shape(pattern, value)


class TestApplyRules:
    @pytest.mark.parametrize("output", [
        {"email": "jane@doe.org", "login": None},
        {"email": None, "login": "jane"},
        {"email": "jane@doe.org", "login": "jane"},
    ])
    def test_guard_skips_other_shapes(self, output):
        assert apply_rules([EITHER], output) == []

    def test_fires_only_when_both_are_nil(self):
        assert apply_rules([EITHER], {"email": None, "login": None}) == [
            RuleError((), "email or login must be present"),
        ]

    def test_all_matching_rules_run_in_order(self):
        rules = [
            Rule("first", lambda out: Err((("a",), "is bad"))),
            Rule("passes", lambda out: Ok(out)),
            Rule("skipped", lambda out: Err("never"), guard={"missing": ANY}),
            Rule("second", lambda out: Err([(("b",), "is worse", {"hint": 1}), "and more"])),
            Rule("none", lambda out: None),
        ]

        assert apply_rules(rules, {"a": 1, "b": 2}) == [
            RuleError(("a",), "is bad"),
            RuleError(("b",), "is worse", {"hint": 1}),
            RuleError((), "and more"),
        ]

    @pytest.mark.parametrize("reason, expected", [
        ([["email"], "is taken"], [RuleError(("email",), "is taken")]),
        ([["items", 0], "is empty", {"min": 1}], [RuleError(("items", 0), "is empty", {"min": 1})]),
        (["is taken", "is reserved"], [RuleError((), "is taken"), RuleError((), "is reserved")]),
        ([(("email",), "is taken"), "is reserved"], [RuleError(("email",), "is taken"), RuleError((), "is reserved")]),
    ])
    def test_list_reasons_with_a_path(self, reason, expected):
        assert apply_rules([Rule("unique", lambda out: Err(reason))], {}) == expected

    def test_unsupported_return_is_a_programmer_error(self):
        with pytest.raises(SchemaError) as exc:
            apply_rules([Rule("bad", lambda out: False)], {})
        assert exc.value.code is ErrorCode.E7008_INVALID_RULE

    def test_unsupported_reason_is_a_programmer_error(self):
        with pytest.raises(SchemaError) as exc:
            apply_rules([Rule("bad", lambda out: Err(42))], {})
        assert exc.value.code is ErrorCode.E7008_INVALID_RULE
