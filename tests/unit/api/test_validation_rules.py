"""Unit tests for the declarative request validation rules."""

import pytest

from src.catalog.api.http.validation.rules import (
    AVAILABILITY_IS_BOOLEAN,
    ID_IS_INT,
    NAME_NOT_EMPTY,
    PRICE_IS_POSITIVE,
    Finding,
    RequestInput,
    body,
    evaluate_rules,
    is_numeric,
)


def messages(findings: tuple[Finding, ...]) -> list[str]:
    return [finding.msg for finding in findings]


class TestIdRule:
    @pytest.mark.parametrize("value", ["1", "42", "-3", "+7", "0"])
    def test_accepts_integers(self, value):
        assert ID_IS_INT(RequestInput(params={"id": value})) == ()

    @pytest.mark.parametrize("value", ["abc", "1.5", "", " 1", "1e3", "5\n", "1\n"])
    def test_rejects_non_integers(self, value):
        findings = ID_IS_INT(RequestInput(params={"id": value}))

        assert messages(findings) == ["Id not valid"]
        assert findings[0].param == "id"
        assert findings[0].location == "params"
        assert findings[0].value == value


class TestNameRule:
    def test_accepts_non_empty_name(self):
        assert NAME_NOT_EMPTY(RequestInput(body={"name": "Mouse"})) == ()

    @pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": None}, {"name": 12}])
    def test_rejects_missing_empty_or_non_string_name(self, payload):
        findings = NAME_NOT_EMPTY(RequestInput(body=payload))

        assert messages(findings) == ["This name cant be empty"]
        assert findings[0].location == "body"


class TestPriceRule:
    @pytest.mark.parametrize("value", [50, "50", 0.5, "12.99", ".5", 1e16, 1.5e2, 10**20])
    def test_accepts_positive_numbers(self, value):
        assert PRICE_IS_POSITIVE(RequestInput(body={"price": value})) == ()

    def test_non_numeric_price_reports_type_and_predicate(self):
        findings = PRICE_IS_POSITIVE(RequestInput(body={"price": "abc"}))

        assert messages(findings) == ["Value is not valid", "Price is not valid"]

    @pytest.mark.parametrize("value", [0, "0", -10, "-1.5"])
    def test_non_positive_price_is_rejected(self, value):
        findings = PRICE_IS_POSITIVE(RequestInput(body={"price": value}))

        assert messages(findings) == ["Price is not valid"]

    @pytest.mark.parametrize(
        "value", ["50\n", "9" * 400, 10**400, float("inf"), float("nan")]
    )
    def test_prices_that_cannot_be_stored_are_not_numeric(self, value):
        findings = PRICE_IS_POSITIVE(RequestInput(body={"price": value}))

        assert messages(findings) == ["Value is not valid", "Price is not valid"]

    def test_price_that_rounds_to_zero_is_not_positive(self):
        findings = PRICE_IS_POSITIVE(RequestInput(body={"price": "0." + "0" * 400 + "1"}))

        assert messages(findings) == ["Price is not valid"]

    def test_missing_price_fails_every_check(self):
        findings = PRICE_IS_POSITIVE(RequestInput(body={}))

        assert messages(findings) == [
            "Value is not valid",
            "Price cannot be empty",
            "Price is not valid",
        ]
        assert all(finding.param == "price" for finding in findings)

    def test_boolean_is_not_numeric(self):
        assert not is_numeric(True)


class TestAvailabilityRule:
    @pytest.mark.parametrize("value", [True, False, "true", "false", "1", "0", 1, 0])
    def test_accepts_booleans(self, value):
        assert AVAILABILITY_IS_BOOLEAN(RequestInput(body={"availability": value})) == ()

    @pytest.mark.parametrize("value", [None, "yes", 2, "", [True]])
    def test_rejects_other_values(self, value):
        findings = AVAILABILITY_IS_BOOLEAN(RequestInput(body={"availability": value}))

        assert messages(findings) == ["Value for availability not valid"]


class TestRuleComposition:
    def test_check_returns_a_new_rule(self):
        base = body("name")
        extended = base.check(lambda value: False, "always fails")

        assert base.checks == ()
        assert len(extended.checks) == 1

    def test_findings_keep_rule_order(self):
        request = RequestInput(params={"id": "x"}, body={"price": "-1"})

        findings = evaluate_rules(
            [ID_IS_INT, NAME_NOT_EMPTY, PRICE_IS_POSITIVE, AVAILABILITY_IS_BOOLEAN],
            request,
        )

        assert [(f.param, f.msg) for f in findings] == [
            ("id", "Id not valid"),
            ("name", "This name cant be empty"),
            ("price", "Price is not valid"),
            ("availability", "Value for availability not valid"),
        ]

    def test_valid_request_produces_no_findings(self):
        request = RequestInput(
            params={"id": "3"},
            body={"name": "Keyboard", "price": 20, "availability": True},
        )

        assert evaluate_rules([ID_IS_INT, NAME_NOT_EMPTY, PRICE_IS_POSITIVE], request) == ()
