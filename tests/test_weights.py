import logging

import pytest

from fishloot.domain.context import LootContext
from fishloot.domain.weights import ConstantWeight, ExpressionWeight, parse_weight


def test_parse_weight_numbers_become_constants() -> None:
    assert parse_weight(70) == ConstantWeight(70.0)
    assert parse_weight(2.5) == ConstantWeight(2.5)
    assert parse_weight("+15") == ConstantWeight(15.0)
    assert parse_weight("  3.5 ") == ConstantWeight(3.5)


def test_parse_weight_other_strings_become_expressions() -> None:
    operation = parse_weight("+{{group_a&b}} * 0.1")
    assert operation == ExpressionWeight("{{group_a&b}} * 0.1")
    assert not operation.is_constant
    assert operation.constant_value == 0.0


@pytest.mark.parametrize("raw", [True, None, "", "   ", "inf", "nan", ["1"]])
def test_parse_weight_rejects_invalid_values(raw: object) -> None:
    with pytest.raises(ValueError):
        parse_weight(raw)


def test_constant_weight_resolves_without_context() -> None:
    weight = ConstantWeight(12.0)
    assert weight.is_constant
    assert weight.constant_value == 12.0
    assert weight.resolve(LootContext.empty(), {}) == 12.0
    assert ConstantWeight(-3.0).resolve(LootContext.empty(), {}) == 0.0


def test_expression_weight_uses_context_and_group_totals() -> None:
    context = LootContext(args={"depth": 4})
    assert ExpressionWeight("{depth} * 2").resolve(context, {}) == 8.0
    assert ExpressionWeight("{{group_b&a}} / 4").resolve(context, {"a&b": 20.0}) == 5.0


def test_expression_weight_missing_group_total_yields_zero(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    weight = ExpressionWeight("{{group_a&b}} * 2")

    assert weight.resolve(LootContext.empty(), {"a&c": 10.0}) == 0.0
    assert "a&b" in caplog.text


def test_expression_weight_malformed_yields_zero(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    assert ExpressionWeight("2 +").resolve(LootContext.empty(), {}) == 0.0
    assert ExpressionWeight("{missing} + 1").resolve(LootContext.empty(), {}) == 0.0
    assert "could not be evaluated" in caplog.text


def test_expression_weight_never_negative() -> None:
    assert ExpressionWeight("{depth} - 10").resolve(LootContext(args={"depth": 3}), {}) == 0.0


def test_estimate_is_context_free() -> None:
    assert ConstantWeight(7.0).estimate({}) == 7.0
    assert ExpressionWeight("10 / 2").estimate({}) == 5.0
    assert ExpressionWeight("{{group_a&b}} * 0.5").estimate({"a&b": 10.0}) == 5.0


def test_estimate_falls_back_when_unresolvable() -> None:
    assert ExpressionWeight("{depth} * 2").estimate({}) == 1.0
    assert ExpressionWeight("{depth} * 2").estimate({}, fallback=3.0) == 3.0
    assert ExpressionWeight("{{group_a&b}} * 0.5").estimate({}) == 1.0
    assert ExpressionWeight("2 +").estimate({}) == 1.0
