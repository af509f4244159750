"""Unit tests for full dice expressions: parsing, rolling and traces."""

import pytest

from utils.config import ConfigLimits
from utils.dice import Dice, parse_order
from utils.exceptions import (DiceNumberOverstepError, ExpressionError,
                              ExpressionInvalidError, SurfaceNumberOverstepError)


class TestParseOrder:
    def test_expression_and_reason(self, limits) -> None:
        parsed = parse_order("3d6+2 攻擊", limits)
        assert parsed.expression == "3D6+2"
        assert parsed.reason == "攻擊"

    def test_reason_without_space(self, limits) -> None:
        parsed = parse_order("3d6攻擊", limits)
        assert parsed.expression == "3D6"
        assert parsed.reason == "攻擊"

    def test_text_after_space_is_reason(self, limits) -> None:
        assert parse_order("3d6 3", limits).reason == "3"

    @pytest.mark.parametrize("order, expression, reason", [
        ("3d6 + 2 攻擊", "3D6+2", "攻擊"),
        ("( 3d6 + 2 ) * 2", "(3D6+2)*2", ""),
        ("3d6 x 2", "3D6", "x 2"),
        ("3d6x 2", "3D6*2", ""),
        ("3d6　-　1", "3D6-1", ""),
        ("4d6k3 + d4 傷害", "4D6K3+D4", "傷害"),
    ])
    def test_whitespace_around_operators(self, limits, order: str, expression: str, reason: str) -> None:
        parsed = parse_order(order, limits)
        assert (parsed.expression, parsed.reason) == (expression, reason)

    def test_whitespace_between_operands_ends_expression(self, limits) -> None:
        parsed = parse_order("3d6 2d6", limits)
        assert (parsed.expression, parsed.reason) == ("3D6", "2d6")

    def test_empty_order_is_default_die(self, limits) -> None:
        assert parse_order("", limits, default_surface_number=20).expression == "D20"

    def test_reason_only(self, limits) -> None:
        parsed = parse_order("hide", limits)
        assert parsed.expression == "D100"
        assert parsed.reason == "hide"
        assert not parsed.hidden

    def test_default_surface_number(self, limits) -> None:
        assert parse_order("8dk3", limits, default_surface_number=20).expression == "8D20K3"

    def test_multiplication_normalized(self, limits) -> None:
        assert parse_order("(5D80K2+10)x5", limits).expression == "(5D80K2+10)*5"

    @pytest.mark.parametrize("order, hidden, simple", [
        ("h 3d6", True, False),
        ("s3d6", False, True),
        ("hs 3d6", True, True),
        ("H", True, False),
        ("3d6", False, False),
    ])
    def test_markers(self, limits, order: str, hidden: bool, simple: bool) -> None:
        parsed = parse_order(order, limits)
        assert (parsed.hidden, parsed.simple) == (hidden, simple)

    def test_bonus_marker(self, limits) -> None:
        parsed = parse_order("hb2 潛行", limits)
        assert parsed.hidden
        assert parsed.bp_type == "B"
        assert parsed.bp_dice_number == 2
        assert parsed.expression == "B2"
        assert parsed.reason == "潛行"

    def test_penalty_default_count(self, limits) -> None:
        parsed = parse_order("p", limits)
        assert parsed.bp_type == "P"
        assert parsed.bp_dice_number == 1

    def test_bonus_appendix(self, limits) -> None:
        parsed = parse_order("b+10 偵查", limits)
        assert parsed.expression == "B1+10"
        assert parsed.reason == "偵查"

    def test_bonus_appendix_with_spaces(self, limits) -> None:
        parsed = parse_order("b + 10 潛行", limits)
        assert parsed.expression == "B1+10"
        assert parsed.reason == "潛行"

    def test_bonus_text_without_operator_is_reason(self, limits) -> None:
        parsed = parse_order("b 3d6", limits)
        assert parsed.expression == "B1"
        assert parsed.reason == "3d6"

    @pytest.mark.parametrize("order", ["b0", "b100"])
    def test_bonus_count_bounds(self, limits, order: str) -> None:
        with pytest.raises(DiceNumberOverstepError):
            parse_order(order, limits)

    def test_bonus_count_upper_limit(self, limits) -> None:
        assert parse_order("b99", limits).bp_dice_number == 99

    @pytest.mark.parametrize("order", ["3d6+", "(3d6", "3d6)", "3d6*(2+)"])
    def test_structure_errors(self, limits, order: str) -> None:
        with pytest.raises(ExpressionError):
            parse_order(order, limits)

    def test_invalid_term(self, limits) -> None:
        with pytest.raises(ExpressionInvalidError):
            parse_order("3D6K4", limits)

    def test_surface_number_overstep(self, limits) -> None:
        with pytest.raises(SurfaceNumberOverstepError):
            parse_order("D2000", limits)


class TestDiceRoll:
    def test_trace(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([1, 5, 3])
        dice = Dice("3d6+2", limits)
        assert dice.result == 11
        assert dice.render() == "3D6+2=(1+5+3)+2=11"

    def test_single_die_trace(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.append(42)
        dice = Dice("", limits)
        assert dice.render() == "D100=42"
        assert fixed_rolls.calls == [(1, 100)]

    def test_constant_trace(self, limits, fixed_rolls) -> None:
        dice = Dice("5", limits)
        assert dice.render() == "5"
        assert fixed_rolls.calls == []

    def test_constant_arithmetic_trace(self, limits) -> None:
        assert Dice("2+3", limits).render() == "2+3=5"

    def test_long_sum(self, limits) -> None:
        dice = Dice("+".join(["1"] * 2000), limits)
        assert dice.result == 2000
        assert dice.render().endswith("=2000")

    def test_constant_trace_parses_back(self, limits) -> None:
        trace = Dice("42", limits).render()
        assert Dice(trace, limits).result == 42

    def test_keep_highest_with_multiplier(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([10, 70, 20, 30, 60])
        dice = Dice("(5D80K2+10)x5 攻擊", limits)
        assert dice.result == 700
        assert dice.reason == "攻擊"
        assert dice.render() == "(5D80K2+10)*5=((70+60)+10)*5=700"

    def test_terse(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([1, 5, 3])
        assert Dice("3d6+2", limits).render(terse=True) == "3D6+2=11"

    def test_simple_marker(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([1, 5, 3])
        assert Dice("s3d6", limits).render() == "3D6=9"

    def test_negative_result(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.append(2)
        assert Dice("D6-5", limits).result == -3

    def test_range(self, limits) -> None:
        for _ in range(100):
            assert 5 <= Dice("3D6+2", limits).result <= 20

    def test_all_terms_validated_before_rolling(self, limits, fixed_rolls) -> None:
        with pytest.raises(DiceNumberOverstepError):
            Dice("3D6+5000D6", limits)
        assert fixed_rolls.calls == []

    def test_limits_are_respected(self, fixed_rolls) -> None:
        limits = ConfigLimits(max_dice_number=5)
        with pytest.raises(DiceNumberOverstepError):
            Dice("6D6", limits)
        assert fixed_rolls.calls == []

    def test_reroll_reuses_parse(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([1, 1, 1, 6, 6, 6])
        first = Dice("3D6 傷害", limits)
        second = first.reroll()
        assert second.parsed is first.parsed
        assert (first.result, second.result) == (3, 18)
        assert fixed_rolls.calls == [(3, 6), (3, 6)]


class TestBonusPenalty:
    def test_bonus_keeps_lowest(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([45, 78, 12])
        dice = Dice("b2", limits)
        assert dice.result == 15
        assert dice.bp_rolls == [45, 78, 12]
        assert dice.render() == "B2=15[獎勵骰:45 78 12]"
        assert fixed_rolls.calls == [(3, 100)]

    def test_penalty_keeps_highest(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([45, 78])
        dice = Dice("p", limits)
        assert dice.result == 75
        assert dice.render() == "P1=75[懲罰骰:45 78]"

    def test_zero_units_and_tens_is_hundred(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([30, 100])
        assert Dice("p", limits).result == 100

        fixed_rolls.values.extend([30, 100])
        assert Dice("b", limits).result == 30

    def test_units_taken_from_first_die(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([99, 1])
        assert Dice("b", limits).result == 9

    def test_appendix(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([45, 78, 12])
        dice = Dice("b2+10 潛行", limits)
        assert dice.result == 25
        assert dice.reason == "潛行"
        assert dice.render() == "B2+10=15[獎勵骰:45 78 12]+10=25"

    def test_terse(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([45, 78, 12])
        assert Dice("b2", limits).render(terse=True) == "B2=15"

    def test_reroll(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([45, 78, 52, 12])
        first = Dice("b", limits)
        second = first.reroll()
        assert (first.result, second.result) == (45, 12)
        assert first.bp_rolls == [45, 78]
