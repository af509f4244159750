"""Unit tests for repeated rolling and the reply length ceiling."""

import pytest

from utils.config import ConfigLimits
from utils.dice import Dice
from utils.exceptions import RepeatTimeOverstepError
from utils.repeat import check_repeat, run_repeat


class TestCheckRepeat:
    @pytest.mark.parametrize("repeat", [1, 100])
    def test_accepts_bounds(self, limits, repeat: int) -> None:
        check_repeat(repeat, limits)

    @pytest.mark.parametrize("repeat", [0, -1, 101])
    def test_rejects_out_of_range(self, limits, repeat: int) -> None:
        with pytest.raises(RepeatTimeOverstepError, match="重複次數"):
            check_repeat(repeat, limits)


class TestRunRepeat:
    def test_exact_line_count(self, limits) -> None:
        result = run_repeat(lambda: Dice("3D6", limits), 5, limits)
        assert len(result.runs) == 5
        assert len(result.lines) == 5
        assert len(result.detail.split("\n")) == 5
        assert not result.terse

    def test_builder_called_once(self, limits) -> None:
        calls = []

        def builder():
            calls.append(1)
            return Dice("3D6", limits)

        result = run_repeat(builder, 4, limits)
        assert len(calls) == 1
        assert len({id(dice.parsed) for dice in result.runs}) == 1

    def test_out_of_range_never_rolls(self, limits, fixed_rolls) -> None:
        with pytest.raises(RepeatTimeOverstepError):
            run_repeat(lambda: Dice("3D6", limits), 101, limits)
        assert fixed_rolls.calls == []

    def test_full_trace_within_ceiling(self, fixed_rolls) -> None:
        limits = ConfigLimits(max_reply_character=30)
        fixed_rolls.values.extend([1, 2, 3] * 2)
        result = run_repeat(lambda: Dice("3D6", limits), 2, limits)
        assert result.lines == ["3D6=(1+2+3)=6"] * 2
        assert not result.terse

    def test_terse_when_over_ceiling(self, fixed_rolls) -> None:
        limits = ConfigLimits(max_reply_character=30)
        fixed_rolls.values.extend([1, 2, 3] * 3)
        result = run_repeat(lambda: Dice("3D6", limits), 3, limits)
        assert result.lines == ["3D6=6"] * 3
        assert result.terse

    def test_results_independent(self, limits, fixed_rolls) -> None:
        fixed_rolls.values.extend([1, 6, 3])
        result = run_repeat(lambda: Dice("D6", limits), 3, limits)
        assert [dice.result for dice in result.runs] == [1, 6, 3]
        assert result.detail == "D6=1\nD6=6\nD6=3"
