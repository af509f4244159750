from typing import List, Mapping

from models.types import CheckOrder, CheckResult
from utils.check import CheckRule, format_check_level
from utils.config import ConfigLimits
from utils.dice import Dice
from utils.exceptions import AttributeOverstepError
from utils.repeat import run_repeat
from utils.replies import DEFAULT_REPLIES, format_reply


def check_attribute(value: int, limits: ConfigLimits):
    """檢查檢定目標值"""
    if value < 1 or value > limits.max_attribute:
        raise AttributeOverstepError(f"檢定值必須在 1 到 {limits.max_attribute} 之間")


def clamp_check_result(result: int) -> int:
    """檢定結果限制在 1-100"""
    return min(max(result, 1), 100)


def roll_check(order: CheckOrder, value: int, rule: CheckRule, limits: ConfigLimits) -> List[CheckResult]:
    """
    擲 D100（或獎勵骰/懲罰骰）加修正值，按規則表判定成功等級
    """
    check_attribute(value, limits)

    expression = f"{order.bp or 'D100'}{order.modifiers}"
    repeat_result = run_repeat(lambda: Dice(expression, limits), order.repeat, limits)

    results = []
    for dice, line in zip(repeat_result.runs, repeat_result.lines):
        result = clamp_check_result(dice.result)
        results.append(CheckResult(
            detail=line,
            result=result,
            value=value,
            level=rule.evaluate(result, value)
        ))

    return results


def format_check_results(results: List[CheckResult], replies: Mapping[str, str] = DEFAULT_REPLIES) -> str:
    """格式化檢定結果，每次一行"""
    return "\n".join(
        format_reply(
            replies,
            "checkResult",
            detail=result.detail,
            value=result.value,
            level=format_check_level(result.level)
        )
        for result in results
    )
