from typing import Callable, List

from models.types import RepeatResult
from utils.config import ConfigLimits
from utils.dice import Dice
from utils.exceptions import RepeatTimeOverstepError


def check_repeat(repeat: int, limits: ConfigLimits):
    """檢查重複次數"""
    if repeat < 1 or repeat > limits.max_repeat_times:
        raise RepeatTimeOverstepError(f"重複次數必須在 1 到 {limits.max_repeat_times} 之間")


def run_repeat(builder: Callable[[], Dice], repeat: int, limits: ConfigLimits) -> RepeatResult:
    """
    重複擲骰 repeat 次：第一次調用 builder 解析並擲骰，之後以 reroll() 重新擲骰
    每次一行；總長度超過 max_reply_character 時，所有行改用簡略格式
    """
    check_repeat(repeat, limits)

    runs: List[Dice] = []
    for _ in range(repeat):
        runs.append(runs[-1].reroll() if runs else builder())

    lines = [dice.render() for dice in runs]
    if len("\n".join(lines)) <= limits.max_reply_character:
        return RepeatResult(runs=runs, lines=lines)

    return RepeatResult(runs=runs, lines=[dice.render(terse=True) for dice in runs], terse=True)
