"""
骰子表達式的最小子表達式

一個子表達式是以下三種之一:
    常數        例如 "5"
    xDy         例如 "3D6"、"D20"（x 省略時為 1）
    xDyKz       例如 "4D6K3"（取最大的 z 個，z 省略時為 1）

y 省略時使用聊天的默認骰子面數，例如 "D" 或 "8DK3"。
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from utils import rolling
from utils.config import ConfigLimits
from utils.exceptions import (DiceNumberOverstepError, ExpressionInvalidError,
                              SurfaceNumberOverstepError)


TERM_PATTERN = re.compile(
    r"^(?:(?P<constant>\d+)|(?P<dice>\d+)?D(?P<surface>\d+)?(?:(?P<k>K)(?P<keep>\d+)?)?)$",
    re.IGNORECASE
)


class TermKind(Enum):
    CONSTANT = "constant"
    DICE = "dice"
    KEEP_HIGHEST = "keep_highest"


@dataclass(frozen=True)
class DiceTerm:
    """已解析並通過範圍檢查的子表達式參數"""
    expression: str
    kind: TermKind
    dice_number: int = 1
    surface_number: int = 1
    k_number: Optional[int] = None
    constant: int = 0

    @classmethod
    def parse(cls, expression: str, limits: ConfigLimits,
              default_surface_number: Optional[int] = None) -> "DiceTerm":
        """
        解析子表達式並檢查範圍，不會擲骰
        錯誤: ExpressionInvalidError / DiceNumberOverstepError / SurfaceNumberOverstepError
        """
        match = TERM_PATTERN.match(expression.strip())
        if not match:
            raise ExpressionInvalidError(f"無法識別的骰子項: {expression!r}")

        if match.group("constant") is not None:
            value = int(match.group("constant"))
            return cls(expression=str(value), kind=TermKind.CONSTANT, constant=value)

        dice_str = match.group("dice")
        dice_number = int(dice_str) if dice_str else 1

        surface_str = match.group("surface")
        if surface_str:
            surface_number = int(surface_str)
        elif default_surface_number is not None:
            surface_number = default_surface_number
        else:
            raise ExpressionInvalidError(f"骰子項缺少面數: {expression!r}")

        k_number = None
        if match.group("k"):
            keep_str = match.group("keep")
            k_number = int(keep_str) if keep_str else 1

        if dice_number < 1 or dice_number > limits.max_dice_number:
            raise DiceNumberOverstepError(f"骰子數量必須在 1 到 {limits.max_dice_number} 之間")

        if surface_number < 1 or surface_number > limits.max_surface_number:
            raise SurfaceNumberOverstepError(f"骰子面數必須在 1 到 {limits.max_surface_number} 之間")

        if k_number is not None and (k_number < 1 or k_number > dice_number):
            raise ExpressionInvalidError(f"K 值必須在 1 到 {dice_number} 之間")

        # 保留使用者寫法，只補上省略的面數
        normalized = f"{dice_str or ''}D{surface_number}"
        if k_number is not None:
            normalized += f"K{match.group('keep') or ''}"

        return cls(
            expression=normalized,
            kind=TermKind.DICE if k_number is None else TermKind.KEEP_HIGHEST,
            dice_number=dice_number,
            surface_number=surface_number,
            k_number=k_number
        )


class Subexpression:
    """
    一個已擲出的子表達式

    rolls 為所有骰子的原始點數（常數為 [值]），results 為計入結果的點數：
    xDyKz 會從 rolls 中反覆移除當前最小值（相同時移除最先出現的一個），
    直到剩下 z 個。result 為 results 之和。
    """

    def __init__(self, term: DiceTerm):
        self.term = term
        self.rolls: List[int] = []
        self.results: List[int] = []
        self.result = 0
        self._roll()

    @classmethod
    def from_string(cls, expression: str, limits: ConfigLimits,
                    default_surface_number: Optional[int] = None) -> "Subexpression":
        return cls(DiceTerm.parse(expression, limits, default_surface_number))

    @property
    def expression(self) -> str:
        return self.term.expression

    @property
    def kind(self) -> TermKind:
        return self.term.kind

    def _roll(self):
        term = self.term

        if term.kind is TermKind.CONSTANT:
            self.rolls = [term.constant]
            self.results = [term.constant]
        else:
            self.rolls = rolling.roll(term.dice_number, term.surface_number)
            self.results = list(self.rolls)

            if term.kind is TermKind.KEEP_HIGHEST:
                while len(self.results) > term.k_number:
                    self.results.remove(min(self.results))

        self.result = sum(self.results)

    def reroll(self) -> "Subexpression":
        """以相同參數重新擲骰，返回新的子表達式"""
        return Subexpression(self.term)

    def render(self, glue: str = "+") -> str:
        """單個點數直接顯示，多個點數以 glue 連接並加上括號"""
        if len(self.results) == 1:
            return str(self.results[0])

        return "(" + glue.join(map(str, self.results)) + ")"
