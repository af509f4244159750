"""
理智檢定與屬性增減

    .sc 1/1d6        以理智值擲 D100，成功扣 1，失敗扣 1d6
    .hp -1d6 被咬    體力減少 1d6
    .san +5          理智增加 5

結果寫回角色屬性由指令層負責，這裡只計算前後數值。
"""

from typing import Dict, Tuple

from models.types import AttributeChangeResult, CheckOrder, SanityCheckResult, SanityOrder
from utils.check import CheckRule, is_success
from utils.config import ConfigLimits
from utils.dice import Dice, ParsedExpression, parse_order
from utils.exceptions import ExpressionInvalidError
from utils.skill_check import roll_check


# 指令名對應的屬性名，按順序查找已錄入的屬性
CHANGE_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "hp": ("hp", "體力"),
    "mp": ("mp", "魔法"),
    "san": ("san", "理智"),
}

SANITY_NAMES = CHANGE_ATTRIBUTES["san"]


def _parse_amount(expression: str, limits: ConfigLimits, default_surface_number: int) -> ParsedExpression:
    parsed = parse_order(expression, limits, default_surface_number)
    if parsed.hidden or parsed.simple or parsed.bp_type:
        raise ExpressionInvalidError(f"數值表達式不能帶標記: {expression!r}")
    return parsed


def sanity_check(order: SanityOrder, sanity: int, rule: CheckRule, limits: ConfigLimits,
                 default_surface_number: int = 100) -> SanityCheckResult:
    """
    以當前理智值進行 D100 檢定，成功時損失 order.success，失敗時損失 order.failure
    兩個損失表達式都在擲骰前完成檢查；理智最低為 0
    """
    success_loss = _parse_amount(order.success, limits, default_surface_number)
    failure_loss = _parse_amount(order.failure, limits, default_surface_number)
    for parsed in (success_loss, failure_loss):
        if parsed.reason:
            raise ExpressionInvalidError(f"無效的理智損失: {parsed.order!r}")

    [check] = roll_check(CheckOrder(value=sanity), sanity, rule, limits)
    check_success = is_success(check.level)

    loss_dice = Dice.from_parsed(success_loss if check_success else failure_loss)
    loss = max(loss_dice.result, 0)

    return SanityCheckResult(
        check=check,
        check_success=check_success,
        loss_detail=loss_dice.render(),
        loss=loss,
        before_sanity=sanity,
        after_sanity=max(sanity - loss, 0)
    )


def change_attribute(name: str, before: int, sign: str, expression: str, limits: ConfigLimits,
                     default_surface_number: int = 100) -> AttributeChangeResult:
    """按表達式增減屬性值，結果限制在 0 到 max_attribute"""
    dice = Dice.from_parsed(_parse_amount(expression, limits, default_surface_number))
    change = dice.result if sign == "+" else -dice.result

    return AttributeChangeResult(
        name=name,
        detail=dice.render(),
        change=change,
        before=before,
        after=min(max(before + change, 0), limits.max_attribute),
        reason=dice.reason
    )
