"""指令文本的解析"""

import re
from typing import List, Optional, Tuple

from models.types import CheckOrder, SanityOrder
from utils.exceptions import OrderError


# 按長度從長到短匹配，".rd" 為 "r" + "d"，".ra60" 為 "ra" + "60"
ORDER_NAMES = ("setcoc", "help", "san", "dnd", "coc", "set", "ra", "st", "sc", "hp", "mp", "r")

REPEAT_PATTERN = re.compile(r"^([\s\S]*?)(?:#\s*(\d+))?\s*$")

CHECK_PATTERN = re.compile(
    r"^(?P<hidden>h(?=\s|[bp]\d*\s|\d|$))?\s*"
    r"(?:(?P<bp>[bp])(?P<bp_number>\d*)\s+)?"
    r"(?P<name>[^\s\d#+\-]*)\s*"
    r"(?P<value>\d+)?\s*"
    r"(?P<modifiers>(?:[+\-]\s*\d+\s*)*)"
    r"(?:#\s*(?P<repeat>\d+))?\s*$",
    re.IGNORECASE
)

COUNT_PATTERN = re.compile(r"^\s*(\d+)?\s*$")

ATTRIBUTE_PATTERN = re.compile(r"([^\s\d:：=]+)\s*[:：=]?\s*(\d+)")

SANITY_PATTERN = re.compile(r"^(?P<success>[^/\s]+)\s*/\s*(?P<failure>[^/\s]+)(?:\s+(?P<value>\d+))?\s*$")

ATTRIBUTE_CHANGE_PATTERN = re.compile(r"^(?P<sign>[+\-])\s*(?P<expression>\S.*?)\s*$")


def split_order(content: str, prefix: str = ".") -> Optional[Tuple[str, str]]:
    """
    將消息拆分為指令名與參數，例如 ".rh3d6" -> ("r", "h3d6")
    不是指令時返回 None
    """
    if not content.startswith(prefix):
        return None

    body = content[len(prefix):]
    lowered = body.lower()
    for name in ORDER_NAMES:
        if lowered.startswith(name):
            return name, body[len(name):].strip()

    return None


def parse_repeat(order: str) -> Tuple[str, int]:
    """拆出結尾的 "#次數"，例如 "3d6 攻擊#3" -> ("3d6 攻擊", 3)"""
    match = REPEAT_PATTERN.match(order)
    expression, repeat = match.group(1), match.group(2)
    return expression.strip(), int(repeat) if repeat else 1


def parse_check_order(order: str) -> CheckOrder:
    """
    解析檢定指令，例如 "h b2 偵查 60 +10 #3"
    屬性名與數值至少給出一個
    """
    match = CHECK_PATTERN.match(order.strip())
    if not match or not (match.group("name") or match.group("value")):
        raise OrderError(f"無效的檢定指令: {order!r}")

    bp = ""
    if match.group("bp"):
        bp = match.group("bp").upper() + (match.group("bp_number") or "")

    value = match.group("value")
    repeat = match.group("repeat")

    return CheckOrder(
        hidden=bool(match.group("hidden")),
        bp=bp,
        name=match.group("name"),
        value=int(value) if value else None,
        modifiers=re.sub(r"\s+", "", match.group("modifiers")),
        repeat=int(repeat) if repeat else 1
    )


def parse_optional_number(order: str) -> Optional[int]:
    """解析可省略的數字參數，省略時為 None"""
    match = COUNT_PATTERN.match(order)
    if not match:
        raise OrderError(f"無效的數字: {order!r}")
    return int(match.group(1)) if match.group(1) else None


def parse_count(order: str) -> int:
    """解析可省略的次數參數，省略時為 1"""
    count = parse_optional_number(order)
    return 1 if count is None else count


def parse_attributes(order: str) -> List[Tuple[str, int]]:
    """解析屬性錄入，例如 "力量60 敏捷:50" -> [("力量", 60), ("敏捷", 50)]"""
    attributes = [(name, int(value)) for name, value in ATTRIBUTE_PATTERN.findall(order)]

    if not attributes or ATTRIBUTE_PATTERN.sub("", order).strip():
        raise OrderError(f"無效的屬性: {order!r}")

    return attributes


def parse_sanity_order(order: str) -> SanityOrder:
    """解析理智檢定，例如 "1/1d6" 或 "0/1d4+1 60"，成功與失敗的損失以 "/" 分隔"""
    match = SANITY_PATTERN.match(order.strip())
    if not match:
        raise OrderError(f"無效的理智檢定指令: {order!r}")

    value = match.group("value")
    return SanityOrder(
        success=match.group("success"),
        failure=match.group("failure"),
        value=int(value) if value else None
    )


def parse_attribute_change(order: str) -> Tuple[str, str]:
    """解析屬性增減，例如 "-1d6 被咬" -> ("-", "1d6 被咬")"""
    match = ATTRIBUTE_CHANGE_PATTERN.match(order.strip())
    if not match:
        raise OrderError(f"無效的屬性增減: {order!r}")
    return match.group("sign"), match.group("expression")
