import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from utils.replies import CHECK_LEVEL_WORDING


# 條件格式: "<result|value> <運算符> <整數|value|value/n>"
CONDITION_PATTERN = re.compile(
    r"^\s*(result|value)\s*(==|<=|>=|<|>)\s*(?:(\d+)|value(?:\s*/\s*([1-9]\d*))?)\s*$"
)

OPERATORS: Dict[str, Callable[[int, int], bool]] = {
    "==": operator.eq,
    "<=": operator.le,
    "<": operator.lt,
    ">=": operator.ge,
    ">": operator.gt,
}

CHECK_LEVELS = tuple(CHECK_LEVEL_WORDING)


@dataclass(frozen=True)
class Condition:
    """單個比較條件"""
    subject: str
    op: str
    constant: int = 0
    divisor: int = 0  # 0 表示門檻為常數，否則為 value // divisor

    @classmethod
    def parse(cls, text: str) -> "Condition":
        match = CONDITION_PATTERN.match(text)
        if not match:
            raise ValueError(f"無效的檢定條件: {text!r}")

        subject, op, constant, divisor = match.groups()
        if constant is not None:
            return cls(subject=subject, op=op, constant=int(constant))
        return cls(subject=subject, op=op, divisor=int(divisor) if divisor else 1)

    def threshold(self, value: int) -> int:
        if self.divisor:
            return value // self.divisor
        return self.constant

    def test(self, result: int, value: int) -> bool:
        subject = result if self.subject == "result" else value
        return OPERATORS[self.op](subject, self.threshold(value))


@dataclass(frozen=True)
class CheckLevel:
    """規則表中的一個等級，所有條件同時成立時命中"""
    name: str
    conditions: Tuple[Condition, ...]

    def matches(self, result: int, value: int) -> bool:
        return all(condition.test(result, value) for condition in self.conditions)


@dataclass(frozen=True)
class CheckRule:
    """檢定規則表，按順序匹配，第一個命中的等級勝出"""
    name: str
    description: str
    levels: Tuple[CheckLevel, ...]
    default: str = "failure"

    def evaluate(self, result: int, value: int) -> str:
        return evaluate_check(result, value, self)


def evaluate_check(result: int, value: int, rule: CheckRule) -> str:
    """
    根據規則表判定成功等級
    返回等級名稱，例如 "hard_success"；沒有等級命中時返回規則的默認等級
    """
    for level in rule.levels:
        if level.matches(result, value):
            return level.name
    return rule.default


def is_success(level: str) -> bool:
    """判定等級是否屬於成功"""
    return level.endswith("_success")


def format_check_level(level: str) -> str:
    """將成功等級格式化為字符串"""
    return CHECK_LEVEL_WORDING.get(level, "未知 (Unknown)")


def _load_level(data: Mapping[str, Any]) -> CheckLevel:
    name = data["name"]
    if name not in CHECK_LEVELS:
        raise ValueError(f"未知的檢定等級: {name!r}")
    conditions = data.get("conditions") or []
    if not conditions:
        raise ValueError(f"檢定等級 {name} 缺少條件")
    return CheckLevel(name=name, conditions=tuple(Condition.parse(text) for text in conditions))


def load_check_rule(data: Mapping[str, Any]) -> CheckRule:
    """從配置字典建立規則表"""
    default = data.get("default", "failure")
    if default not in CHECK_LEVELS:
        raise ValueError(f"未知的檢定等級: {default!r}")

    return CheckRule(
        name=data["name"],
        description=data.get("description", ""),
        levels=tuple(_load_level(level) for level in data["levels"]),
        default=default
    )


def load_check_rules(data: Sequence[Mapping[str, Any]]) -> List[CheckRule]:
    """從配置列表建立所有規則表"""
    rules = [load_check_rule(item) for item in data]
    if not rules:
        raise ValueError("至少需要一條檢定規則")
    return rules


DEFAULT_CHECK_RULES_DATA: List[Dict[str, Any]] = [
    {
        "name": "規則書",
        "description": "出1大成功；不滿50出96-100大失敗，滿50出100大失敗",
        "levels": [
            {"name": "critical_success", "conditions": ["result == 1"]},
            {"name": "fumble", "conditions": ["result == 100"]},
            {"name": "fumble", "conditions": ["value < 50", "result >= 96"]},
            {"name": "extreme_success", "conditions": ["result <= value/5"]},
            {"name": "hard_success", "conditions": ["result <= value/2"]},
            {"name": "regular_success", "conditions": ["result <= value"]},
        ],
    },
    {
        "name": "房規一",
        "description": "不滿50出1大成功，滿50出1-5大成功；不滿50出96-100大失敗，滿50出100大失敗",
        "levels": [
            {"name": "critical_success", "conditions": ["result == 1"]},
            {"name": "critical_success", "conditions": ["value >= 50", "result <= 5"]},
            {"name": "fumble", "conditions": ["result == 100"]},
            {"name": "fumble", "conditions": ["value < 50", "result >= 96"]},
            {"name": "extreme_success", "conditions": ["result <= value/5"]},
            {"name": "hard_success", "conditions": ["result <= value/2"]},
            {"name": "regular_success", "conditions": ["result <= value"]},
        ],
    },
    {
        "name": "房規二",
        "description": "出1-5且小於等於成功率大成功；出100或出96-99且大於成功率大失敗",
        "levels": [
            {"name": "critical_success", "conditions": ["result <= 5", "result <= value"]},
            {"name": "fumble", "conditions": ["result == 100"]},
            {"name": "fumble", "conditions": ["result >= 96", "result > value"]},
            {"name": "extreme_success", "conditions": ["result <= value/5"]},
            {"name": "hard_success", "conditions": ["result <= value/2"]},
            {"name": "regular_success", "conditions": ["result <= value"]},
        ],
    },
    {
        "name": "房規三",
        "description": "出1-5大成功；出96-100大失敗",
        "levels": [
            {"name": "critical_success", "conditions": ["result <= 5"]},
            {"name": "fumble", "conditions": ["result >= 96"]},
            {"name": "extreme_success", "conditions": ["result <= value/5"]},
            {"name": "hard_success", "conditions": ["result <= value/2"]},
            {"name": "regular_success", "conditions": ["result <= value"]},
        ],
    },
    {
        "name": "房規四",
        "description": "出1-2且小於五分之一大成功；不滿50出96-100大失敗，滿50出99-100大失敗",
        "levels": [
            {"name": "critical_success", "conditions": ["result <= 2", "result < value/5"]},
            {"name": "fumble", "conditions": ["result >= 99"]},
            {"name": "fumble", "conditions": ["value < 50", "result >= 96"]},
            {"name": "extreme_success", "conditions": ["result <= value/5"]},
            {"name": "hard_success", "conditions": ["result <= value/2"]},
            {"name": "regular_success", "conditions": ["result <= value"]},
        ],
    },
]

DEFAULT_CHECK_RULES: Tuple[CheckRule, ...] = tuple(load_check_rules(DEFAULT_CHECK_RULES_DATA))
