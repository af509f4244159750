from typing import List, Sequence, Tuple

from models.types import AttributeSet
from utils.config import ConfigLimits
from utils.dice import Dice
from utils.exceptions import GenerateCountOverstepError


DND_GENERATE_RULE = "4D6K3"
DND_ATTRIBUTES = ("力量", "體質", "敏捷", "智力", "感知", "魅力")

COC_ATTRIBUTES: Tuple[Tuple[str, str], ...] = (
    ("力量", "3D6*5"),
    ("體質", "3D6*5"),
    ("體型", "(2D6+6)*5"),
    ("敏捷", "3D6*5"),
    ("外貌", "3D6*5"),
    ("智力", "(2D6+6)*5"),
    ("意志", "3D6*5"),
    ("教育", "(2D6+6)*5"),
    ("幸運", "3D6*5"),
)


def check_generate_count(count: int, limits: ConfigLimits):
    """檢查生成次數"""
    if count < 1 or count > limits.max_generate_count:
        raise GenerateCountOverstepError(f"生成次數必須在 1 到 {limits.max_generate_count} 之間")


def generate_dnd(count: int, limits: ConfigLimits) -> List[AttributeSet]:
    """生成 D&D 冒險者屬性，每項為 4D6K3"""
    check_generate_count(count, limits)

    dice = None
    sets = []
    for _ in range(count):
        attributes = AttributeSet()
        for name in DND_ATTRIBUTES:
            dice = dice.reroll() if dice else Dice(DND_GENERATE_RULE, limits)
            attributes.values[name] = dice.result
        sets.append(attributes)

    return sets


def generate_coc(count: int, limits: ConfigLimits) -> List[AttributeSet]:
    """生成 CoC 7e 調查員屬性"""
    check_generate_count(count, limits)

    templates = [(name, Dice(rule, limits)) for name, rule in COC_ATTRIBUTES]
    sets = []
    for index in range(count):
        attributes = AttributeSet()
        for name, dice in templates:
            attributes.values[name] = (dice if index == 0 else dice.reroll()).result
        sets.append(attributes)

    return sets


def format_attribute_sets(sets: Sequence[AttributeSet]) -> str:
    """格式化屬性，每組一行並附上總和"""
    lines = []
    for attributes in sets:
        values = " ".join(f"{name}:{value}" for name, value in attributes.values.items())
        lines.append(f"{values} 總和:{attributes.total}")
    return "\n".join(lines)
