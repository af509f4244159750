import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from utils import rolling
from utils.arithmetic import OPERAND, Node, Token, evaluate, parse_tokens, tokenize
from utils.config import ConfigLimits
from utils.exceptions import DiceNumberOverstepError
from utils.replies import BP_DICE_WORDING
from utils.subexpression import DiceTerm, Subexpression


# 前置標記: H 暗骰、S 簡略輸出、B/P 獎勵骰/懲罰骰（可跟骰子數）
MARKER_PATTERN = re.compile(
    r"^(?P<hidden>H)?(?P<simple>S)?(?:(?P<bp>[BP])(?P<bp_number>\d+)?)?(?=[DKX]|[^A-Z]|$)",
    re.IGNORECASE
)
# 緊鄰運算符或括號的空白屬於表達式，"3d6 + 2" 整體為表達式
EXPRESSION_PATTERN = re.compile(
    r"^(?:[0-9DKX×+\-*()（）]|(?<=[+\-*×X(（])\s+|\s+(?=[+\-*×)）]))*",
    re.IGNORECASE
)
BP_APPENDIX_PATTERN = re.compile(r"^[+\-*]")


@dataclass(frozen=True)
class ParsedExpression:
    """
    已解析的擲骰表達式，可重複用於多次擲骰

    terms 與語法樹中的操作數一一對應；獎勵骰/懲罰骰的位置為 None。
    """
    order: str
    expression: str
    tokens: Tuple[Token, ...]
    tree: Node
    terms: Tuple[Optional[DiceTerm], ...]
    reason: str = ""
    hidden: bool = False
    simple: bool = False
    bp_type: Optional[str] = None
    bp_dice_number: int = 0


def parse_order(order: str, limits: ConfigLimits,
                default_surface_number: int = 100) -> ParsedExpression:
    """
    解析擲骰指令（已去掉指令名），例如 "3d6+2 攻擊"、"hb2 潛行"、"(5D80K2+10)x5"
    所有骰子項都會在擲骰前完成範圍檢查
    """
    order = order.strip()
    hidden = simple = False
    bp_type = None
    bp_dice_number = 0
    rest = order

    markers = MARKER_PATTERN.match(order)
    if markers:
        hidden = bool(markers.group("hidden"))
        simple = bool(markers.group("simple"))
        if markers.group("bp"):
            bp_type = markers.group("bp").upper()
            bp_number = markers.group("bp_number")
            bp_dice_number = int(bp_number) if bp_number else 1
        rest = order[markers.end():]

    rest = rest.strip()

    if bp_type:
        if bp_dice_number < 1 or bp_dice_number + 1 > limits.max_dice_number:
            raise DiceNumberOverstepError(f"獎勵骰/懲罰骰數量必須在 1 到 {limits.max_dice_number - 1} 之間")

        # 獎勵骰後只接受以運算符開頭的附加算式，其餘為原因
        appendix = ""
        if BP_APPENDIX_PATTERN.match(rest):
            appendix = EXPRESSION_PATTERN.match(rest).group(0)
        reason = rest[len(appendix):].strip()
        tokens = [Token(OPERAND, f"{bp_type}{bp_dice_number}")] + tokenize(appendix)
    else:
        expression_text = EXPRESSION_PATTERN.match(rest).group(0)
        reason = rest[len(expression_text):].strip()
        tokens = tokenize(expression_text) or [Token(OPERAND, "D")]

    tree, _ = parse_tokens(tokens)

    terms: List[Optional[DiceTerm]] = []
    for index, token in enumerate(t for t in tokens if t.kind == OPERAND):
        if bp_type and index == 0:
            terms.append(None)
        else:
            terms.append(DiceTerm.parse(token.text, limits, default_surface_number))

    return ParsedExpression(
        order=order,
        expression=_join_tokens(tokens, terms, lambda term: term.expression if term else tokens[0].text),
        tokens=tuple(tokens),
        tree=tree,
        terms=tuple(terms),
        reason=reason,
        hidden=hidden,
        simple=simple,
        bp_type=bp_type,
        bp_dice_number=bp_dice_number
    )


def _join_tokens(tokens, items, render) -> str:
    """將詞法單元拼回字符串，第 i 個操作數以 render(items[i]) 替換"""
    parts = []
    operands = iter(items)
    for token in tokens:
        if token.kind == OPERAND:
            item = next(operands)
            parts.append(render(item))
        else:
            parts.append(token.text)
    return "".join(parts)


def _join_segments(segments: List[str]) -> str:
    """以 "=" 連接各段，與前一段相同的段會被省略"""
    kept = []
    for segment in segments:
        if not kept or kept[-1] != segment:
            kept.append(segment)
    return "=".join(kept)


class Dice:
    """
    擲骰表達式

    構造時解析並擲骰一次；reroll() 重用解析結果重新擲骰，用於重複擲骰。
    """

    def __init__(self, order: str, limits: ConfigLimits, default_surface_number: int = 100):
        self.parsed = parse_order(order, limits, default_surface_number)
        self._roll()

    @classmethod
    def from_parsed(cls, parsed: ParsedExpression) -> "Dice":
        dice = cls.__new__(cls)
        dice.parsed = parsed
        dice._roll()
        return dice

    @property
    def expression(self) -> str:
        return self.parsed.expression

    @property
    def reason(self) -> str:
        return self.parsed.reason

    @property
    def hidden(self) -> bool:
        return self.parsed.hidden

    @property
    def simple(self) -> bool:
        return self.parsed.simple

    @property
    def bp_type(self) -> Optional[str]:
        return self.parsed.bp_type

    def _roll(self):
        self.bp_rolls: List[int] = []
        self.bp_result = 0
        self.subexpressions: List[Optional[Subexpression]] = []

        values = []
        for term in self.parsed.terms:
            if term is None:
                self._roll_bonus_penalty()
                self.subexpressions.append(None)
                values.append(self.bp_result)
            else:
                subexpression = Subexpression(term)
                self.subexpressions.append(subexpression)
                values.append(subexpression.result)

        self.result = evaluate(self.parsed.tree, values)

    def _roll_bonus_penalty(self):
        """
        擲 1+n 個 D100，個位數取第一顆骰，十位數在所有骰子中挑選
        獎勵骰取組合後的最小值，懲罰骰取最大值（00 視為 100）
        """
        self.bp_rolls = rolling.roll(1 + self.parsed.bp_dice_number, 100)
        units = self.bp_rolls[0] % 10
        candidates = [(roll // 10 % 10) * 10 + units or 100 for roll in self.bp_rolls]
        self.bp_result = min(candidates) if self.parsed.bp_type == "B" else max(candidates)

    def reroll(self) -> "Dice":
        """以相同的解析結果重新擲骰"""
        return Dice.from_parsed(self.parsed)

    def _substitute(self, annotate: bool) -> str:
        def render(subexpression: Optional[Subexpression]) -> str:
            if subexpression is not None:
                return subexpression.render()
            if not annotate:
                return str(self.bp_result)
            wording = BP_DICE_WORDING[self.parsed.bp_type]
            return f"{self.bp_result}[{wording}:{' '.join(map(str, self.bp_rolls))}]"

        return _join_tokens(self.parsed.tokens, self.subexpressions, render)

    def render(self, terse: bool = False) -> str:
        """
        生成擲骰過程，例如 "3D6+2=(1+5+3)+2=11"
        terse 或 S 標記時只顯示 "表達式=結果"
        """
        if terse or self.parsed.simple:
            return _join_segments([self.expression, str(self.result)])

        segments = [self.expression, self._substitute(annotate=True)]
        if self._substitute(annotate=False) != str(self.result):
            segments.append(str(self.result))
        return _join_segments(segments)
