"""
骰子表達式的詞法分析與四則運算（遞歸下降，不使用 eval）

    expression := term (("+" | "-") term)*
    term       := factor ("*" factor)*
    factor     := OPERAND | "(" expression ")"

乘號可寫作 "*"、"x"、"X" 或 "×"，括號可為半形或全形。
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from utils.exceptions import ExpressionError


OPERAND = "operand"
OPERATOR = "operator"
LPAREN = "("
RPAREN = ")"

TOKEN_PATTERN = re.compile(
    r"(?P<operand>[0-9DK]+)|(?P<operator>[+\-*X×])|(?P<lparen>[(（])|(?P<rparen>[)）])",
    re.IGNORECASE
)

MAX_DEPTH = 32


@dataclass(frozen=True)
class Token:
    kind: str
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Operand:
    """葉節點，index 為操作數在表達式中的序號"""
    index: int


@dataclass(frozen=True)
class Chain:
    """同一優先級的運算鏈，例如 1+2-3，從左到右計算"""
    first: "Node"
    rest: Tuple[Tuple[str, "Node"], ...]


Node = Union[Operand, Chain]


def tokenize(text: str) -> List[Token]:
    """將表達式切分為詞法單元，運算符與括號統一為半形"""
    tokens = []
    position = 0
    text = text.strip()

    while position < len(text):
        if text[position].isspace():
            position += 1
            continue

        match = TOKEN_PATTERN.match(text, position)
        if not match:
            raise ExpressionError(f"無法識別的字符: {text[position]!r}")

        if match.group("operand"):
            tokens.append(Token(OPERAND, match.group("operand").upper()))
        elif match.group("operator"):
            op = match.group("operator")
            tokens.append(Token(OPERATOR, "*" if op in "xX×" else op))
        elif match.group("lparen"):
            tokens.append(Token(LPAREN, "("))
        else:
            tokens.append(Token(RPAREN, ")"))

        position = match.end()

    return tokens


class _Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.position = 0
        self.operand_count = 0

    def peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.position]
        self.position += 1
        return token

    def parse(self) -> Node:
        if not self.tokens:
            raise ExpressionError("表達式為空")

        node = self.expression(0)
        if self.peek() is not None:
            raise ExpressionError(f"多餘的 {self.peek()}")
        return node

    def expression(self, depth: int) -> Node:
        first = self.term(depth)
        rest = []
        while self._at_operator("+-"):
            op = self.advance().text
            rest.append((op, self.term(depth)))
        return Chain(first, tuple(rest)) if rest else first

    def term(self, depth: int) -> Node:
        first = self.factor(depth)
        rest = []
        while self._at_operator("*"):
            self.advance()
            rest.append(("*", self.factor(depth)))
        return Chain(first, tuple(rest)) if rest else first

    def factor(self, depth: int) -> Node:
        token = self.peek()

        if token is None:
            raise ExpressionError("運算符後缺少操作數")

        if token.kind == OPERAND:
            self.advance()
            node = Operand(self.operand_count)
            self.operand_count += 1
            return node

        if token.kind == LPAREN:
            if depth >= MAX_DEPTH:
                raise ExpressionError("括號嵌套過深")
            self.advance()
            node = self.expression(depth + 1)
            closing = self.peek()
            if closing is None or closing.kind != RPAREN:
                raise ExpressionError("括號不匹配")
            self.advance()
            return node

        raise ExpressionError(f"意外的 {token}")

    def _at_operator(self, ops: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == OPERATOR and token.text in ops


def parse_tokens(tokens: Sequence[Token]) -> Tuple[Node, int]:
    """檢查表達式結構，返回語法樹與操作數個數"""
    parser = _Parser(tokens)
    node = parser.parse()
    return node, parser.operand_count


def evaluate(node: Node, values: Sequence[int]) -> int:
    """以操作數的值計算語法樹，按常規優先級從左到右"""
    if isinstance(node, Operand):
        return values[node.index]

    # 運算鏈是扁平的，遞歸深度只取決於括號嵌套層數
    result = evaluate(node.first, values)
    for op, operand in node.rest:
        value = evaluate(operand, values)
        if op == "+":
            result += value
        elif op == "-":
            result -= value
        else:
            result *= value
    return result
