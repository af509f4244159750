from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from utils.dice import Dice


@dataclass
class RepeatResult:
    """重複擲骰結果"""
    runs: List["Dice"]
    lines: List[str]
    terse: bool = False  # 超出回覆長度時改用簡略格式

    @property
    def detail(self) -> str:
        return "\n".join(self.lines)


@dataclass
class CheckResult:
    """檢定結果"""
    detail: str
    result: int  # 已限制在 1-100
    value: int
    level: str


@dataclass
class CheckOrder:
    """檢定指令參數"""
    hidden: bool = False
    bp: str = ""  # 例如 "B2"，空字符串表示普通 D100
    name: str = ""
    value: Optional[int] = None
    modifiers: str = ""
    repeat: int = 1


@dataclass
class AttributeSet:
    """一組生成的角色屬性"""
    values: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.values.values())


@dataclass
class SanityOrder:
    """理智檢定指令參數，例如 "1/1d6"，可在最後給出理智值"""
    success: str
    failure: str
    value: Optional[int] = None


@dataclass
class SanityCheckResult:
    """理智檢定結果"""
    check: CheckResult
    check_success: bool
    loss_detail: str
    loss: int
    before_sanity: int
    after_sanity: int


@dataclass
class AttributeChangeResult:
    """屬性增減結果"""
    name: str
    detail: str
    change: int  # 帶符號的變化量
    before: int
    after: int
    reason: str = ""
