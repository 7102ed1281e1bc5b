"""
読み替え解析のデータモデル

- 括弧解析の中間表現（BracketMarker / LiteralSpan / BracketedSpan）
- 解析結果（SubstitutionRule / SubstitutionSet）
- 入力単位（ProvisionCoordinate / Provision）
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..utils.patterns import OPEN_QUOTE, CLOSE_QUOTE


# =============================================================================
# 括弧解析
# =============================================================================

class MarkerKind(str, Enum):
    """鉤括弧の種類（値は記号そのもの）"""
    OPEN = OPEN_QUOTE
    CLOSE = CLOSE_QUOTE


@dataclass(frozen=True)
class BracketMarker:
    """文中の鉤括弧1つ分の位置と種類"""
    position: int
    kind: MarkerKind


@dataclass(frozen=True)
class LiteralSpan:
    """鉤括弧の外の文字列（空文字列もありうる）"""
    text: str

    @property
    def raw(self) -> str:
        return self.text


@dataclass(frozen=True)
class BracketedSpan:
    """
    鉤括弧で括られた文字列

    raw は前後の鉤括弧を含む元の文字列、content はそれを除いた中身。
    """
    raw: str

    @property
    def content(self) -> str:
        return self.raw[1:-1]


SegmentToken = Union[LiteralSpan, BracketedSpan]


# =============================================================================
# 解析結果
# =============================================================================

@dataclass(frozen=True)
class SubstitutionRule:
    """読み替え規定1件: before_words の各語を after_word と読み替える"""
    before_words: Tuple[str, ...]
    after_word: str

    def __post_init__(self):
        # list で渡されても不変に保つ
        object.__setattr__(self, "before_words", tuple(self.before_words))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "before_words": list(self.before_words),
            "after_word": self.after_word,
        }


@dataclass(frozen=True)
class ProvisionCoordinate:
    """
    法令内の条項の位置

    各値は法令XMLの Num 属性をそのまま使う（例: 条 "3_2"、項 "1"）。
    附則の場合は suppl_provision_title に改正法令番号（制定時附則は "附則"）が入る。
    """
    article: str = ""
    paragraph: Optional[str] = None
    item: Optional[str] = None
    sub_item: Optional[str] = None
    suppl_provision_title: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "article": self.article,
            "paragraph": self.paragraph,
            "item": self.item,
            "sub_item": self.sub_item,
            "suppl_provision_title": self.suppl_provision_title,
        }


@dataclass(frozen=True)
class Provision:
    """解析の入力単位（条項の本文と、付属する表）"""
    coordinate: ProvisionCoordinate
    text: str = ""
    table: Tuple[Tuple[str, ...], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "table", tuple(tuple(row) for row in self.table))


@dataclass
class SubstitutionSet:
    """1条項から取り出した読み替え規定の一覧"""
    law_num: str
    coordinate: ProvisionCoordinate
    rules: List[SubstitutionRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num": self.law_num,
            "article": self.coordinate.to_dict(),
            "data": [rule.to_dict() for rule in self.rules],
        }
