"""
読み替え解析のエラー定義

解析の失敗は2層で扱う。

- YomikaeError 系の例外: コアの解析関数が送出する。1条項の解析だけを中断する
- ProvisionError: 例外（または規定なし）を法令番号・条項位置と対にした値。
  ハッシュ可能なので、コーパス全体で同じエラーの重複を除去できる
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .models import ProvisionCoordinate


class ErrorKind(str, Enum):
    """エラー種別"""
    TABLE_COLUMN_COUNT = "TableColumnCountError"
    UNRESOLVABLE_BRACKET_STRUCTURE = "UnresolvableBracketStructure"
    UNEXPECTED_PARALLEL_ANTECEDENT = "UnexpectedParallelAntecedent"
    # 解析は完走したが規定を取り出せなかった（要目視確認）
    NO_RULE_FOUND = "NoRuleFound"


class YomikaeError(Exception):
    """解析エラーの基底クラス"""
    kind: ErrorKind


class TableColumnCountError(YomikaeError):
    """表の行が2列でも3列でもない"""
    kind = ErrorKind.TABLE_COLUMN_COUNT

    def __init__(self, row_index: int, column_count: int):
        self.row_index = row_index
        self.column_count = column_count
        super().__init__(
            f"table row {row_index} has {column_count} columns (expected 2 or 3)"
        )


class UnresolvableBracketStructure(YomikaeError):
    """鉤括弧の分割位置が定まらない"""
    kind = ErrorKind.UNRESOLVABLE_BRACKET_STRUCTURE

    def __init__(self, shape: str):
        self.shape = shape
        super().__init__(f"cannot partition quote markers: {shape}")


class UnexpectedParallelAntecedent(YomikaeError):
    """「とある」で閉じた後に「とあり」が続いた"""
    kind = ErrorKind.UNEXPECTED_PARALLEL_ANTECEDENT

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"unexpected parallel antecedent after closed group: {word!r}")


@dataclass(frozen=True)
class ProvisionError:
    """
    条項単位のエラー値

    contents は解析対象の本文（表の場合は行のタプル）。
    detail は人が読むための補足で、同一性の判定には使わない。
    """
    kind: ErrorKind
    law_num: str
    coordinate: ProvisionCoordinate
    contents: Any
    detail: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_exception(
        cls,
        error: YomikaeError,
        law_num: str,
        coordinate: ProvisionCoordinate,
        contents: Any,
    ) -> "ProvisionError":
        return cls(error.kind, law_num, coordinate, contents, detail=str(error))

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.contents, tuple):
            contents = [list(row) for row in self.contents]
        else:
            contents = self.contents
        data: Dict[str, Any] = {
            "error": self.kind.value,
            "num": self.law_num,
            "article": self.coordinate.to_dict(),
            "contents": contents,
        }
        if self.detail:
            data["detail"] = self.detail
        return data
