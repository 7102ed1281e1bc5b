"""
解析結果・エラーの出力

json: 全件を1つの JSON 配列として出力（既定）
jsonl: 1行1件の JSON Lines として出力
"""
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union
import json

from .errors import ProvisionError
from .models import SubstitutionSet


class OutputFormat(str, Enum):
    """出力形式"""
    JSON = "json"
    JSONL = "jsonl"


Record = Union[SubstitutionSet, ProvisionError]


class ResultWriter:
    """
    解析結果・エラーを形式に応じて書き出す
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.JSON):
        self.output_format = output_format

    def dumps(self, records: Iterable[Record]) -> str:
        """レコード列を出力形式の文字列にする"""
        items: List[Dict[str, Any]] = [r.to_dict() for r in records]
        if self.output_format == OutputFormat.JSONL:
            return "".join(json.dumps(item, ensure_ascii=False) + "\n" for item in items)
        return json.dumps(items, ensure_ascii=False, indent=2) + "\n"

    def write(self, records: Iterable[Record], file_path: Path) -> None:
        """レコード列をファイルに出力"""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.dumps(records))
