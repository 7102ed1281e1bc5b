"""
法令コーパス全体の読み替え解析

法令XMLを1件ずつ読み込み、読み替え規定を含む条項を解析して
結果とエラーを集約する。同じエラーは一度だけ記録する。
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union
import json
import logging

import yaml
from tqdm import tqdm

from .errors import ProvisionError
from .law_xml import LawDocument, iter_yomikae_provisions, read_law_xml
from .models import Provision, SubstitutionSet
from .output import OutputFormat, ResultWriter
from .parser import analyze_provision

logger = logging.getLogger(__name__)


@dataclass
class LawSource:
    """解析対象の法令1件（XMLの読み込みは遅延させる）"""
    name: str
    loader: Callable[[], Union[str, bytes]]

    def load(self):
        return self.loader()


@dataclass
class AnalysisReport:
    """解析の集計"""
    laws_total: int = 0
    laws_failed: List[Dict[str, str]] = field(default_factory=list)
    provisions_analyzed: int = 0
    rules_found: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "laws_total": self.laws_total,
            "laws_failed": self.laws_failed,
            "provisions_analyzed": self.provisions_analyzed,
            "rules_found": self.rules_found,
        }


# =============================================================================
# 入力の列挙
# =============================================================================

def load_index(index_path: Path) -> List[Dict[str, Any]]:
    """
    法令インデックス（listup_law の出力形式の JSON）を読み込む

    各要素は少なくとも "num"（法令番号）と "file"（XMLファイル名）を持つ。
    """
    with open(index_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Index file must be a JSON list: {index_path}")
    return [entry for entry in data if isinstance(entry, dict) and entry.get("file")]


def load_targets(path: Path) -> List[str]:
    """対象法令IDの一覧（YAML のリスト、または targets キーを持つ辞書）"""
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, list):
        return [str(x) for x in data]
    if isinstance(data, dict) and "targets" in data:
        return [str(x) for x in data["targets"]]
    return []


def iter_index_sources(work_dir: Path, index_path: Path) -> Iterator[LawSource]:
    """作業ディレクトリ内の法令XMLを列挙する"""
    for entry in load_index(index_path):
        path = work_dir / entry["file"]
        yield LawSource(entry.get("num") or entry["file"], path.read_bytes)


def iter_egov_sources(client, law_ids: Iterable[str]) -> Iterator[LawSource]:
    """e-Gov API から取得する法令を列挙する"""
    for law_id in law_ids:
        yield LawSource(law_id, lambda law_id=law_id: client.fetch_law_xml(law_id))


# =============================================================================
# YomikaeAnalyzer
# =============================================================================

class YomikaeAnalyzer:
    def __init__(self):
        self.results: List[SubstitutionSet] = []
        self.errors: List[ProvisionError] = []
        self._seen_errors = set()
        self.report = AnalysisReport()

    def record_error(self, error: ProvisionError) -> bool:
        """エラーを記録する。既に同じエラーがあれば記録せず False"""
        if error in self._seen_errors:
            return False
        self._seen_errors.add(error)
        self.errors.append(error)
        return True

    def analyze_law(
        self,
        law_num: str,
        provisions: Iterable[Provision]
    ) -> Tuple[List[SubstitutionSet], List[ProvisionError]]:
        """1法令分の条項を解析する"""
        sets: List[SubstitutionSet] = []
        errors: List[ProvisionError] = []
        for provision in provisions:
            outcome = analyze_provision(provision, law_num)
            self.report.provisions_analyzed += 1
            if isinstance(outcome, ProvisionError):
                errors.append(outcome)
                self.record_error(outcome)
            else:
                sets.append(outcome)
                self.results.append(outcome)
                self.report.rules_found += len(outcome.rules)
        return sets, errors

    def analyze_document(self, document: LawDocument):
        return self.analyze_law(document.law_num, iter_yomikae_provisions(document))

    def run(self, sources: Iterable[LawSource], total: Optional[int] = None) -> AnalysisReport:
        """
        法令を順に解析する

        読み込みや取得に失敗した法令はログとレポートに記録して次に進む。
        """
        for source in tqdm(sources, total=total, desc="Analyzing Laws"):
            self.report.laws_total += 1
            logger.info(f"[START] {source.name}")
            try:
                document = read_law_xml(source.load())
            except (OSError, RuntimeError, ValueError) as e:
                logger.error(f"Failed to load {source.name}: {e}")
                self.report.laws_failed.append({"name": source.name, "error": str(e)})
                continue
            self.analyze_document(document)
            logger.info(f"[END] {source.name}")
        return self.report

    def write(
        self,
        output_path: Path,
        error_output_path: Path,
        output_format: OutputFormat = OutputFormat.JSON
    ):
        writer = ResultWriter(output_format)
        writer.write(self.results, output_path)
        writer.write(self.errors, error_output_path)
        logger.info(
            f"Wrote {len(self.results)} results to {output_path}, "
            f"{len(self.errors)} errors to {error_output_path}"
        )
