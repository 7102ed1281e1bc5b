"""
条項単位の読み替え解析

本文型（鉤括弧の分割 → 接続語の状態遷移）と表型を振り分け、
結果を法令番号・条項位置と対にして返す。
"""
import logging
from typing import List, Union

from .errors import ErrorKind, ProvisionError, YomikaeError
from .extractor import extract_rules
from .models import Provision, SubstitutionRule, SubstitutionSet
from .segmenter import segment
from .table import extract_table_rules
from ..utils.patterns import is_table_yomikae_text, is_yomikae_text

logger = logging.getLogger(__name__)


def uses_table(provision: Provision) -> bool:
    """表型の読み替え規定か（表が付いていて、本文が表を参照している）"""
    return bool(provision.table) and is_table_yomikae_text(provision.text)


def is_yomikae_provision(provision: Provision) -> bool:
    """読み替え規定の解析対象になる条項か"""
    return uses_table(provision) or is_yomikae_text(provision.text)


def parse_sentence(text: str) -> List[SubstitutionRule]:
    """本文型の読み替え規定文を解析する"""
    logger.debug(f"[INPUT] {text}")
    return extract_rules(segment(text))


def parse_yomikae(provision: Provision) -> List[SubstitutionRule]:
    """
    条項から読み替え規定を取り出す

    表が付いていて本文が表を参照する場合は表型、それ以外は本文型として解析する。

    Raises:
        YomikaeError: 解析エラー（この条項だけが失敗する）
    """
    if uses_table(provision):
        return extract_table_rules(provision.table)
    return parse_sentence(provision.text)


def analyze_provision(
    provision: Provision,
    law_num: str
) -> Union[SubstitutionSet, ProvisionError]:
    """
    条項を解析し、結果またはエラー値を返す（例外は送出しない）

    規定が1件も取れなかった場合は NoRuleFound のエラー値を返す。
    これは解析の失敗ではなく、目視確認が必要であることを示す。
    """
    contents = provision.table if uses_table(provision) else provision.text
    try:
        rules = parse_yomikae(provision)
    except YomikaeError as e:
        logger.warning(f"{law_num} {provision.coordinate}: {e}")
        return ProvisionError.from_exception(e, law_num, provision.coordinate, contents)

    if not rules:
        logger.info(f"No yomikae rule found: {law_num} {provision.coordinate}")
        return ProvisionError(ErrorKind.NO_RULE_FOUND, law_num, provision.coordinate, contents)

    return SubstitutionSet(law_num, provision.coordinate, rules)
