"""
読み替え規定文の解析

法令の読み替え規定（「〜」とあるのは「〜」と読み替える）から、
読み替え前の文言と読み替え後の文言を取り出す。
"""

from .core.errors import (
    ErrorKind,
    ProvisionError,
    TableColumnCountError,
    UnexpectedParallelAntecedent,
    UnresolvableBracketStructure,
    YomikaeError,
)
from .core.extractor import extract_rules
from .core.models import (
    BracketedSpan,
    LiteralSpan,
    Provision,
    ProvisionCoordinate,
    SubstitutionRule,
    SubstitutionSet,
)
from .core.parser import analyze_provision, parse_sentence, parse_yomikae
from .core.segmenter import segment
from .core.table import extract_table_rules

__version__ = "0.1.0"

__all__ = [
    # errors
    'ErrorKind',
    'ProvisionError',
    'TableColumnCountError',
    'UnexpectedParallelAntecedent',
    'UnresolvableBracketStructure',
    'YomikaeError',
    # models
    'BracketedSpan',
    'LiteralSpan',
    'Provision',
    'ProvisionCoordinate',
    'SubstitutionRule',
    'SubstitutionSet',
    # core
    'segment',
    'extract_rules',
    'extract_table_rules',
    'parse_sentence',
    'parse_yomikae',
    'analyze_provision',
]
