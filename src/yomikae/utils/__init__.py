"""
yomikae ユーティリティモジュール
"""

from .patterns import (
    OPEN_QUOTE,
    CLOSE_QUOTE,
    OPEN_PARENS,
    CLOSE_PARENS,
    YOMIKAE_TRIGGER,
    TABLE_YOMIKAE_PATTERN,
    is_yomikae_text,
    is_table_yomikae_text,
)

__all__ = [
    # patterns
    'OPEN_QUOTE',
    'CLOSE_QUOTE',
    'OPEN_PARENS',
    'CLOSE_PARENS',
    'YOMIKAE_TRIGGER',
    'TABLE_YOMIKAE_PATTERN',
    'is_yomikae_text',
    'is_table_yomikae_text',
]
