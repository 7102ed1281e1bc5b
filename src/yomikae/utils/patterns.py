"""
共通の文字・正規表現パターン定義

読み替え規定の検出と括弧解析で使う記号・パターンを一元管理する。
ビジネスロジックは持たない。
"""

import re

# ==============================================================================
# 括弧
# ==============================================================================

# 鉤括弧（引用の境界）
OPEN_QUOTE = '「'
CLOSE_QUOTE = '」'

# 丸括弧（括弧書きの注釈）。半角も実データに混入するため両方扱う
OPEN_PARENS = frozenset('（(')
CLOSE_PARENS = frozenset('）)')


# ==============================================================================
# 読み替え規定の検出
# ==============================================================================

# 本文型: 「〜」とあるのは「〜」と読み替える
YOMIKAE_TRIGGER = 'と読み替える'

# 表型: 同表の上欄に掲げる規定中同表の中欄に掲げる字句は、それぞれ同表の下欄に掲げる字句と読み替える
# 「下欄」「右欄」「第三欄」などの表記揺れを吸収する
TABLE_YOMIKAE_PATTERN = re.compile(r'欄に掲げる字句(?:と|に)読み替える')


def is_yomikae_text(text: str) -> bool:
    """本文型の読み替え規定を含むか"""
    return YOMIKAE_TRIGGER in text


def is_table_yomikae_text(text: str) -> bool:
    """
    表を参照する読み替え規定を含むか

    Examples:
        >>> is_table_yomikae_text('同表の下欄に掲げる字句と読み替えるものとする。')
        True
        >>> is_table_yomikae_text('「甲」とあるのは「乙」と読み替えるものとする。')
        False
    """
    return TABLE_YOMIKAE_PATTERN.search(text) is not None
