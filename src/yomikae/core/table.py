"""
表形式の読み替え規定（Tabular Extractor）

「同表の上欄に掲げる規定中同表の中欄に掲げる字句は、それぞれ同表の下欄に掲げる字句と
読み替えるものとする。」のように、読み替えの中身を表で与える規定を扱う。

- 2列: [読み替え前, 読み替え後]
- 3列: [対象規定, 読み替え前, 読み替え後]（1列目は使わない）
"""
from typing import List, Sequence

from .errors import TableColumnCountError
from .models import SubstitutionRule


def extract_table_rules(rows: Sequence[Sequence[str]]) -> List[SubstitutionRule]:
    """
    表の各行を読み替え規定にする

    Raises:
        TableColumnCountError: 2列でも3列でもない行がある（表全体を失敗とする）
    """
    rules = []
    for row_index, row in enumerate(rows):
        cells = [cell.strip() for cell in row]
        if len(cells) == 2:
            before, after = cells
        elif len(cells) == 3:
            _, before, after = cells
        else:
            raise TableColumnCountError(row_index, len(cells))
        rules.append(SubstitutionRule((before,), after))
    return rules
