"""
読み替え規定の抽出（Substitution Extractor）

読み替え規定文は概ね
    ((「〜」とあり)*「〜」とあるのは「〜」(と、|と))+読み替えるものとする。
という形をしている（読点の有無などの揺れはある）。

鉤括弧で分割した列を先頭から読み、括弧の直後に来る接続語で状態を進める。

| 接続語         | 動作                                                   |
|----------------|--------------------------------------------------------|
| と読み替える   | 規定を確定して初期化（この連鎖の終わり）               |
| とあり         | 読み替え前の語に追加（並列が続く）                     |
| とある         | 読み替え前の語に追加して打ち止め                       |
| と、 / と「    | 規定を確定して初期化                                   |
| それ以外       | 確定せずに初期化（無関係な引用）                       |
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import UnexpectedParallelAntecedent
from .models import BracketedSpan, SegmentToken, SubstitutionRule

logger = logging.getLogger(__name__)


class Connector(str, Enum):
    """括弧の直後の接続語に対する動作"""
    END = "end"            # と読み替える
    PARALLEL = "parallel"  # とあり
    CLOSE = "close"        # とある
    NEXT = "next"          # と、


# =============================================================================
# 接続語テーブル
# =============================================================================

CONNECTORS: Tuple[Tuple[str, Connector], ...] = (
    ('と読み替える', Connector.END),
    ('とあり', Connector.PARALLEL),
    ('とある', Connector.CLOSE),
    ('と、', Connector.NEXT),
)

# 長い接続語から順に照合する
CONNECTORS_SORTED: Tuple[Tuple[str, Connector], ...] = tuple(
    sorted(CONNECTORS, key=lambda entry: len(entry[0]), reverse=True)
)

# 「〜」と「〜」: 括弧の間が「と」だけのとき
BARE_TO = 'と'


def match_connector(literal: str, followed_by_bracket: bool) -> Optional[Connector]:
    """
    括弧の直後の文字列から接続語を判定する

    Examples:
        >>> match_connector('とあるのは、', True)
        <Connector.CLOSE: 'close'>
        >>> match_connector('と', True)
        <Connector.NEXT: 'next'>
        >>> match_connector('中', True) is None
        True
    """
    for keyword, connector in CONNECTORS_SORTED:
        if literal.startswith(keyword):
            return connector
    if literal == BARE_TO and followed_by_bracket:
        return Connector.NEXT
    return None


# =============================================================================
# 状態
# =============================================================================

@dataclass
class ExtractorState:
    """1条項の解析中だけ使う状態"""
    pending_before: List[str] = field(default_factory=list)
    scratch: str = ""
    antecedent_closed: bool = False

    def push_antecedent(self, closed: bool):
        # 空の引用「」は語にしない
        if self.scratch:
            self.pending_before.append(self.scratch)
        self.scratch = ""
        self.antecedent_closed = closed

    def take_rule(self) -> Optional[SubstitutionRule]:
        """規定を確定して初期化する。語がそろっていなければ None"""
        rule = None
        if self.pending_before and self.scratch:
            rule = SubstitutionRule(tuple(self.pending_before), self.scratch)
        self.reset()
        return rule

    def reset(self):
        self.pending_before = []
        self.scratch = ""
        self.antecedent_closed = False


# =============================================================================
# 抽出
# =============================================================================

def extract_rules(tokens: Sequence[SegmentToken]) -> List[SubstitutionRule]:
    """
    括弧で分割した列から読み替え規定を取り出す

    Args:
        tokens: segment() の返り値（括弧外・括弧内が交互に並ぶ列）

    Returns:
        文中の出現順に並んだ読み替え規定

    Raises:
        UnexpectedParallelAntecedent: 「とある」で閉じた後に「とあり」が続いた
    """
    rules: List[SubstitutionRule] = []
    state = ExtractorState()

    for index, token in enumerate(tokens):
        if isinstance(token, BracketedSpan):
            state.scratch = token.content
            continue

        # 文頭の文字列は括弧の直後ではない
        if index == 0:
            continue

        followed_by_bracket = index < len(tokens) - 1
        connector = match_connector(token.text, followed_by_bracket)

        if connector is Connector.PARALLEL:
            if state.antecedent_closed:
                raise UnexpectedParallelAntecedent(state.scratch)
            state.push_antecedent(closed=False)
        elif connector is Connector.CLOSE:
            state.push_antecedent(closed=True)
        elif connector in (Connector.NEXT, Connector.END):
            rule = state.take_rule()
            if rule is not None:
                rules.append(rule)
        else:
            if state.pending_before:
                logger.debug(f"discarded antecedents: {state.pending_before}")
            state.reset()

    return rules
