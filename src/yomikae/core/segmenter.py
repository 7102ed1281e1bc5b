"""
鉤括弧の分割（Bracket Segmenter）

読み替え規定文や改め文は、引用の中に引用がある・閉じ括弧が余る等で
「 と 」の数が文全体で釣り合わないことが多い。
ここでは文を「括弧外の文字列」と「括弧で括られた文字列」が交互に並ぶ列に分割する。

手順:
1. 鉤括弧の位置を走査する。丸括弧（括弧書き）の中の鉤括弧は除外する
2. 鉤括弧列を、先頭が「・末尾が」のグループに区切る
   （区切れるのは 」→「 の境目だけ。グループ内部の対応は問わない）
3. 区切り方の探索はバックトラックで行う。同じ形のグループが連続するものを優先する
   例: 「た」ち「つ」て」と「な」に「ぬ」ね」 は 「」「」」 ×2 と読む
"""
import logging
from dataclasses import dataclass
from typing import List, Set

from .errors import UnresolvableBracketStructure
from .models import BracketMarker, BracketedSpan, LiteralSpan, MarkerKind, SegmentToken
from ..utils.patterns import OPEN_QUOTE, CLOSE_QUOTE, OPEN_PARENS, CLOSE_PARENS

logger = logging.getLogger(__name__)


# =============================================================================
# 鉤括弧の走査
# =============================================================================

def scan_markers(text: str) -> List[BracketMarker]:
    """
    鉤括弧の位置と種類を列挙する

    丸括弧の深さが1以上の位置にある鉤括弧は、括弧書きの中の引用
    （例: 「（以下「整備法」という。）」）なので区切りの候補から除く。

    Examples:
        >>> [m.position for m in scan_markers('あ「い」う（「え」）')]
        [1, 3]
    """
    markers: List[BracketMarker] = []
    depth = 0
    for pos, char in enumerate(text):
        if char in OPEN_PARENS:
            depth += 1
        elif char in CLOSE_PARENS:
            # 対応のない閉じ丸括弧は無視する
            depth = max(depth - 1, 0)
        elif depth == 0:
            if char == OPEN_QUOTE:
                markers.append(BracketMarker(pos, MarkerKind.OPEN))
            elif char == CLOSE_QUOTE:
                markers.append(BracketMarker(pos, MarkerKind.CLOSE))
    return markers


def marker_shape(markers: List[BracketMarker]) -> str:
    """鉤括弧列を記号だけの文字列にする（例: 「」「」」）"""
    return "".join(m.kind.value for m in markers)


# =============================================================================
# 分割位置の探索
# =============================================================================

@dataclass(frozen=True)
class SplitPattern:
    """length 個の鉤括弧からなる同じ形のグループを times 回続けて使う"""
    length: int
    times: int

    @property
    def span(self) -> int:
        return self.length * self.times


@dataclass
class ChoicePoint:
    """探索の選択点: head の位置で試す候補と、いま採用している候補"""
    head: int
    candidates: List[SplitPattern]
    index: int = 0

    @property
    def current(self) -> SplitPattern:
        return self.candidates[self.index]


def split_candidates(shape: str, head: int) -> List[SplitPattern]:
    """
    head から始まるグループ分けの候補を優先順に返す

    優先順:
    1. 同じ形のグループが2回以上続くもの（短いグループ・多い回数から）
    2. 単独のグループ（短いものから）

    グループは「で始まり」で終わる必要がある。
    候補が空なら head からは分割できない（行き止まり）。
    """
    total = len(shape)
    if head >= total or shape[head] != OPEN_QUOTE:
        return []

    repeated: List[SplitPattern] = []
    single: List[SplitPattern] = []
    for length in range(2, total - head + 1):
        block = shape[head:head + length]
        if block[-1] != CLOSE_QUOTE:
            continue
        times = 1
        while shape[head + length * times:head + length * (times + 1)] == block:
            times += 1
        repeated.extend(SplitPattern(length, t) for t in range(times, 1, -1))
        single.append(SplitPattern(length, 1))
    return repeated + single


def find_partition(shape: str) -> List[SplitPattern]:
    """
    鉤括弧列全体のグループ分けを求める

    選択点のスタックによるバックトラック。行き止まりに来たら直近の選択点で
    次の候補に切り替え、候補が尽きた選択点は捨てて一つ前に戻る。
    スタックが空になったら分割不能。

    ある位置から先を区切れるかどうかはその位置だけで決まるので、
    区切れないと分かった位置（dead_heads）へ進む候補は試さない。
    これで失敗する入力でも探索は括弧の数の多項式で終わる。

    Raises:
        UnresolvableBracketStructure: どの区切り方も成立しない
    """
    # グループは」で終わるので、末尾が「なら区切りようがない
    if shape and shape[-1] == OPEN_QUOTE:
        raise UnresolvableBracketStructure(shape)

    stack: List[ChoicePoint] = []
    dead_heads: Set[int] = set()
    head = 0
    while head < len(shape):
        candidates = [
            c for c in split_candidates(shape, head)
            if head + c.span not in dead_heads
        ]
        if candidates:
            point = ChoicePoint(head, candidates)
            stack.append(point)
            head += point.current.span
            continue

        # 行き止まり: 未試行の候補がある選択点まで巻き戻す
        dead_heads.add(head)
        while stack:
            point = stack[-1]
            point.index += 1
            while (point.index < len(point.candidates)
                   and point.head + point.current.span in dead_heads):
                point.index += 1
            if point.index < len(point.candidates):
                head = point.head + point.current.span
                break
            dead_heads.add(point.head)
            stack.pop()
        else:
            raise UnresolvableBracketStructure(shape)

    return [point.current for point in stack]


# =============================================================================
# 分割の実行
# =============================================================================

def segment(text: str) -> List[SegmentToken]:
    """
    文を括弧外の文字列と鉤括弧で括られた文字列の交互の列に分割する

    返り値は LiteralSpan で始まり LiteralSpan で終わる奇数長の列。
    各要素の raw をつなげると元の文字列に戻る。

    Examples:
        >>> [t.raw for t in segment('あ「い」」う「え」」お')]
        ['あ', '「い」」', 'う', '「え」」', 'お']

    Raises:
        UnresolvableBracketStructure: 鉤括弧の区切り方が定まらない
    """
    markers = scan_markers(text)
    partition = find_partition(marker_shape(markers))
    logger.debug(f"partition: {[(p.length, p.times) for p in partition]}")

    tokens: List[SegmentToken] = []
    cursor = 0
    marker_index = 0
    for pattern in partition:
        for _ in range(pattern.times):
            start = markers[marker_index].position
            end = markers[marker_index + pattern.length - 1].position
            tokens.append(LiteralSpan(text[cursor:start]))
            tokens.append(BracketedSpan(text[start:end + 1]))
            cursor = end + 1
            marker_index += pattern.length
    tokens.append(LiteralSpan(text[cursor:]))
    return tokens

