#!/usr/bin/env python3
"""
yomikae: 条項単位の解析のテスト

テスト対象:
- 本文型と表型の振り分け
- analyze_provision() のエラー値（NoRuleFound を含む）
- ProvisionError の同一性（重複除去用）
"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import pytest
from yomikae.core.errors import ErrorKind, ProvisionError
from yomikae.core.models import (
    Provision,
    ProvisionCoordinate,
    SubstitutionRule,
    SubstitutionSet,
)
from yomikae.core.parser import (
    analyze_provision,
    is_yomikae_provision,
    parse_sentence,
    parse_yomikae,
    uses_table,
)

COORD = ProvisionCoordinate(article="3", paragraph="2")

TABLE_TEXT = (
    "前項の規定を適用する場合においては、次の表の上欄に掲げる規定中同表の中欄に掲げる字句は、"
    "それぞれ同表の下欄に掲げる字句と読み替えるものとする。"
)


class TestParseSentence:
    """実際の条文に近い長文"""

    def test_long_chain_with_parenthetical_quotes(self):
        text = (
            "この場合において、徴収法施行規則第二十七条及び第二十八条中「保険関係が成立した」とあるのは"
            "「関係法律の整備等に関する法律（昭和四十四年法律第八十五号。以下「整備法」という。）"
            "第十八条第一項の規定による保険給付が行なわれることとなつた」と、"
            "「保険関係成立の日」とあるのは「当該保険給付が行なわれることとなつた日」と、"
            "徴収法施行規則第二十八条第一項中「全期間」とあるのは"
            "「整備法第十八条第一項の規定による保険給付が行なわれることとなつた日以後の期間"
            "（事業の終了する日前に労働省令の整備等に関する省令（昭和四十七年労働省令第九号。"
            "以下「整備省令」という。）第八条の期間が経過するときは、その経過する日の前日までの期間）」と、"
            "徴収法施行規則第三十二条中「第二十七条から前条まで」とあるのは「第二十七条から第三十条まで」と"
            "読み替えるものとする。"
        )
        rules = parse_sentence(text)
        assert [r.before_words for r in rules] == [
            ("保険関係が成立した",),
            ("保険関係成立の日",),
            ("全期間",),
            ("第二十七条から前条まで",),
        ]
        assert rules[0].after_word.startswith("関係法律の整備等に関する法律（")
        assert "以下「整備法」という。" in rules[0].after_word
        assert rules[2].after_word.endswith("その経過する日の前日までの期間）")
        assert rules[3].after_word == "第二十七条から第三十条まで"


class TestDispatch:
    """本文型・表型の振り分け"""

    def test_text_provision(self):
        provision = Provision(COORD, text="「甲」とあるのは「乙」と読み替える。")
        assert not uses_table(provision)
        assert is_yomikae_provision(provision)
        assert parse_yomikae(provision) == [SubstitutionRule(("甲",), "乙")]

    def test_table_provision(self):
        provision = Provision(COORD, text=TABLE_TEXT, table=[["第一条", "甲", "乙"]])
        assert uses_table(provision)
        assert is_yomikae_provision(provision)
        assert parse_yomikae(provision) == [SubstitutionRule(("甲",), "乙")]

    def test_table_without_trigger_is_ignored(self):
        """表があっても本文が表を参照していなければ本文型"""
        provision = Provision(
            COORD,
            text="「甲」とあるのは「乙」と読み替える。",
            table=[["a", "b", "c", "d"]],
        )
        assert not uses_table(provision)
        assert parse_yomikae(provision) == [SubstitutionRule(("甲",), "乙")]

    def test_not_yomikae(self):
        provision = Provision(COORD, text="前条の規定は、この場合について準用する。")
        assert not is_yomikae_provision(provision)

    def test_table_trigger_without_table(self):
        provision = Provision(COORD, text=TABLE_TEXT)
        assert not uses_table(provision)
        # 本文の「と読み替える」で本文型の対象にはなる
        assert is_yomikae_provision(provision)


class TestAnalyzeProvision:
    """結果・エラー値"""

    def test_success(self):
        provision = Provision(COORD, text="「甲」とあるのは「乙」と読み替える。")
        outcome = analyze_provision(provision, "昭和二十二年法律第一号")
        assert isinstance(outcome, SubstitutionSet)
        assert outcome.law_num == "昭和二十二年法律第一号"
        assert outcome.coordinate == COORD
        assert outcome.rules == [SubstitutionRule(("甲",), "乙")]

    def test_no_rule_found(self):
        provision = Provision(COORD, text=TABLE_TEXT)
        outcome = analyze_provision(provision, "test")
        assert isinstance(outcome, ProvisionError)
        assert outcome.kind == ErrorKind.NO_RULE_FOUND
        assert outcome.contents == TABLE_TEXT

    def test_unresolvable_brackets(self):
        provision = Provision(COORD, text="「甲」とあるのは」乙「と読み替える。")
        outcome = analyze_provision(provision, "test")
        assert isinstance(outcome, ProvisionError)
        assert outcome.kind == ErrorKind.UNRESOLVABLE_BRACKET_STRUCTURE

    def test_parallel_antecedent_error(self):
        text = "「甲」とあり、「乙」とあるのは「丙」とあり、「丁」と読み替える。"
        outcome = analyze_provision(Provision(COORD, text=text), "test")
        assert isinstance(outcome, ProvisionError)
        assert outcome.kind == ErrorKind.UNEXPECTED_PARALLEL_ANTECEDENT
        assert outcome.coordinate == COORD

    def test_table_column_error_carries_rows(self):
        provision = Provision(COORD, text=TABLE_TEXT, table=[["a", "b", "c", "d"]])
        outcome = analyze_provision(provision, "test")
        assert isinstance(outcome, ProvisionError)
        assert outcome.kind == ErrorKind.TABLE_COLUMN_COUNT
        assert outcome.contents == (("a", "b", "c", "d"),)
        assert outcome.to_dict()["contents"] == [["a", "b", "c", "d"]]


class TestProvisionErrorIdentity:
    """エラー値の比較"""

    def test_equal_regardless_of_detail(self):
        a = ProvisionError(ErrorKind.NO_RULE_FOUND, "n", COORD, "text", detail="one")
        b = ProvisionError(ErrorKind.NO_RULE_FOUND, "n", COORD, "text", detail="two")
        assert a == b
        assert len({a, b}) == 1

    def test_different_coordinate(self):
        other = ProvisionCoordinate(article="4")
        a = ProvisionError(ErrorKind.NO_RULE_FOUND, "n", COORD, "text")
        b = ProvisionError(ErrorKind.NO_RULE_FOUND, "n", other, "text")
        assert a != b

    def test_to_dict(self):
        error = ProvisionError(ErrorKind.NO_RULE_FOUND, "n", COORD, "text")
        assert error.to_dict() == {
            "error": "NoRuleFound",
            "num": "n",
            "article": {
                "article": "3",
                "paragraph": "2",
                "item": None,
                "sub_item": None,
                "suppl_provision_title": None,
            },
            "contents": "text",
        }
