#!/usr/bin/env python3
"""
yomikae: e-Gov 法令APIクライアントのテスト

テスト対象:
- json_to_xml() の変換とエスケープ
- fetch_law_xml() の v2 → v1 フォールバックとキャッシュ
"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import pytest
import requests
from yomikae.client.egov import EGovClient, json_to_xml
from yomikae.core.law_xml import read_law_xml

V2_TREE = {
    "tag": "Law",
    "attr": {"Era": "Showa", "Num": "1"},
    "children": [
        {"tag": "LawNum", "attr": {}, "children": ["昭和二十二年法律第一号"]},
        {
            "tag": "LawBody",
            "attr": {},
            "children": [
                {"tag": "LawTitle", "attr": {}, "children": ["A & B 法"]},
                {
                    "tag": "MainProvision",
                    "attr": {},
                    "children": [
                        {
                            "tag": "Article",
                            "attr": {"Num": "1"},
                            "children": [
                                {
                                    "tag": "Paragraph",
                                    "attr": {"Num": "1"},
                                    "children": [
                                        {
                                            "tag": "ParagraphSentence",
                                            "attr": {},
                                            "children": [
                                                {
                                                    "tag": "Sentence",
                                                    "attr": {},
                                                    "children": ["「甲」とあるのは「乙」と読み替える。"],
                                                }
                                            ],
                                        }
                                    ],
                                }
                            ],
                        }
                    ],
                },
            ],
        },
    ],
}

V1_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<DataRoot><ApplData><LawFullText><Law><LawNum>昭和二十二年法律第一号</LawNum>"
    "<LawBody><LawTitle>v1</LawTitle></LawBody></Law></LawFullText></ApplData></DataRoot>"
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload


@pytest.fixture
def client(tmp_path):
    return EGovClient(cache_dir=tmp_path, rate_limit_sec=0)


def install(client, responses):
    """URL の一部 → FakeResponse の対応で session.request を差し替える"""
    calls = []

    def fake_request(method, url, params=None, timeout=None):
        calls.append(url)
        for fragment, response in responses.items():
            if fragment in url:
                return response
        raise requests.ConnectionError(url)

    client.session.request = fake_request
    return calls


class TestJsonToXml:

    def test_round_trip_through_reader(self):
        document = read_law_xml(json_to_xml(V2_TREE))
        assert document.law_num == "昭和二十二年法律第一号"
        assert document.law_title == "A & B 法"
        assert document.provisions[0].text == "「甲」とあるのは「乙」と読み替える。"

    def test_escapes_text_and_attributes(self):
        xml = json_to_xml({"tag": "X", "attr": {"a": 'say "hi"'}, "children": ["1 < 2 & 3"]})
        assert xml == '<X a="say &quot;hi&quot;">1 &lt; 2 &amp; 3</X>'

    def test_empty_element(self):
        assert json_to_xml({"tag": "ParagraphNum", "attr": {}, "children": []}) == "<ParagraphNum/>"


class TestFetchLawXml:

    def test_v2_success(self, client):
        calls = install(client, {"/api/2/": FakeResponse(payload={"law_full_text": V2_TREE})})
        xml = client.fetch_law_xml("322AC0000000001")
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<LawNum>昭和二十二年法律第一号</LawNum>" in xml
        assert len(calls) == 1

    def test_fallback_to_v1(self, client):
        calls = install(client, {
            "/api/2/": FakeResponse(status_code=500),
            "/api/1/": FakeResponse(text=V1_XML),
        })
        xml = client.fetch_law_xml("322AC0000000001")
        assert xml == V1_XML
        assert [("/api/2/" in c, "/api/1/" in c) for c in calls] == [(True, False), (False, True)]
        assert read_law_xml(xml).law_title == "v1"

    def test_fallback_when_v2_has_no_body(self, client):
        install(client, {
            "/api/2/": FakeResponse(payload={"law_info": {}}),
            "/api/1/": FakeResponse(text=V1_XML),
        })
        assert client.fetch_law_xml("322AC0000000001") == V1_XML

    def test_both_fail(self, client):
        install(client, {})
        with pytest.raises(RuntimeError):
            client.fetch_law_xml("322AC0000000001")

    def test_cached(self, client):
        calls = install(client, {"/api/2/": FakeResponse(payload={"law_full_text": V2_TREE})})
        first = client.fetch_law_xml("322AC0000000001")
        second = client.fetch_law_xml("322AC0000000001")
        assert first == second
        assert len(calls) == 1

    def test_failure_not_cached(self, client):
        install(client, {})
        with pytest.raises(RuntimeError):
            client.fetch_law_xml("322AC0000000001")
        calls = install(client, {"/api/1/": FakeResponse(text=V1_XML)})
        assert client.fetch_law_xml("322AC0000000001") == V1_XML
        assert len(calls) == 2
