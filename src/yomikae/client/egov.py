from .base import BaseClient
from ..config import EGOV_API_BASE_URL, EGOV_API_V2_BASE_URL
from typing import Any, Optional
import logging
import requests

logger = logging.getLogger(__name__)


def escape_xml(text: str, quote: bool = False) -> str:
    escaped = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    if quote:
        escaped = escaped.replace('"', "&quot;")
    return escaped


def json_to_xml(node: Any) -> str:
    """
    API v2 の JSON ツリーを法令標準XMLの文字列に戻す

    v2 format:
    {
        "tag": "Law",
        "attr": {"Era": "Showa", ...},
        "children": [
            {"tag": "LawNum", "attr": {}, "children": ["昭和三十七年..."]},
            ...
        ]
    }

    深い法令でも再帰の深さが問題にならないよう、明示的なスタックで変換する。
    """
    parts = []
    # (node, closing) の組。closing が True なら閉じタグを出力する
    stack = [(node, False)]
    while stack:
        current, closing = stack.pop()
        if closing:
            parts.append(f"</{current.get('tag', '')}>")
            continue
        if isinstance(current, str):
            parts.append(escape_xml(current))
            continue
        if not isinstance(current, dict):
            parts.append(escape_xml(str(current)))
            continue

        tag = current.get("tag", "")
        attr = current.get("attr") or {}
        children = current.get("children") or []
        attr_str = "".join(f' {k}="{escape_xml(str(v), quote=True)}"' for k, v in attr.items())

        if not children:
            parts.append(f"<{tag}{attr_str}/>")
            continue
        parts.append(f"<{tag}{attr_str}>")
        stack.append((current, True))
        for child in reversed(children):
            stack.append((child, False))
    return "".join(parts)


class EGovClient(BaseClient):
    """e-Gov 法令API から法令XMLを取得する"""

    def __init__(self, **kwargs):
        kwargs.setdefault("rate_limit_sec", 0.5)
        super().__init__(**kwargs)
        self.base_url = EGOV_API_BASE_URL
        self.base_url_v2 = EGOV_API_V2_BASE_URL
        # Timeout settings (seconds)
        self.timeout_v2 = 60
        self.timeout_v1 = 180  # v1 は遅いので長めにとる

    def fetch_law_xml(self, law_id: str) -> str:
        """
        法令IDを指定して法令XMLを取得する

        1. v2 API（JSON）を試し、XMLに変換する
        2. 失敗したら v1 API（XML）にフォールバック
        3. どちらも失敗したら RuntimeError
        """
        cache_key = f"egov_law_xml_{law_id}"
        cache_path = self._get_cache_path(cache_key)
        cached_data = self._load_cache(cache_path)
        if cached_data is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return cached_data

        xml_content = self._fetch_law_xml_v2(law_id)
        if xml_content is None:
            logger.info(f"Falling back to v1 API for {law_id}")
            xml_content = self._fetch_law_xml_v1(law_id)

        if xml_content is None:
            raise RuntimeError(f"Failed to fetch law {law_id} from both v1 and v2 APIs")

        self._save_cache(cache_path, xml_content)
        return xml_content

    def _fetch_law_xml_v2(self, law_id: str) -> Optional[str]:
        url = f"{self.base_url_v2}/law_data/{law_id}"
        try:
            data = self.request("GET", url, timeout=self.timeout_v2)
        except requests.RequestException as e:
            logger.warning(f"v2 API error for {law_id}: {type(e).__name__}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"v2 API returned invalid JSON for {law_id}: {e}")
            return None

        law_full_text = data.get("law_full_text") if isinstance(data, dict) else None
        if not law_full_text:
            logger.warning(f"v2 API returned no law_full_text for {law_id}")
            return None

        xml_content = json_to_xml(law_full_text)
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{xml_content}'

    def _fetch_law_xml_v1(self, law_id: str) -> Optional[str]:
        url = f"{self.base_url}/lawdata/{law_id}"
        try:
            return self.request("GET", url, response_type="text", timeout=self.timeout_v1)
        except requests.RequestException as e:
            logger.error(f"v1 API error for {law_id}: {type(e).__name__}: {e}")
            return None
