import hashlib
import json
import time
import requests
from pathlib import Path
from typing import Optional, Dict, Any
import logging
from ..config import CACHE_DIR, USER_AGENT

logger = logging.getLogger(__name__)


class BaseClient:
    """
    HTTP クライアントの共通部分

    - User-Agent 付きの requests.Session
    - キャッシュキーの md5 をファイル名にした JSON キャッシュ
    - リクエスト間隔の下限（rate_limit_sec）
    """

    def __init__(self, cache_dir: Optional[Path] = None, rate_limit_sec: float = 1.0):
        self.cache_dir = Path(cache_dir) if cache_dir else CACHE_DIR
        self.rate_limit_sec = rate_limit_sec
        self.last_request_time = 0.0
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def _get_cache_path(self, key: str) -> Path:
        hashed = hashlib.md5(key.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{hashed}.json"

    def _load_cache(self, cache_path: Path) -> Optional[Any]:
        if cache_path.exists():
            try:
                with open(cache_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError:
                logger.warning(f"Corrupted cache file: {cache_path}")
        return None

    def _save_cache(self, cache_path: Path, data: Any):
        with open(cache_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)

    def _wait_rate_limit(self):
        elapsed = time.time() - self.last_request_time
        if elapsed < self.rate_limit_sec:
            time.sleep(self.rate_limit_sec - elapsed)

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict] = None,
        cache_key: Optional[str] = None,
        response_type: str = "json",
        timeout: float = 60,
    ) -> Any:
        if cache_key:
            cache_path = self._get_cache_path(cache_key)
            cached_data = self._load_cache(cache_path)
            if cached_data is not None:
                logger.debug(f"Cache hit: {cache_key}")
                return cached_data

        self._wait_rate_limit()

        logger.info(f"Fetching: {url}")
        try:
            resp = self.session.request(method, url, params=params, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise
        finally:
            self.last_request_time = time.time()

        data = resp.json() if response_type == "json" else resp.text
        if cache_key:
            self._save_cache(cache_path, data)
        return data
