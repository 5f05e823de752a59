"""
頁面抓取模組

Fetches product pages with a fixed browser-like header set so the site is
less likely to serve a bot-detection page.
"""

import logging
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """抓取失敗（網路錯誤、逾時或非 2xx 狀態碼）"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PageFetcher:
    """商品頁面抓取器"""

    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )

    DEFAULT_HEADERS = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Referer": "https://www.bestbuy.com/",
        "Origin": "https://www.bestbuy.com",
        "Cookie": "intl_splash=false",
        "Sec-Ch-Ua": '"Chromium";v="122", "Google Chrome";v="122", "Not(A:Brand";v="24"',
        "Sec-Ch-Ua-Mobile": "?0",
        "Sec-Ch-Ua-Platform": '"Windows"',
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    def __init__(
        self,
        timeout: float = 15,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        初始化抓取器

        Args:
            timeout: 單次請求逾時秒數
            headers: 自訂標頭，若為 None 則使用預設瀏覽器標頭
            session: 自訂 requests Session（測試用）
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(headers or self.DEFAULT_HEADERS)

    def fetch(self, url: str) -> str:
        """
        抓取頁面 HTML

        Args:
            url: 商品頁面 URL

        Returns:
            str: 回應內容

        Raises:
            FetchError: 網路錯誤、逾時或狀態碼非 2xx
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}")

        body = response.text
        logger.info(f"Response status: {response.status_code}, body length: {len(body)}")

        # 錯誤頁（403/503 封鎖頁等）不進行解析
        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"Unexpected status {response.status_code} from {url}",
                status_code=response.status_code,
            )
        return body

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
