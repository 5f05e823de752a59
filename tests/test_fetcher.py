#!/usr/bin/env python3
"""
測試 PageFetcher
"""
import unittest
from unittest.mock import patch, MagicMock

import requests

from restock.fetcher import FetchError, PageFetcher


def make_response(status_code=200, text="<html></html>"):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


class TestPageFetcher(unittest.TestCase):
    def setUp(self):
        self.session = requests.Session()
        self.fetcher = PageFetcher(timeout=5, session=self.session)

    def tearDown(self):
        self.fetcher.close()

    def test_default_headers(self):
        """測試預設瀏覽器標頭"""
        headers = self.session.headers
        self.assertIn("Chrome/122", headers["User-Agent"])
        self.assertEqual(headers["Accept-Language"], "en-US,en;q=0.9")
        self.assertEqual(headers["Sec-Fetch-Mode"], "navigate")
        self.assertEqual(headers["Cookie"], "intl_splash=false")
        self.assertIn("Referer", headers)
        self.assertIn("Origin", headers)

    def test_fetch_returns_body(self):
        with patch.object(self.session, "get", return_value=make_response(text="<p>ok</p>")) as mock_get:
            body = self.fetcher.fetch("https://example.com/p")

        self.assertEqual(body, "<p>ok</p>")
        mock_get.assert_called_once_with("https://example.com/p", timeout=5)

    def test_non_2xx_raises(self):
        """封鎖頁（403）不進行解析"""
        with patch.object(self.session, "get", return_value=make_response(403, "Access Denied")):
            with self.assertRaises(FetchError) as ctx:
                self.fetcher.fetch("https://example.com/p")
        self.assertEqual(ctx.exception.status_code, 403)

    def test_network_error_raises(self):
        with patch.object(self.session, "get", side_effect=requests.ConnectionError("boom")):
            with self.assertRaises(FetchError) as ctx:
                self.fetcher.fetch("https://example.com/p")
        self.assertIsNone(ctx.exception.status_code)

    def test_timeout_raises(self):
        with patch.object(self.session, "get", side_effect=requests.Timeout("slow")):
            with self.assertRaises(FetchError):
                self.fetcher.fetch("https://example.com/p")

    def test_custom_headers(self):
        session = requests.Session()
        PageFetcher(headers={"User-Agent": "custom"}, session=session)
        self.assertEqual(session.headers["User-Agent"], "custom")

    def test_context_manager_closes_session(self):
        session = MagicMock()
        session.headers = {}
        with PageFetcher(session=session):
            pass
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
