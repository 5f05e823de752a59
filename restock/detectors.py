"""
庫存判斷模組

Turns a product page into a tri-state stock signal. Each detector looks for
one markup pattern; the extractor runs them in priority order and the first
detector that recognises the page decides the result.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class StockSignal(Enum):
    """單次抓取的庫存狀態"""
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    UNKNOWN = "UNKNOWN"


class StockDetector(ABC):
    """
    庫存判斷策略基礎類別

    子類別只處理一種頁面結構；無法辨識頁面時返回 None，
    交由下一個策略判斷。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """策略名稱，用於日誌"""
        pass

    @abstractmethod
    def try_detect(self, soup: BeautifulSoup) -> Optional[StockSignal]:
        """
        嘗試從已解析的頁面判斷庫存

        Args:
            soup: BeautifulSoup 文件

        Returns:
            StockSignal，若頁面不含此策略的目標元素則返回 None
        """
        pass


class SoldOutButtonDetector(StockDetector):
    """主要加入購物車按鈕（停用樣式）的文字判斷"""

    SELECTOR = "button.c-button.c-button-disabled.c-button-lg.add-to-cart-button"
    SOLD_OUT_TEXT = "sold out"

    def __init__(self, selector: str = SELECTOR):
        self.selector = selector

    @property
    def name(self) -> str:
        return "sold-out-button"

    def try_detect(self, soup: BeautifulSoup) -> Optional[StockSignal]:
        element = soup.select_one(self.selector)
        if element is None:
            return None

        # 合併巢狀元素文字並壓縮空白
        text = " ".join(element.get_text(" ").split())
        logger.info(f"Found primary button: {text!r}")

        # 空白按鈕無法判斷，避免誤報有貨
        if not text:
            logger.warning("Primary button has no text, treating stock status as unknown")
            return StockSignal.UNKNOWN

        if self.SOLD_OUT_TEXT in text.casefold():
            return StockSignal.OUT_OF_STOCK
        return StockSignal.IN_STOCK


class ButtonStateDetector(StockDetector):
    """依 data-button-state 屬性判斷（備用）"""

    ATTRIBUTE = "data-button-state"
    ADDABLE_STATE = "ADD_TO_CART"
    KNOWN_STATES = ("ADD_TO_CART", "SOLD_OUT")

    def __init__(self, known_states: Sequence[str] = KNOWN_STATES):
        # 只比對已知狀態值，取貨等其他按鈕不列入判斷
        self.selector = ", ".join(
            f"[{self.ATTRIBUTE}='{state}']" for state in known_states
        )

    @property
    def name(self) -> str:
        return "button-state"

    def try_detect(self, soup: BeautifulSoup) -> Optional[StockSignal]:
        element = soup.select_one(self.selector)
        if element is None:
            return None

        state = element.get(self.ATTRIBUTE)
        logger.info(f"Button state: {state}")
        if state == self.ADDABLE_STATE:
            return StockSignal.IN_STOCK
        return StockSignal.OUT_OF_STOCK


DEFAULT_DETECTORS = (SoldOutButtonDetector, ButtonStateDetector)


class StockExtractor:
    """依序執行庫存判斷策略，第一個有結果的策略決定庫存狀態"""

    def __init__(self, detectors: Optional[Sequence[StockDetector]] = None):
        """
        初始化判斷器

        Args:
            detectors: 依優先順序排列的策略列表，若為 None 則使用預設策略
        """
        if detectors is None:
            detectors = [detector_cls() for detector_cls in DEFAULT_DETECTORS]
        self.detectors: List[StockDetector] = list(detectors)

    def extract(self, html: str) -> StockSignal:
        """
        從 HTML 判斷庫存狀態

        Args:
            html: 商品頁面原始 HTML

        Returns:
            StockSignal: 所有策略都無法辨識時返回 UNKNOWN
        """
        soup = BeautifulSoup(html or "", "lxml")

        for detector in self.detectors:
            signal = detector.try_detect(soup)
            if signal is not None:
                logger.debug(f"Detector {detector.name} returned {signal.value}")
                return signal

        logger.warning("Could not find status button, page structure may have changed")
        return StockSignal.UNKNOWN
