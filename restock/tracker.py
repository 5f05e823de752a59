"""
商品狀態追蹤模組

Keeps the last known stock status per product and decides when a fresh
signal is an out-of-stock to in-stock transition worth an alert.
"""

import logging
from dataclasses import dataclass

from .config import Product
from .detectors import StockSignal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    """單次觀察結果"""
    notify: bool
    changed: bool


class ProductStateTracker:
    """
    商品狀態追蹤器

    只在「缺貨 -> 有貨」時要求通知；持續有貨不會重複通知，
    直到再次觀察到缺貨為止。UNKNOWN 不改變狀態。
    """

    def observe(self, product: Product, signal: StockSignal) -> Observation:
        """
        記錄一次庫存觀察

        Args:
            product: 追蹤商品（會更新 last_status）
            signal: 本次抓取的庫存狀態

        Returns:
            Observation: 是否需要發送通知、狀態是否改變
        """
        if signal is StockSignal.UNKNOWN:
            logger.warning(f"[{product.name}] Stock status unknown, keeping previous state")
            return Observation(notify=False, changed=False)

        in_stock = signal is StockSignal.IN_STOCK
        if in_stock == product.last_status:
            return Observation(notify=False, changed=False)

        product.last_status = in_stock
        if in_stock:
            logger.info(f"[{product.name}] Transitioned to IN STOCK")
            return Observation(notify=True, changed=True)

        logger.info(f"[{product.name}] Transitioned to out of stock")
        return Observation(notify=False, changed=True)
