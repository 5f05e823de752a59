"""
輪詢排程模組

Drives the fixed-interval polling loop: every cycle visits each product in
load order (fetch, extract, observe, maybe notify), then sleeps until the
next cycle or until a stop is requested.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from .config import MonitorConfig, Product
from .detectors import StockExtractor, StockSignal
from .fetcher import FetchError, PageFetcher
from .notifier import Notifier, NotifyError
from .tracker import ProductStateTracker

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """單輪輪詢統計"""
    cycle: int
    checked: int = 0
    in_stock: int = 0
    notified: int = 0
    errors: int = 0


class PollScheduler:
    """
    輪詢排程器

    依載入順序逐一處理商品；單一商品的錯誤只記錄日誌，
    不影響同一輪的其他商品。
    """

    def __init__(
        self,
        config: MonitorConfig,
        products: List[Product],
        fetcher: PageFetcher,
        notifier: Notifier,
        extractor: Optional[StockExtractor] = None,
        tracker: Optional[ProductStateTracker] = None,
    ):
        self.config = config
        self.products = products
        self.fetcher = fetcher
        self.notifier = notifier
        self.extractor = extractor or StockExtractor()
        self.tracker = tracker or ProductStateTracker()

        self.cycle_count = 0
        self._stop_event = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """要求停止；目前商品處理完後即結束迴圈"""
        self._stop_event.set()

    def poll_product(self, product: Product, report: CycleReport) -> None:
        """
        處理單一商品：抓取、判斷、追蹤，必要時發送通知

        Args:
            product: 追蹤商品
            report: 本輪統計（會被更新）
        """
        logger.info(f"🔎 Checking {product.name}: {product.url}")
        try:
            html = self.fetcher.fetch(product.url)
            signal = self.extractor.extract(html)
        except FetchError as e:
            report.errors += 1
            logger.error(f"⚠️ Error fetching {product.name}: {e}")
            return
        except Exception as e:
            report.errors += 1
            logger.error(f"⚠️ Error checking {product.name}: {e}", exc_info=True)
            return

        report.checked += 1
        observation = self.tracker.observe(product, signal)

        if signal is StockSignal.IN_STOCK:
            report.in_stock += 1
            logger.info(f"✅ {product.name} is in stock")
        elif signal is StockSignal.OUT_OF_STOCK:
            logger.info(f"❌ {product.name} is still out of stock")

        if not observation.notify:
            return

        logger.info(f"🚀 {product.name} AVAILABLE! GO BUY IT NOW!!!")
        try:
            self.notifier.notify(product.url, product.name)
            report.notified += 1
        except NotifyError as e:
            report.errors += 1
            logger.error(f"❌ {e}")
        except Exception as e:
            report.errors += 1
            logger.error(f"❌ Unexpected error notifying for {product.name}: {e}", exc_info=True)

    def run_cycle(self) -> CycleReport:
        """
        執行一輪輪詢

        Returns:
            CycleReport: 本輪統計
        """
        self.cycle_count += 1
        report = CycleReport(cycle=self.cycle_count)
        logger.info(f"=== Poll cycle #{self.cycle_count} ({len(self.products)} products) ===")

        for product in self.products:
            if self.stopped:
                break
            self.poll_product(product, report)

        logger.info(
            f"Cycle #{report.cycle} done: checked={report.checked}, "
            f"in_stock={report.in_stock}, notified={report.notified}, errors={report.errors}"
        )
        return report

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """
        持續輪詢直到 stop() 被呼叫

        Args:
            max_cycles: 最多執行幾輪，None 表示不限
        """
        logger.info(f"Starting poll loop: {len(self.products)} products, interval {self.config.check_interval}s")

        while not self.stopped:
            self.run_cycle()

            if max_cycles is not None and self.cycle_count >= max_cycles:
                break

            logger.info(f"⏳ Sleeping for {self.config.check_interval} seconds before next check...")
            if self._stop_event.wait(self.config.check_interval):
                break

        logger.info("Poll loop stopped")
