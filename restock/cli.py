"""
命令列入口

Polls the configured product pages every few seconds and sends an alert
when a product goes from out of stock to in stock.
"""
import argparse
import logging
import signal
from dotenv import load_dotenv

from .config import ConfigError, load_config, load_products
from .fetcher import PageFetcher
from .notifier import create_notifier
from .scheduler import PollScheduler

# 載入 .env 檔案
load_dotenv()

logger = logging.getLogger("restock")

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str) -> None:
    """設定日誌格式與等級"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler()],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="商品到貨監控（缺貨轉有貨時發送通知）",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
範例:
  %(prog)s                              # 監控預設商品，每 30 秒檢查一次
  %(prog)s --products products.csv      # 監控檔案中的商品（每行 url,name）
  %(prog)s --interval 60 --dry-run      # 測試模式（只寫入日誌，不發送通知）
  %(prog)s --once                       # 只執行一輪
        """
    )
    parser.add_argument(
        "--products", "-p",
        type=str,
        help="商品檔案路徑（每行 url,name），預設讀取 PRODUCTS_FILE"
    )
    parser.add_argument(
        "--interval", "-i",
        type=float,
        help="每輪檢查間隔秒數，預設讀取 CHECK_INTERVAL 或 30"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="只執行一輪後結束"
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="測試模式，通知只寫入日誌"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日誌等級，預設讀取 LOG_LEVEL 或 INFO"
    )
    return parser


def main(argv=None) -> int:
    """主程式"""
    args = build_parser().parse_args(argv)

    overrides = {
        "products_file": args.products,
        "check_interval": args.interval,
        "log_level": args.log_level,
        "notifier": "log" if args.dry_run else None,
    }

    try:
        config = load_config(overrides=overrides)
    except ConfigError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    try:
        products = load_products(config.products_file)
        notifier = create_notifier(config)
    except (ConfigError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info("🔥 Starting product availability checker...")
    if args.dry_run:
        logger.info("Mode: DRY RUN (no notifications)")

    with PageFetcher(timeout=config.request_timeout) as fetcher:
        scheduler = PollScheduler(config, products, fetcher, notifier)

        def signal_handler(signum, frame):
            logger.info("Received shutdown signal. Stopping gracefully...")
            scheduler.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        scheduler.run_forever(max_cycles=1 if args.once else None)

    return 0

