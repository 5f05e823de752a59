"""
設定載入模組

Reads monitor settings from the environment and loads the product list.
Products come from a two-field delimited file (url, name) or fall back to the
built-in default product.
"""

import csv
import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


# 預設追蹤商品
DEFAULT_PRODUCT_URL = (
    "https://www.bestbuy.com/site/nvidia-geforce-rtx-5090-32gb-gddr7-graphics-card-"
    "dark-gun-metal/6614151.p?skuId=6614151"
)
DEFAULT_PRODUCT_NAME = "RTX 5090"

# 預設值定義
DEFAULT_CONFIG = {
    "notifier": "sms",
    "check_interval": 30,
    "request_timeout": 15,
    "notify_timeout": 10,
    "log_level": "INFO",
}

VALID_NOTIFIERS = ("sms", "telegram", "log")

# 通知管道所需的環境變數
REQUIRED_ENV = {
    "sms": ("PHONE_NUMBER",),
    "telegram": ("TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID"),
    "log": (),
}


class ConfigError(Exception):
    """啟動設定錯誤（缺少環境變數、商品檔案無法讀取等）"""
    pass


@dataclass
class Product:
    """追蹤商品"""
    url: str
    name: str
    last_status: bool = False


@dataclass
class MonitorConfig:
    """監控設定"""
    notifier: str = DEFAULT_CONFIG["notifier"]
    check_interval: float = DEFAULT_CONFIG["check_interval"]
    request_timeout: float = DEFAULT_CONFIG["request_timeout"]
    notify_timeout: float = DEFAULT_CONFIG["notify_timeout"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    phone_number: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    aws_region: Optional[str] = None
    products_file: Optional[str] = None

    def __post_init__(self):
        if self.notifier not in VALID_NOTIFIERS:
            raise ConfigError(
                f"Unknown notifier: {self.notifier}. Valid notifiers: {list(VALID_NOTIFIERS)}"
            )
        for key in ("check_interval", "request_timeout", "notify_timeout"):
            if not math.isfinite(getattr(self, key)):
                raise ConfigError(f"{key} must be a finite number")
        if self.check_interval < 0:
            raise ConfigError("check_interval must not be negative")
        if self.request_timeout <= 0 or self.notify_timeout <= 0:
            raise ConfigError("timeouts must be positive")


def _read_number(env: Mapping[str, str], key: str, default: float) -> float:
    """
    讀取數值型環境變數

    Args:
        env: 環境變數映射
        key: 變數名稱
        default: 未設定時的預設值

    Returns:
        float: 數值

    Raises:
        ConfigError: 當值無法轉換為數字或不是有限值時
    """
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    # float() 接受 nan 與 inf
    if not math.isfinite(value):
        raise ConfigError(f"{key} must be a finite number, got {raw!r}")
    return value


def load_config(
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict] = None,
) -> MonitorConfig:
    """
    從環境變數載入監控設定

    Args:
        env: 環境變數映射，預設為 os.environ
        overrides: 命令列參數等覆寫值（None 的項目會被忽略）

    Returns:
        MonitorConfig: 監控設定物件

    Raises:
        ConfigError: 當通知目的地未設定或數值無效時
    """
    if env is None:
        env = os.environ

    config_data = {
        "notifier": env.get("NOTIFIER", DEFAULT_CONFIG["notifier"]).strip().lower(),
        "check_interval": _read_number(env, "CHECK_INTERVAL", DEFAULT_CONFIG["check_interval"]),
        "request_timeout": _read_number(env, "REQUEST_TIMEOUT", DEFAULT_CONFIG["request_timeout"]),
        "notify_timeout": _read_number(env, "NOTIFY_TIMEOUT", DEFAULT_CONFIG["notify_timeout"]),
        "log_level": env.get("LOG_LEVEL", DEFAULT_CONFIG["log_level"]).strip().upper(),
        "phone_number": env.get("PHONE_NUMBER") or None,
        "telegram_bot_token": env.get("TELEGRAM_BOT_TOKEN") or None,
        "telegram_chat_id": env.get("TELEGRAM_CHAT_ID") or None,
        "aws_region": env.get("AWS_REGION") or None,
        "products_file": env.get("PRODUCTS_FILE") or None,
    }

    # 合併覆寫值
    if overrides:
        config_data.update({k: v for k, v in overrides.items() if v is not None})

    config = MonitorConfig(**config_data)

    missing = [
        key for key in REQUIRED_ENV[config.notifier]
        if not getattr(config, key.lower())
    ]
    if missing:
        raise ConfigError(
            f"{', '.join(missing)} must be set for the {config.notifier} notifier"
        )

    return config


def _parse_product_row(row: List[str]) -> Optional[Product]:
    """解析單行商品資料，格式不符時返回 None"""
    if len(row) != 2:
        return None
    url, name = row[0].strip(), row[1].strip()
    if not url.startswith(("http://", "https://")) or not name:
        return None
    return Product(url=url, name=name)


def load_products(path: Optional[str] = None) -> List[Product]:
    """
    載入追蹤商品列表

    每行一筆 `url,name`。空行與 `#` 開頭的註解行會被忽略，
    第一行若為 `url,name` 標題也會被略過。格式錯誤的行記錄警告後跳過。

    Args:
        path: 商品檔案路徑，若為 None 則使用預設商品

    Returns:
        List[Product]: 依檔案順序排列的商品列表

    Raises:
        ConfigError: 當檔案無法讀取或沒有任何有效商品時
    """
    if path is None:
        return [Product(url=DEFAULT_PRODUCT_URL, name=DEFAULT_PRODUCT_NAME)]

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read product file {path}: {e}")

    products = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        try:
            row = next(csv.reader([line], skipinitialspace=True))
        except csv.Error as e:
            logger.warning(f"Skipping malformed line {line_no} in {path}: {e}")
            continue

        # 標題行
        if not products and [field.strip().lower() for field in row] == ["url", "name"]:
            continue

        product = _parse_product_row(row)
        if product is None:
            logger.warning(f"Skipping malformed line {line_no} in {path}: {line!r}")
            continue
        products.append(product)

    if not products:
        raise ConfigError(f"No valid products found in {path}")

    logger.info(f"Loaded {len(products)} products from {path}")
    return products
