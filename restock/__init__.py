# restock - product page stock polling and in-stock alerts
# Contains: config, detectors, fetcher, tracker, notifier, scheduler

from .config import ConfigError, MonitorConfig, Product, load_config, load_products
from .detectors import (
    StockSignal,
    StockDetector,
    SoldOutButtonDetector,
    ButtonStateDetector,
    StockExtractor,
)
from .fetcher import FetchError, PageFetcher
from .tracker import Observation, ProductStateTracker
from .notifier import (
    Notifier,
    NotifyError,
    SnsSmsNotifier,
    TelegramNotifier,
    LogNotifier,
    create_notifier,
)
from .scheduler import CycleReport, PollScheduler

__all__ = [
    'ConfigError',
    'MonitorConfig',
    'Product',
    'load_config',
    'load_products',
    'StockSignal',
    'StockDetector',
    'SoldOutButtonDetector',
    'ButtonStateDetector',
    'StockExtractor',
    'FetchError',
    'PageFetcher',
    'Observation',
    'ProductStateTracker',
    'Notifier',
    'NotifyError',
    'SnsSmsNotifier',
    'TelegramNotifier',
    'LogNotifier',
    'create_notifier',
    'CycleReport',
    'PollScheduler',
]
