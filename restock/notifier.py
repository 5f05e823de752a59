"""
通知服務模組

Sends the one-shot "back in stock" alert. SMS goes through AWS SNS; Telegram
and a log-only transport are available for other setups and dry runs.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import boto3
import requests
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import ConfigError, MonitorConfig

logger = logging.getLogger(__name__)


class NotifyError(Exception):
    """通知發送失敗"""
    pass


def format_alert(url: str, name: str) -> str:
    """
    組合到貨通知訊息

    Args:
        url: 商品頁面 URL
        name: 商品名稱

    Returns:
        通知文字
    """
    return f"🚨 {name} IN STOCK! GO BUY NOW: {url}"


class Notifier(ABC):
    """通知服務基礎類別"""

    @abstractmethod
    def notify(self, url: str, name: str) -> None:
        """
        發送到貨通知

        Args:
            url: 商品頁面 URL
            name: 商品名稱

        Raises:
            NotifyError: 發送失敗或逾時
        """
        pass


class SnsSmsNotifier(Notifier):
    """AWS SNS 簡訊通知"""

    def __init__(
        self,
        phone_number: str,
        timeout: float = 10,
        region_name: Optional[str] = None,
        client=None,
    ):
        if not phone_number:
            raise ValueError("PHONE_NUMBER must be set")
        self.phone_number = phone_number

        if client is None:
            # 通知不重試，逾時由 botocore 控制
            client_config = Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            )
            try:
                client = boto3.client("sns", region_name=region_name, config=client_config)
            except BotoCoreError as e:
                raise ConfigError(f"Cannot create SNS client: {e}")
        self.client = client

    def notify(self, url: str, name: str) -> None:
        try:
            response = self.client.publish(
                PhoneNumber=self.phone_number,
                Message=format_alert(url, name),
            )
        except (BotoCoreError, ClientError) as e:
            raise NotifyError(f"Failed to send SMS: {e}")
        logger.info(f"SMS notification sent successfully (MessageId: {response.get('MessageId')})")


class TelegramNotifier(Notifier):
    """Telegram 通知服務"""

    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10):
        if not bot_token or not chat_id:
            raise ValueError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must be set")
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout

    def notify(self, url: str, name: str) -> None:
        data = {
            "chat_id": self.chat_id,
            "text": format_alert(url, name),
            "disable_web_page_preview": False,
        }
        try:
            response = requests.post(
                self.API_URL.format(token=self.bot_token), json=data, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise NotifyError(f"Failed to send Telegram message: {e}")
        logger.info("Telegram notification sent successfully")


class LogNotifier(Notifier):
    """只寫入日誌（dry-run 用）"""

    def notify(self, url: str, name: str) -> None:
        logger.info(f"[DRY RUN] {format_alert(url, name)}")


def create_notifier(config: MonitorConfig) -> Notifier:
    """
    根據設定建立通知服務

    Args:
        config: 監控設定

    Returns:
        對應的通知服務實例
    """
    if config.notifier == "sms":
        return SnsSmsNotifier(
            config.phone_number,
            timeout=config.notify_timeout,
            region_name=config.aws_region,
        )
    elif config.notifier == "telegram":
        return TelegramNotifier(
            config.telegram_bot_token,
            config.telegram_chat_id,
            timeout=config.notify_timeout,
        )
    else:
        return LogNotifier()
