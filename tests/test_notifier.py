#!/usr/bin/env python3
"""
測試通知服務
"""
import unittest
from unittest.mock import patch, MagicMock

import requests
from botocore.exceptions import ClientError, EndpointConnectionError

from restock.config import MonitorConfig
from restock.notifier import (
    NotifyError,
    SnsSmsNotifier,
    TelegramNotifier,
    LogNotifier,
    create_notifier,
    format_alert,
)


URL = "https://www.bestbuy.com/site/6614151.p?skuId=6614151"


class TestFormatAlert(unittest.TestCase):
    def test_message_contains_url_and_call_to_action(self):
        message = format_alert(URL, "RTX 5090")
        self.assertIn("RTX 5090 IN STOCK", message)
        self.assertIn("GO BUY NOW", message)
        self.assertTrue(message.endswith(URL))


class TestSnsSmsNotifier(unittest.TestCase):
    """測試 SNS 簡訊通知"""

    def test_requires_phone_number(self):
        with self.assertRaises(ValueError):
            SnsSmsNotifier("", client=MagicMock())

    def test_notify_publishes_sms(self):
        client = MagicMock()
        client.publish.return_value = {"MessageId": "abc-123"}

        notifier = SnsSmsNotifier("+15555550100", client=client)
        notifier.notify(URL, "RTX 5090")

        client.publish.assert_called_once_with(
            PhoneNumber="+15555550100",
            Message=format_alert(URL, "RTX 5090"),
        )

    def test_client_error_raises_notify_error(self):
        client = MagicMock()
        client.publish.side_effect = ClientError(
            {"Error": {"Code": "InvalidParameter", "Message": "Invalid phone number"}},
            "Publish",
        )
        notifier = SnsSmsNotifier("+15555550100", client=client)

        with self.assertRaises(NotifyError):
            notifier.notify(URL, "RTX 5090")

    def test_connection_error_raises_notify_error(self):
        client = MagicMock()
        client.publish.side_effect = EndpointConnectionError(endpoint_url="https://sns.us-east-1.amazonaws.com")
        notifier = SnsSmsNotifier("+15555550100", client=client)

        with self.assertRaises(NotifyError):
            notifier.notify(URL, "RTX 5090")

    @patch("restock.notifier.boto3.client")
    def test_client_built_with_timeouts(self, mock_client):
        SnsSmsNotifier("+15555550100", timeout=4, region_name="us-east-1")

        args, kwargs = mock_client.call_args
        self.assertEqual(args, ("sns",))
        self.assertEqual(kwargs["region_name"], "us-east-1")
        self.assertEqual(kwargs["config"].connect_timeout, 4)
        self.assertEqual(kwargs["config"].read_timeout, 4)


class TestTelegramNotifier(unittest.TestCase):
    """測試 Telegram 通知"""

    def test_init_requires_credentials(self):
        with self.assertRaises(ValueError):
            TelegramNotifier("token", "")

    @patch("restock.notifier.requests.post")
    def test_notify(self, mock_post):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.raise_for_status = MagicMock()
        mock_post.return_value = mock_response

        notifier = TelegramNotifier("test_token", "test_chat_id", timeout=3)
        notifier.notify(URL, "RTX 5090")

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertIn("bottest_token/sendMessage", args[0])
        self.assertEqual(kwargs["json"]["chat_id"], "test_chat_id")
        self.assertIn(URL, kwargs["json"]["text"])
        self.assertEqual(kwargs["timeout"], 3)

    @patch("restock.notifier.requests.post")
    def test_notify_failure(self, mock_post):
        mock_post.side_effect = requests.Timeout("slow")

        notifier = TelegramNotifier("test_token", "test_chat_id")
        with self.assertRaises(NotifyError):
            notifier.notify(URL, "RTX 5090")


class TestCreateNotifier(unittest.TestCase):
    @patch("restock.notifier.boto3.client")
    def test_sms(self, mock_client):
        config = MonitorConfig(notifier="sms", phone_number="+15555550100", aws_region="us-west-2")
        notifier = create_notifier(config)
        self.assertIsInstance(notifier, SnsSmsNotifier)
        self.assertEqual(notifier.phone_number, "+15555550100")

    def test_telegram(self):
        config = MonitorConfig(notifier="telegram", telegram_bot_token="t", telegram_chat_id="c")
        self.assertIsInstance(create_notifier(config), TelegramNotifier)

    def test_log(self):
        notifier = create_notifier(MonitorConfig(notifier="log"))
        self.assertIsInstance(notifier, LogNotifier)
        with self.assertLogs("restock.notifier", level="INFO") as logs:
            notifier.notify(URL, "RTX 5090")
        self.assertIn("[DRY RUN]", logs.output[0])


if __name__ == "__main__":
    unittest.main()
