"""
Tests for SecretMaskingFilter.
"""

import logging

import pytest

from utils.logging_config import SecretMaskingFilter


def masked(message: str, *args) -> str:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, args or None, None)
    SecretMaskingFilter().filter(record)
    return record.getMessage()


class TestSecretMaskingFilter:

    def test_auth_key(self):
        result = masked("headers: authkey=4251AbCdEf0123456789")
        assert "4251AbCdEf0123456789" not in result
        assert "[REDACTED_AUTH_KEY]" in result

    def test_password(self):
        assert "hunter2" not in masked("password=hunter2")

    @pytest.mark.parametrize("phone", ["9876543210", "+91 9876543210", "919876543210"])
    def test_phone_numbers(self, phone):
        result = masked(f"Sending WhatsApp to {phone}")
        assert "9876543210" not in result

    def test_email(self):
        assert masked("Buyer asha@example.com placed order") == "Buyer [REDACTED_EMAIL] placed order"

    def test_args_are_masked(self):
        assert "asha@example.com" not in masked("Buyer %s", "asha@example.com")

    def test_order_messages_untouched(self):
        message = "[Checkout] Order 42 placed (ONLINE): 2 line(s), total=499.00"
        assert masked(message) == message

    def test_record_never_dropped(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "plain", None, None)
        assert SecretMaskingFilter().filter(record) is True
