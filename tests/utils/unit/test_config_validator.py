"""
Tests for startup configuration validation.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from utils.config_validator import ConfigValidationError, validate_startup_config, validate_or_exit


def make_config(**overrides):
    values = dict(
        SHIPPING_FEE=Decimal("199"),
        WHOLESALER_MIN_ORDER_VALUE=Decimal("5000"),
        REPORT_PAGE_SIZE=50,
        NOTIFY_NEW_ORDERS=True,
        MSG91_AUTH_KEY="auth-key",
        MSG91_INTEGRATED_NUMBER="919000000000",
        WHATSAPP_NOTIFY_NUMBERS=["919876543210"],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestValidateStartupConfig:

    def test_valid_config(self):
        validate_startup_config(make_config())

    def test_notifications_disabled_needs_no_provider(self):
        validate_startup_config(make_config(NOTIFY_NEW_ORDERS=False, MSG91_AUTH_KEY=None, WHATSAPP_NOTIFY_NUMBERS=[]))

    def test_missing_auth_key(self):
        with pytest.raises(ConfigValidationError, match="MSG91_AUTH_KEY"):
            validate_startup_config(make_config(MSG91_AUTH_KEY=""))

    def test_missing_recipients(self):
        with pytest.raises(ConfigValidationError, match="WHATSAPP_NOTIFY_NUMBERS"):
            validate_startup_config(make_config(WHATSAPP_NOTIFY_NUMBERS=[]))

    @pytest.mark.parametrize("number", ["+919876543210", "98765", "91-98765-43210"])
    def test_malformed_recipient(self, number):
        with pytest.raises(ConfigValidationError, match="Invalid WhatsApp number"):
            validate_startup_config(make_config(WHATSAPP_NOTIFY_NUMBERS=[number]))

    def test_page_size(self):
        with pytest.raises(ConfigValidationError, match="REPORT_PAGE_SIZE"):
            validate_startup_config(make_config(REPORT_PAGE_SIZE=0))

    def test_validate_or_exit(self):
        with pytest.raises(SystemExit) as exc_info:
            validate_or_exit(make_config(MSG91_AUTH_KEY=None))
        assert exc_info.value.code == 1
