import os
import sys
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: Exception | str, expected: str):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


def _decimal_env(name: str, default: str) -> Decimal:
    try:
        value = Decimal(os.environ.get(name, default))
        if value < 0:
            raise ValueError(f"{name} must not be negative (got: {value})")
        return value
    except (InvalidOperation, ValueError) as e:
        _exit_with_config_error(name, e, "Non-negative decimal amount (e.g., 199, 5000.00)")


def _int_env(name: str, default: str) -> int:
    try:
        value = int(os.environ.get(name, default))
        if value < 0:
            raise ValueError(f"{name} must not be negative (got: {value})")
        return value
    except ValueError as e:
        _exit_with_config_error(name, e, "Non-negative integer (e.g., 10, 50)")


try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "DEV"))
except ValueError as e:
    _exit_with_config_error(
        "RUNTIME_ENVIRONMENT", e,
        ", ".join(env.value for env in RuntimeEnvironment)
    )

DB_NAME = os.environ.get("DB_NAME", "shop.db")
WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = _int_env("WEBAPP_PORT", "8000")
LANGUAGE = os.environ.get("LANGUAGE", "en")

# Storefront
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")
SHIPPING_FEE = _decimal_env("SHIPPING_FEE", "199")
WHOLESALER_MIN_ORDER_VALUE = _decimal_env("WHOLESALER_MIN_ORDER_VALUE", "5000")

# Admin back-office
LOW_STOCK_THRESHOLD = _int_env("LOW_STOCK_THRESHOLD", "10")
REPORT_PAGE_SIZE = _int_env("REPORT_PAGE_SIZE", "50")

# WhatsApp notifications (MSG91)
NOTIFY_NEW_ORDERS = os.environ.get("NOTIFY_NEW_ORDERS", "true") == "true"
MSG91_AUTH_KEY = os.environ.get("MSG91_AUTH_KEY")
MSG91_ENDPOINT = os.environ.get(
    "MSG91_ENDPOINT",
    "https://api.msg91.com/api/v5/whatsapp/whatsapp-outbound-message/bulk/"
)
MSG91_INTEGRATED_NUMBER = os.environ.get("MSG91_INTEGRATED_NUMBER")
WHATSAPP_TEMPLATE_NAME = os.environ.get("WHATSAPP_TEMPLATE_NAME", "new_order_alert")
WHATSAPP_TEMPLATE_LANGUAGE = os.environ.get("WHATSAPP_TEMPLATE_LANGUAGE", "en")
WHATSAPP_NOTIFY_NUMBERS = [
    number.strip()
    for number in os.environ.get("WHATSAPP_NOTIFY_NUMBERS", "").split(",")
    if number.strip()
]

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"
# Environment-specific retention defaults: keep production logs longer
LOG_RETENTION_DAYS = _int_env(
    "LOG_RETENTION_DAYS",
    "30" if RUNTIME_ENVIRONMENT == RuntimeEnvironment.PROD else "7"
)
