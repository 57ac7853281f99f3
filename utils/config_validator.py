"""
Configuration Validation Module

Validates cross-field configuration rules at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import sys
from typing import Optional


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_required_config(value: Optional[str], name: str, example: str = "") -> None:
    """
    Validate that a required config value is set.

    Args:
        value: The config value to check
        name: Name of the config variable
        example: Optional example value to show in error message

    Raises:
        ConfigValidationError: If value is missing
    """
    if not value:
        error_msg = f"{name} is required but not set!"
        if example:
            error_msg += f"\nAdd to .env: {name}={example}"
        raise ConfigValidationError(error_msg)


def validate_notify_numbers(numbers: list[str]) -> None:
    """
    Validate WhatsApp recipient numbers (country code + number, digits only).

    Raises:
        ConfigValidationError: If the list is empty or a number is malformed
    """
    if not numbers:
        raise ConfigValidationError(
            "WHATSAPP_NOTIFY_NUMBERS is required when NOTIFY_NEW_ORDERS is enabled!\n"
            "Add to .env: WHATSAPP_NOTIFY_NUMBERS=919876543210,919812345678"
        )
    for number in numbers:
        if not number.isdigit() or not 10 <= len(number) <= 15:
            raise ConfigValidationError(
                f"Invalid WhatsApp number in WHATSAPP_NOTIFY_NUMBERS: {number}\n"
                "Use country code + number, digits only (e.g. 919876543210)"
            )


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    Args:
        config_module: The config module to validate

    Raises:
        ConfigValidationError: If any validation fails
    """
    if config_module.WHOLESALER_MIN_ORDER_VALUE < 0 or config_module.SHIPPING_FEE < 0:
        raise ConfigValidationError("SHIPPING_FEE and WHOLESALER_MIN_ORDER_VALUE must not be negative")

    if config_module.REPORT_PAGE_SIZE < 1:
        raise ConfigValidationError(
            f"REPORT_PAGE_SIZE must be at least 1 (currently: {config_module.REPORT_PAGE_SIZE})"
        )

    # The WhatsApp provider is only needed when new orders are announced
    if getattr(config_module, 'NOTIFY_NEW_ORDERS', False):
        validate_required_config(
            getattr(config_module, 'MSG91_AUTH_KEY', None), 'MSG91_AUTH_KEY', '<your-msg91-auth-key>'
        )
        validate_required_config(
            getattr(config_module, 'MSG91_INTEGRATED_NUMBER', None), 'MSG91_INTEGRATED_NUMBER', '919876543210'
        )
        validate_notify_numbers(getattr(config_module, 'WHATSAPP_NOTIFY_NUMBERS', []))


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.

    Args:
        config_module: The config module to validate
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nShop startup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
