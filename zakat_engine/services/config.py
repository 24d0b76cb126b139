"""Configuration service for host-level calculation defaults."""
import logging
import os

from zakat_engine.constants import NISAB_METHODS, DEFAULT_NISAB_METHOD
from .sanitize import to_positive_number_or_none


def get_default_nisab_method() -> str:
    """Get the nisab method used when a request does not name one.

    Controlled by ZAKAT_DEFAULT_NISAB_METHOD env var (default: silver).
    """
    method = os.environ.get('ZAKAT_DEFAULT_NISAB_METHOD', DEFAULT_NISAB_METHOD).lower()
    return method if method in NISAB_METHODS else DEFAULT_NISAB_METHOD


def get_default_silver_price() -> float | None:
    """Get the host silver price per gram, if configured.

    Controlled by ZAKAT_SILVER_PRICE_PER_GRAM env var. Unset or invalid values
    leave the engine's built-in fallback in place.
    """
    return to_positive_number_or_none(os.environ.get('ZAKAT_SILVER_PRICE_PER_GRAM'))


def get_default_gold_price() -> float | None:
    """Get the host gold price per gram, if configured (ZAKAT_GOLD_PRICE_PER_GRAM)."""
    return to_positive_number_or_none(os.environ.get('ZAKAT_GOLD_PRICE_PER_GRAM'))


def get_log_level() -> int:
    """Get the engine log level from ZAKAT_LOG_LEVEL (default: INFO)."""
    name = os.environ.get('ZAKAT_LOG_LEVEL', 'INFO').upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_engine_config() -> dict:
    """Get complete host configuration status."""
    return {
        'default_nisab_method': get_default_nisab_method(),
        'silver_price_per_gram': get_default_silver_price(),
        'gold_price_per_gram': get_default_gold_price(),
        'log_level': logging.getLevelName(get_log_level()),
    }
