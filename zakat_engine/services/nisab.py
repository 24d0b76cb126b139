"""Nisab threshold resolution.

The nisab is either an explicit override or the weight of the chosen metal
(85g gold / 595g silver) priced per gram. Missing or invalid prices fall
back to fixed defaults rather than failing.
"""
from dataclasses import dataclass, asdict
from typing import Optional

from zakat_engine.constants import (
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    DEFAULT_GOLD_PRICE_PER_GRAM,
    DEFAULT_SILVER_PRICE_PER_GRAM,
    NISAB_METHODS,
    DEFAULT_NISAB_METHOD,
)
from .sanitize import to_non_negative_number


@dataclass(frozen=True)
class NisabSettings:
    """Snapshot of the user's nisab configuration for one calculation."""
    method: str = DEFAULT_NISAB_METHOD        # silver or gold
    silver_price_per_gram: Optional[float] = None
    gold_price_per_gram: Optional[float] = None
    override: Optional[float] = None          # > 0 replaces the computed nisab

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'NisabSettings':
        data = data or {}
        return cls(
            method=data.get('method') or DEFAULT_NISAB_METHOD,
            silver_price_per_gram=data.get('silver_price_per_gram'),
            gold_price_per_gram=data.get('gold_price_per_gram'),
            override=data.get('override'),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def coerce_settings(settings) -> NisabSettings:
    """Accept a NisabSettings, a plain dict or None."""
    if settings is None:
        return NisabSettings()
    if isinstance(settings, NisabSettings):
        return settings
    return NisabSettings.from_dict(settings)


def normalize_method(method) -> str:
    """Lower-case a method name; anything other than gold/silver means silver."""
    if isinstance(method, str) and method.lower() in NISAB_METHODS:
        return method.lower()
    return DEFAULT_NISAB_METHOD


def format_compact_value(value: float) -> str:
    """Format with thousands separators and at most two decimals (7,140 / 12.5)."""
    text = f'{value:,.2f}'
    return text.rstrip('0').rstrip('.')


def _metal_basis(method: str, silver_price_per_gram, gold_price_per_gram) -> tuple[int, float]:
    if method == 'gold':
        price = to_non_negative_number(gold_price_per_gram) or DEFAULT_GOLD_PRICE_PER_GRAM
        return NISAB_GOLD_GRAMS, float(price)
    price = to_non_negative_number(silver_price_per_gram) or DEFAULT_SILVER_PRICE_PER_GRAM
    return NISAB_SILVER_GRAMS, float(price)


def resolve_nisab(
    method: str = DEFAULT_NISAB_METHOD,
    silver_price_per_gram=None,
    gold_price_per_gram=None,
    override=None,
) -> dict:
    """Resolve the nisab threshold and a human-readable breakdown.

    Args:
        method: "silver" (default) or "gold"
        silver_price_per_gram: Silver price; invalid values fall back to 12
        gold_price_per_gram: Gold price; invalid values fall back to 800
        override: If finite and > 0, used verbatim as the nisab

    Returns:
        Dict with uses_override, method, grams, price_per_gram, nisab,
        short_summary and detail_summary
    """
    method = normalize_method(method)
    grams, price = _metal_basis(method, silver_price_per_gram, gold_price_per_gram)

    override_value = to_non_negative_number(override)
    if override_value > 0:
        formatted = format_compact_value(override_value)
        return {
            'uses_override': True,
            'method': method,
            'grams': grams,
            'price_per_gram': price,
            'nisab': override_value,
            'short_summary': f'Override: {formatted}',
            'detail_summary': f'Override used: {formatted}',
        }

    nisab = price * grams
    metal = method.title()
    return {
        'uses_override': False,
        'method': method,
        'grams': grams,
        'price_per_gram': price,
        'nisab': nisab,
        'short_summary': (
            f'Using {metal} • {grams}g • {format_compact_value(price)}/gram • '
            f'Nisab: {format_compact_value(nisab)}'
        ),
        'detail_summary': (
            f'{metal} basis: {grams}g × {format_compact_value(price)}/gram = '
            f'{format_compact_value(nisab)}'
        ),
    }


def resolve_nisab_settings(settings) -> dict:
    """Resolve the nisab breakdown for a NisabSettings snapshot (or dict)."""
    settings = coerce_settings(settings)
    return resolve_nisab(
        settings.method,
        silver_price_per_gram=settings.silver_price_per_gram,
        gold_price_per_gram=settings.gold_price_per_gram,
        override=settings.override,
    )


def calculate_nisab(settings) -> float:
    """Return just the monetary nisab threshold for a settings snapshot."""
    return resolve_nisab_settings(settings)['nisab']
