"""Mapping raw form values into calculator inputs.

Form values arrive as strings typed by the user, possibly with Arabic-Indic
digits and localized separators. Everything is sanitized to non-negative
numbers here so the calculators only ever see clean input.
"""
import re

from zakat_engine.constants import (
    DEFAULT_SALARY_CALCULATION_MODE,
    DEFAULT_WATERING_METHOD,
    DEFAULT_CAMEL_121_CHOICE,
)
from zakat_engine.data.livestock import PRICE_KEYS
from .nisab import NisabSettings, normalize_method
from .sanitize import to_non_negative_number, to_positive_number_or_none, to_whole_count

# Order in which detailed-form categories become line items
DETAILED_CATEGORIES = ['salary', 'produce', 'trade', 'industry', 'agriculture_products']

NO_CATEGORY_ERROR = 'Please enable at least one category to calculate Zakat.'
MISSING_INCOME_ERROR = 'Please enter your monthly income.'

_DIGITS = str.maketrans(
    '٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹',
    '01234567890123456789',
)
_CURRENCY_SYMBOLS = re.compile(r'[$€£¥]')
_CURRENCY_CODES = re.compile(r'[A-Za-z]{3}')


def normalize_digits(text: str) -> str:
    """Replace Arabic-Indic (٠-٩) and Eastern Arabic-Indic (۰-۹) digits with 0-9."""
    return text.translate(_DIGITS) if text else ''


def normalize_separators(text: str) -> str:
    """Drop thousands separators (٬ , whitespace) and map ٫ to a decimal dot."""
    if not text:
        return ''
    text = text.replace('٬', '').replace(',', '')
    text = re.sub(r'\s', '', text)
    return text.replace('٫', '.')


def safe_num(value) -> float:
    """Form value -> non-negative float; empty or invalid -> 0."""
    if isinstance(value, str):
        value = normalize_separators(normalize_digits(value.strip()))
    return to_non_negative_number(value)


def safe_optional_positive_num(value):
    """Form value -> positive float, or None when empty, invalid or <= 0."""
    if isinstance(value, str):
        if not value.strip():
            return None
        value = normalize_separators(normalize_digits(value.strip()))
    return to_positive_number_or_none(value)


def parse_currency_input(text) -> float:
    """Parse a typed currency amount such as '$1,250.50' or '١٬٢٥٠ SAR'.

    Currency symbols and 3-letter codes are stripped, negatives are made
    positive and the result is rounded to 2 decimals. Invalid input is 0.
    """
    if text is None:
        return 0.0
    text = str(text)
    if not text.strip():
        return 0.0

    cleaned = normalize_separators(normalize_digits(text))
    cleaned = _CURRENCY_SYMBOLS.sub('', cleaned)
    cleaned = _CURRENCY_CODES.sub('', cleaned).strip()

    match = re.match(r'[+-]?(\d+(\.\d*)?|\.\d+)', cleaned)
    if not match:
        return 0.0
    return round(abs(float(match.group(0))), 2)


def map_nisab_settings(form: dict) -> NisabSettings:
    """Global settings form -> NisabSettings; blank prices fall back to defaults."""
    return NisabSettings(
        method=normalize_method(form.get('method')),
        silver_price_per_gram=safe_optional_positive_num(form.get('silver_price_per_gram', '')),
        gold_price_per_gram=safe_optional_positive_num(form.get('gold_price_per_gram', '')),
        override=safe_optional_positive_num(form.get('override', '')),
    )


def _blank_or_num(value):
    """None for a blank field, otherwise safe_num (so a typed 0 stays 0)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return safe_num(value)


def map_salary_form(form: dict) -> dict:
    return {
        'monthly_income': safe_num(form.get('monthly_income', '')),
        'living_expense': _blank_or_num(form.get('living_expense')),
        'calculation_mode': form.get('calculation_mode') or DEFAULT_SALARY_CALCULATION_MODE,
    }


def map_produce_form(form: dict) -> dict:
    return {
        'is_for_trade': bool(form.get('is_for_trade')),
        'quantity_kg': safe_num(form.get('quantity_kg', '')),
        'market_value': safe_num(form.get('market_value', '')),
        'watering_method': form.get('watering_method') or DEFAULT_WATERING_METHOD,
        'price_per_kg': safe_optional_positive_num(form.get('price_per_kg', '')),
    }


def map_net_value_form(form: dict) -> dict:
    return {
        'market_value': safe_num(form.get('market_value', '')),
        'operating_costs': safe_num(form.get('operating_costs', '')),
    }


def map_livestock_form(form: dict) -> dict:
    """Livestock form -> species, whole owned count, choice and valid prices only."""
    raw_prices = form.get('prices') or {}
    prices = {}
    for key in PRICE_KEYS:
        price = safe_optional_positive_num(raw_prices.get(key, ''))
        if price is not None:
            prices[key] = price
    return {
        'species': form.get('species'),
        'owned_count': to_whole_count(safe_num(form.get('owned_count', ''))),
        'camel121_choice': form.get('camel121_choice') or DEFAULT_CAMEL_121_CHOICE,
        'prices': prices,
    }


def map_quick_form(form: dict) -> dict:
    """Quick calculator: cash and gold count as market value, debt as costs."""
    cash = parse_currency_input(form.get('cash'))
    gold_value = parse_currency_input(form.get('gold_value'))
    debt = parse_currency_input(form.get('debt'))
    return {
        'market_value': cash + gold_value,
        'operating_costs': debt,
    }


_CATEGORY_MAPPERS = {
    'salary': map_salary_form,
    'produce': map_produce_form,
    'trade': map_net_value_form,
    'industry': map_net_value_form,
    'agriculture_products': map_net_value_form,
}


def map_detailed_form(form: dict, toggles: dict) -> tuple[dict | None, str | None]:
    """Map the detailed form and its category toggles to calculator inputs.

    Returns:
        (mapped, validation_error). On error mapped is None and the
        calculation should not proceed. Otherwise mapped is a dict with
        'settings' (NisabSettings) and 'line_items' (category + inputs).
    """
    enabled = [category for category in DETAILED_CATEGORIES if toggles.get(category)]
    if not enabled:
        return None, NO_CATEGORY_ERROR

    line_items = []
    for category in enabled:
        section = form.get(category)
        inputs = _CATEGORY_MAPPERS[category](section if isinstance(section, dict) else {})
        if category == 'salary' and inputs['monthly_income'] <= 0:
            return None, MISSING_INCOME_ERROR
        line_items.append({'category': category, 'inputs': inputs})

    global_section = form.get('global')
    settings = map_nisab_settings(global_section if isinstance(global_section, dict) else {})
    return {'settings': settings, 'line_items': line_items}, None
