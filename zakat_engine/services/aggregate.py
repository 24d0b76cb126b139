"""Combining category line items into a single zakat total."""
import logging

from zakat_engine.constants import (
    NET_VALUE_CATEGORIES,
    UNIT_CURRENCY,
    UNIT_KG,
)
from .calc import (
    calculate_salary_zakat,
    calculate_produce_zakat,
    calculate_net_value_zakat,
)
from .nisab import coerce_settings
from .sanitize import to_positive_number_or_none

logger = logging.getLogger(__name__)

LINE_ITEM_CATEGORIES = ['salary', 'produce', *NET_VALUE_CATEGORIES]


def produce_in_currency(result: dict, price_per_kg) -> dict:
    """Convert a produce-in-kind result (kilograms) into currency.

    Monetary results, and results with no usable price, are returned as-is.
    """
    price = to_positive_number_or_none(price_per_kg)
    if result.get('unit') != UNIT_KG or price is None:
        return result

    breakdown = {
        category: {
            'zakat_amount': entry['zakat_amount'] * price,
            'is_applicable': entry['is_applicable'],
            'net_wealth': entry['net_wealth'] * price,
        }
        for category, entry in result['breakdown'].items()
    }
    return {
        'nisab': result['nisab'] * price,
        'total_wealth': result['total_wealth'] * price,
        'total_zakat': result['total_zakat'] * price,
        'has_zakat_due': result['has_zakat_due'],
        'breakdown': breakdown,
        'unit': UNIT_CURRENCY,
    }


def calculate_line_item(category: str, inputs: dict, settings=None) -> dict:
    """Run the calculator for one line item category.

    Produce inputs may carry price_per_kg, in which case the in-kind result
    is converted to currency so it can be aggregated.

    Raises:
        ValueError: If category is unknown
    """
    settings = coerce_settings(settings)
    if category == 'salary':
        return calculate_salary_zakat(inputs, settings)
    if category == 'produce':
        result = calculate_produce_zakat(inputs, settings)
        return produce_in_currency(result, inputs.get('price_per_kg'))
    if category in NET_VALUE_CATEGORIES:
        return calculate_net_value_zakat(
            inputs.get('market_value'),
            inputs.get('operating_costs'),
            settings,
            category=category,
        )
    raise ValueError(f"Unknown line item category: {category}")


def recalculate_line_items(line_items: list, settings) -> list:
    """Recompute stored line items against a new nisab settings snapshot.

    Each line item is a dict with category and inputs; any other keys (id,
    label) are carried over. Returns new dicts, the input is not modified.
    """
    settings = coerce_settings(settings)
    return [
        {**item, 'result': calculate_line_item(item['category'], item.get('inputs') or {}, settings)}
        for item in line_items
    ]


def combined_total(line_items: list) -> float:
    """Sum total_zakat across line items.

    Kilogram results are summed like any other; callers should convert
    produce in kind with produce_in_currency first.
    """
    units = {item['result'].get('unit', UNIT_CURRENCY) for item in line_items}
    if len(units) > 1:
        logger.warning(f"Combining line items with mixed units: {sorted(units)}")
    return sum((item['result']['total_zakat'] for item in line_items), 0.0)
