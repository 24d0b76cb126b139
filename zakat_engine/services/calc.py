"""Zakat calculation service for salary, produce and net-value categories.

Every calculator takes its category inputs plus an explicit NisabSettings
snapshot and returns the same result shape:

    {
        'nisab': float,
        'total_wealth': float,
        'total_zakat': float,
        'has_zakat_due': bool,
        'breakdown': {category: {'zakat_amount', 'is_applicable', 'net_wealth'}},
        'unit': 'currency' | 'kg',
    }
"""
import logging

from zakat_engine.constants import (
    ZAKAT_RATE,
    MINIMUM_LIVING_EXPENSE,
    MONTHS_PER_YEAR,
    DEFAULT_SALARY_CALCULATION_MODE,
    PRODUCE_NISAB_KG,
    PRODUCE_WATERING_RATES,
    DEFAULT_WATERING_METHOD,
    NET_VALUE_CATEGORIES,
    DEFAULT_NET_VALUE_CATEGORY,
    UNIT_CURRENCY,
    UNIT_KG,
)
from .nisab import calculate_nisab, coerce_settings
from .sanitize import to_non_negative_number

logger = logging.getLogger(__name__)


def calculate_category(net_wealth: float, threshold: float, rate: float) -> dict:
    """Apply a rate to net wealth once it reaches the threshold."""
    zakat_amount = net_wealth * rate if net_wealth >= threshold else 0.0
    return {
        'zakat_amount': zakat_amount,
        'is_applicable': zakat_amount > 0,
        'net_wealth': net_wealth,
    }


def build_result(nisab: float, category: str, category_result: dict, unit: str = UNIT_CURRENCY) -> dict:
    return {
        'nisab': nisab,
        'total_wealth': category_result['net_wealth'],
        'total_zakat': category_result['zakat_amount'],
        'has_zakat_due': category_result['is_applicable'],
        'breakdown': {category: category_result},
        'unit': unit,
    }


def get_watering_rate(watering_method: str | None) -> float:
    """10% for naturally watered crops, 5% when irrigation is paid for."""
    if watering_method == 'paid_irrigation':
        return PRODUCE_WATERING_RATES['paid_irrigation']
    return PRODUCE_WATERING_RATES[DEFAULT_WATERING_METHOD]


def calculate_salary_zakat(salary: dict, settings=None) -> dict:
    """Calculate zakat on salary / service income.

    Args:
        salary: Dict with monthly_income, optional living_expense (defaults to
            the minimum monthly living expense) and calculation_mode
            ('annual' or 'monthly')
        settings: NisabSettings snapshot (or dict); defaults to silver

    Annual mode compares twelve months of net income against the nisab.
    Monthly mode compares a single month of net income against the same,
    unscaled nisab.

    Returns:
        Calculation result dict
    """
    nisab = calculate_nisab(coerce_settings(settings))

    monthly_income = to_non_negative_number(salary.get('monthly_income'))
    living_expense = salary.get('living_expense')
    if living_expense is None:
        monthly_expense = float(MINIMUM_LIVING_EXPENSE)
    else:
        monthly_expense = to_non_negative_number(living_expense)

    mode = salary.get('calculation_mode') or DEFAULT_SALARY_CALCULATION_MODE
    if mode == 'monthly':
        net_wealth = max(0.0, monthly_income - monthly_expense)
    else:
        net_wealth = max(0.0, monthly_income * MONTHS_PER_YEAR - monthly_expense * MONTHS_PER_YEAR)

    result = calculate_category(net_wealth, nisab, ZAKAT_RATE)
    logger.debug(f"Salary ({mode}): net {net_wealth} vs nisab {nisab} -> {result['zakat_amount']}")
    return build_result(nisab, 'salary', result)


def calculate_produce_zakat(produce: dict, settings=None) -> dict:
    """Calculate zakat on agricultural produce.

    Args:
        produce: Dict with is_for_trade (only True selects trade), quantity_kg, market_value and
            watering_method ('natural' or 'paid_irrigation')
        settings: NisabSettings snapshot (or dict), used for traded produce

    Produce held for trade is treated as trade goods: 2.5% of market value
    against the monetary nisab. Harvested produce uses the fixed 653 kg
    nisab and is due in kind, so nisab, total_wealth and total_zakat are
    kilograms and the result unit is 'kg'.

    Returns:
        Calculation result dict
    """
    if produce.get('is_for_trade') is True:
        nisab = calculate_nisab(coerce_settings(settings))
        market_value = to_non_negative_number(produce.get('market_value'))
        result = calculate_category(market_value, nisab, ZAKAT_RATE)
        return build_result(nisab, 'produce', result)

    quantity_kg = to_non_negative_number(produce.get('quantity_kg'))
    rate = get_watering_rate(produce.get('watering_method'))
    result = calculate_category(quantity_kg, PRODUCE_NISAB_KG, rate)
    return build_result(float(PRODUCE_NISAB_KG), 'produce', result, unit=UNIT_KG)


def calculate_net_value_zakat(market_value, operating_costs, settings=None, category: str = DEFAULT_NET_VALUE_CATEGORY) -> dict:
    """Calculate zakat on market value net of operating costs.

    Shared by the trade sector, industrial sector and other agricultural
    products; the category only names the breakdown entry.

    Raises:
        ValueError: If category is not a net-value category
    """
    if category not in NET_VALUE_CATEGORIES:
        raise ValueError(f"Unknown net value category: {category}")

    nisab = calculate_nisab(coerce_settings(settings))
    net_value = max(0.0, to_non_negative_number(market_value) - to_non_negative_number(operating_costs))
    result = calculate_category(net_value, nisab, ZAKAT_RATE)
    return build_result(nisab, category, result)
