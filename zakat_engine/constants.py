"""Shared constants for zakat calculation."""

# Nisab thresholds (minimum wealth for zakat obligation)
NISAB_GOLD_GRAMS = 85
NISAB_SILVER_GRAMS = 595

# Fallback metal prices per gram when none (or an invalid one) is supplied
DEFAULT_GOLD_PRICE_PER_GRAM = 800
DEFAULT_SILVER_PRICE_PER_GRAM = 12

NISAB_METHODS = ('silver', 'gold')
DEFAULT_NISAB_METHOD = 'silver'

# Zakat rate (2.5%)
ZAKAT_RATE = 0.025

# ============================================================
# Salary / service income
# ============================================================

# Minimum monthly living expense deducted when the user supplies none
MINIMUM_LIVING_EXPENSE = 3266
MONTHS_PER_YEAR = 12

SALARY_CALCULATION_MODES = {
    'annual': 'Yearly net income against nisab',
    'monthly': 'Single month net income against nisab',
}
DEFAULT_SALARY_CALCULATION_MODE = 'annual'

# ============================================================
# Agricultural produce
# ============================================================

# Physical nisab for harvested produce (five wasq)
PRODUCE_NISAB_KG = 653

PRODUCE_WATERING_RATES = {
    'natural': 0.10,
    'paid_irrigation': 0.05,
}
DEFAULT_WATERING_METHOD = 'natural'

# ============================================================
# Net value categories (same formula, different labels)
# ============================================================

NET_VALUE_CATEGORIES = {
    'trade': 'Trade sector',
    'industry': 'Industrial sector',
    'agriculture_products': 'Other agricultural products',
}
DEFAULT_NET_VALUE_CATEGORY = 'trade'

# Result units; produce in kind is measured in kilograms
UNIT_CURRENCY = 'currency'
UNIT_KG = 'kg'

# ============================================================
# Livestock
# ============================================================

LIVESTOCK_SPECIES = ('camels', 'cattle', 'sheep_goats')

CAMEL_121_CHOICES = {
    '2_hiqqah': '2 hiqqah',
    '3_bint_labun': '3 bint labun',
}
DEFAULT_CAMEL_121_CHOICE = '2_hiqqah'

NO_ZAKAT_DUE_TEXT = 'No zakat due'
