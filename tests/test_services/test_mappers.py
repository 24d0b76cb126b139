"""Tests for form mapping."""
import pytest

from zakat_engine.services.mappers import (
    safe_num,
    safe_optional_positive_num,
    parse_currency_input,
    normalize_digits,
    map_nisab_settings,
    map_salary_form,
    map_produce_form,
    map_net_value_form,
    map_livestock_form,
    map_quick_form,
    map_detailed_form,
    NO_CATEGORY_ERROR,
    MISSING_INCOME_ERROR,
)
from zakat_engine.services.nisab import NisabSettings
from zakat_engine.services.calc import calculate_salary_zakat


class TestSafeNum:
    """Tests for safe_num and safe_optional_positive_num."""

    @pytest.mark.parametrize('raw, expected', [
        ('1500', 1500.0),
        ('1,234.5', 1234.5),
        ('  42 ', 42.0),
        ('١٢٣', 123.0),
        ('۴۵۶', 456.0),
        ('٣٫٥', 3.5),
        ('١٬٠٠٠', 1000.0),
        (250, 250.0),
    ])
    def test_valid_values(self, raw, expected):
        assert safe_num(raw) == expected

    @pytest.mark.parametrize('raw', ['', 'abc', '-5', None, 'nan', 'inf', -3])
    def test_invalid_values_are_zero(self, raw):
        assert safe_num(raw) == 0

    @pytest.mark.parametrize('raw', ['', '   ', '0', '-1', 'abc', None])
    def test_optional_empty_is_none(self, raw):
        assert safe_optional_positive_num(raw) is None

    def test_optional_positive(self):
        assert safe_optional_positive_num('٣٠٠٠') == 3000.0

    def test_normalize_digits(self):
        assert normalize_digits('٠١٢٣٤٥٦٧٨٩') == '0123456789'
        assert normalize_digits('') == ''


class TestParseCurrencyInput:
    """Tests for parse_currency_input function."""

    @pytest.mark.parametrize('raw, expected', [
        ('$1,250.50', 1250.5),
        ('€ 99', 99.0),
        ('١٬٢٥٠ SAR', 1250.0),
        ('2500 USD', 2500.0),
        ('-500', 500.0),
        ('12.3456', 12.35),
        ('.5', 0.5),
        (750, 750.0),
    ])
    def test_parses_amounts(self, raw, expected):
        assert parse_currency_input(raw) == pytest.approx(expected)

    @pytest.mark.parametrize('raw', [None, '', '   ', 'abc', '$'])
    def test_invalid_is_zero(self, raw):
        assert parse_currency_input(raw) == 0


class TestCategoryMappers:
    """Tests for the per-category form mappers."""

    def test_nisab_settings(self):
        settings = map_nisab_settings({
            'method': 'gold',
            'gold_price_per_gram': '٧٠٠',
            'silver_price_per_gram': '',
            'override': '0',
        })

        assert settings == NisabSettings(method='gold', gold_price_per_gram=700.0)

    def test_nisab_settings_unknown_method(self):
        assert map_nisab_settings({'method': 'bronze'}).method == 'silver'

    def test_salary_blank_expense_is_none(self):
        """Blank living expense means the calculator default applies."""
        assert map_salary_form({'monthly_income': '10,000', 'living_expense': ''}) == {
            'monthly_income': 10000.0,
            'living_expense': None,
            'calculation_mode': 'annual',
        }

    @pytest.mark.parametrize('raw, expected', [('0', 0.0), ('٠', 0.0), ('1,500', 1500.0), ('', None), ('  ', None)])
    def test_salary_living_expense(self, raw, expected):
        """A typed 0 is kept; only a blank field means the default."""
        mapped = map_salary_form({'monthly_income': '1000', 'living_expense': raw})

        assert mapped['living_expense'] == expected

    def test_salary_zero_expense_reaches_calculator(self):
        """1000/month with 0 expense is 12000 a year."""
        result = calculate_salary_zakat(map_salary_form({'monthly_income': '1000', 'living_expense': '0'}))

        assert result['total_wealth'] == 12000

    def test_produce(self):
        mapped = map_produce_form({'quantity_kg': '700', 'watering_method': 'paid_irrigation', 'price_per_kg': '2.5'})

        assert mapped == {
            'is_for_trade': False,
            'quantity_kg': 700.0,
            'market_value': 0.0,
            'watering_method': 'paid_irrigation',
            'price_per_kg': 2.5,
        }

    def test_produce_defaults(self):
        mapped = map_produce_form({})

        assert mapped['watering_method'] == 'natural'
        assert mapped['price_per_kg'] is None

    def test_net_value(self):
        assert map_net_value_form({'market_value': '50,000', 'operating_costs': 'x'}) == {
            'market_value': 50000.0,
            'operating_costs': 0.0,
        }

    def test_livestock_drops_invalid_prices(self):
        mapped = map_livestock_form({
            'species': 'camels',
            'owned_count': '130.9',
            'prices': {'camel_hiqqah': '1500', 'camel_bint_labun': '', 'horse': '10', 'sheep': '-1'},
        })

        assert mapped == {
            'species': 'camels',
            'owned_count': 130,
            'camel121_choice': '2_hiqqah',
            'prices': {'camel_hiqqah': 1500.0},
        }

    def test_quick_form(self):
        """Cash plus gold value less debt."""
        assert map_quick_form({'cash': '$5,000', 'gold_value': '3000 USD', 'debt': '1,000'}) == {
            'market_value': 8000.0,
            'operating_costs': 1000.0,
        }


class TestMapDetailedForm:
    """Tests for map_detailed_form function."""

    def test_no_category_enabled(self):
        assert map_detailed_form({}, {}) == (None, NO_CATEGORY_ERROR)

    def test_salary_requires_income(self):
        mapped, error = map_detailed_form({'salary': {'monthly_income': ''}}, {'salary': True})

        assert mapped is None
        assert error == MISSING_INCOME_ERROR

    def test_disabled_salary_not_validated(self):
        mapped, error = map_detailed_form(
            {'salary': {'monthly_income': ''}, 'trade': {'market_value': '100'}},
            {'salary': False, 'trade': True},
        )

        assert error is None
        assert [item['category'] for item in mapped['line_items']] == ['trade']

    def test_line_items_in_category_order(self):
        mapped, error = map_detailed_form(
            {
                'global': {'method': 'gold', 'gold_price_per_gram': '700'},
                'trade': {'market_value': '50000', 'operating_costs': '10000'},
                'produce': {'quantity_kg': '700'},
            },
            {'trade': True, 'produce': True},
        )

        assert error is None
        assert mapped['settings'] == NisabSettings(method='gold', gold_price_per_gram=700.0)
        assert [item['category'] for item in mapped['line_items']] == ['produce', 'trade']
        assert mapped['line_items'][1]['inputs'] == {'market_value': 50000.0, 'operating_costs': 10000.0}
