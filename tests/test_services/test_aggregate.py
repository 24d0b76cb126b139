"""Tests for combining line items."""
import logging

import pytest

from zakat_engine.services.aggregate import (
    combined_total,
    produce_in_currency,
    calculate_line_item,
    recalculate_line_items,
)
from zakat_engine.services.calc import calculate_produce_zakat
from zakat_engine.services.nisab import NisabSettings
from zakat_engine.constants import UNIT_CURRENCY, UNIT_KG


def make_item(total_zakat, unit=UNIT_CURRENCY):
    return {'category': 'trade', 'result': {'total_zakat': total_zakat, 'unit': unit}}


class TestCombinedTotal:
    """Tests for combined_total function."""

    def test_sums_line_items(self):
        """Totals add up across items."""
        assert combined_total([make_item(100), make_item(250.5), make_item(0)]) == pytest.approx(350.5)

    def test_empty_is_zero(self):
        """No line items means zero."""
        total = combined_total([])

        assert total == 0
        assert isinstance(total, float)

    def test_mixed_units_warns(self, caplog):
        """Summing kilograms with currency is logged."""
        with caplog.at_level(logging.WARNING, logger='zakat_engine.services.aggregate'):
            total = combined_total([make_item(100), make_item(70, UNIT_KG)])

        assert total == 170
        assert 'mixed units' in caplog.text

    def test_same_units_do_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger='zakat_engine.services.aggregate'):
            combined_total([make_item(1), make_item(2)])

        assert caplog.text == ''


class TestProduceInCurrency:
    """Tests for produce_in_currency function."""

    def test_converts_kg_result(self):
        """700 kg naturally watered at 3/kg: 70 kg due -> 210."""
        result = calculate_produce_zakat({'quantity_kg': 700, 'watering_method': 'natural'})

        converted = produce_in_currency(result, 3)

        assert converted['unit'] == UNIT_CURRENCY
        assert converted['nisab'] == pytest.approx(1959)
        assert converted['total_wealth'] == pytest.approx(2100)
        assert converted['total_zakat'] == pytest.approx(210)
        assert converted['breakdown']['produce']['zakat_amount'] == pytest.approx(210)
        assert converted['has_zakat_due'] is True

    def test_does_not_modify_input(self):
        result = calculate_produce_zakat({'quantity_kg': 700})

        produce_in_currency(result, 3)

        assert result['unit'] == UNIT_KG
        assert result['total_zakat'] == pytest.approx(70)

    @pytest.mark.parametrize('price', [None, 0, -1, 'abc'])
    def test_no_price_returns_result_unchanged(self, price):
        result = calculate_produce_zakat({'quantity_kg': 700})

        assert produce_in_currency(result, price) is result

    def test_currency_result_unchanged(self, silver_settings):
        """Traded produce is already monetary."""
        result = calculate_produce_zakat({'is_for_trade': True, 'market_value': 10000}, silver_settings)

        assert produce_in_currency(result, 5) is result


class TestLineItems:
    """Tests for calculate_line_item and recalculate_line_items."""

    def test_salary_item(self, silver_settings):
        result = calculate_line_item('salary', {'monthly_income': 10000}, silver_settings)

        assert result['total_zakat'] == pytest.approx(2020.2)

    def test_produce_item_with_price_is_currency(self):
        result = calculate_line_item('produce', {'quantity_kg': 700, 'price_per_kg': 2})

        assert result['unit'] == UNIT_CURRENCY
        assert result['total_zakat'] == pytest.approx(140)

    def test_produce_item_without_price_is_kg(self):
        result = calculate_line_item('produce', {'quantity_kg': 700})

        assert result['unit'] == UNIT_KG

    @pytest.mark.parametrize('category', ['trade', 'industry', 'agriculture_products'])
    def test_net_value_items(self, category, silver_settings):
        result = calculate_line_item(category, {'market_value': 20000, 'operating_costs': 5000}, silver_settings)

        assert result['total_zakat'] == pytest.approx(375)
        assert category in result['breakdown']

    def test_unknown_category_raises(self):
        with pytest.raises(ValueError):
            calculate_line_item('livestock', {})

    def test_recalculate_against_new_settings(self):
        """Changing nisab settings recomputes every item."""
        items = [
            {'id': 'a', 'category': 'trade', 'inputs': {'market_value': 10000, 'operating_costs': 0}},
            {'id': 'b', 'category': 'salary', 'inputs': {'monthly_income': 10000}},
        ]

        silver = recalculate_line_items(items, NisabSettings(method='silver', silver_price_per_gram=12))
        gold = recalculate_line_items(items, NisabSettings(method='gold', gold_price_per_gram=700))

        assert [item['result']['has_zakat_due'] for item in silver] == [True, True]
        assert [item['result']['has_zakat_due'] for item in gold] == [False, True]
        assert silver[0]['id'] == 'a'
        assert 'result' not in items[0]

    def test_combined_after_recalculate(self, silver_settings):
        items = recalculate_line_items([
            {'category': 'trade', 'inputs': {'market_value': 50000, 'operating_costs': 10000}},
            {'category': 'industry', 'inputs': {'market_value': 20000, 'operating_costs': 5000}},
        ], silver_settings)

        assert combined_total(items) == pytest.approx(1375)
