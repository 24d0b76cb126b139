"""API routes for nisab resolution and zakat calculation."""
from flask import Blueprint, jsonify, request, current_app

from zakat_engine.services.nisab import NisabSettings, resolve_nisab, resolve_nisab_settings
from zakat_engine.services.calc import (
    calculate_salary_zakat,
    calculate_produce_zakat,
    calculate_net_value_zakat,
)
from zakat_engine.services.livestock import (
    resolve_livestock_due,
    cash_equivalent,
    required_price_keys,
)
from zakat_engine.services.aggregate import (
    LINE_ITEM_CATEGORIES,
    produce_in_currency,
    recalculate_line_items,
    combined_total,
)
from zakat_engine.services.mappers import map_quick_form, map_detailed_form
from zakat_engine.services.config import (
    get_default_nisab_method,
    get_default_silver_price,
    get_default_gold_price,
)
from zakat_engine.data.livestock import get_supported_species, is_valid_species, PRICE_KEYS
from zakat_engine.constants import (
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    DEFAULT_GOLD_PRICE_PER_GRAM,
    DEFAULT_SILVER_PRICE_PER_GRAM,
    NISAB_METHODS,
    ZAKAT_RATE,
    MINIMUM_LIVING_EXPENSE,
    SALARY_CALCULATION_MODES,
    PRODUCE_NISAB_KG,
    PRODUCE_WATERING_RATES,
    NET_VALUE_CATEGORIES,
    DEFAULT_NET_VALUE_CATEGORY,
    CAMEL_121_CHOICES,
)

api_bp = Blueprint('api', __name__)


def _get_body():
    """Return the JSON object body, or None if the body is not an object."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _parse_settings(body: dict):
    """Build NisabSettings from body['nisab'], filling host defaults.

    Returns:
        (settings, error_message)
    """
    nisab = body.get('nisab') or {}
    if not isinstance(nisab, dict):
        return None, 'nisab must be an object'

    method = nisab.get('method') or get_default_nisab_method()
    if not isinstance(method, str) or method.lower() not in NISAB_METHODS:
        return None, f"Invalid nisab method: {method}. Must be one of: {', '.join(NISAB_METHODS)}"

    silver_price = nisab.get('silver_price_per_gram')
    if silver_price is None:
        silver_price = get_default_silver_price()
    gold_price = nisab.get('gold_price_per_gram')
    if gold_price is None:
        gold_price = get_default_gold_price()

    return NisabSettings(
        method=method.lower(),
        silver_price_per_gram=silver_price,
        gold_price_per_gram=gold_price,
        override=nisab.get('override'),
    ), None


def _object_field(body: dict, name: str):
    value = body.get(name) or {}
    return value if isinstance(value, dict) else None


def _is_optional_bool(value) -> bool:
    return value is None or isinstance(value, bool)


@api_bp.route('/constants')
def constants():
    """Return rates, thresholds and enumerations used by the calculators."""
    return jsonify({
        'zakat_rate': ZAKAT_RATE,
        'nisab': {
            'methods': list(NISAB_METHODS),
            'default_method': get_default_nisab_method(),
            'gold_grams': NISAB_GOLD_GRAMS,
            'silver_grams': NISAB_SILVER_GRAMS,
            'default_gold_price_per_gram': DEFAULT_GOLD_PRICE_PER_GRAM,
            'default_silver_price_per_gram': DEFAULT_SILVER_PRICE_PER_GRAM,
        },
        'salary': {
            'minimum_living_expense': MINIMUM_LIVING_EXPENSE,
            'calculation_modes': SALARY_CALCULATION_MODES,
        },
        'produce': {
            'nisab_kg': PRODUCE_NISAB_KG,
            'watering_rates': PRODUCE_WATERING_RATES,
        },
        'net_value_categories': NET_VALUE_CATEGORIES,
        'livestock': {
            'species': get_supported_species(),
            'camel121_choices': CAMEL_121_CHOICES,
            'price_keys': PRICE_KEYS,
        },
    })


@api_bp.route('/nisab')
def nisab():
    """Resolve the nisab threshold.

    Query Parameters:
        method: silver or gold (default: host default, silver)
        silver_price: Silver price per gram
        gold_price: Gold price per gram
        override: Explicit nisab, replaces the metal-based value when > 0
    """
    method = request.args.get('method', get_default_nisab_method()).lower()
    if method not in NISAB_METHODS:
        return jsonify({'error': f'Invalid nisab method: {method}'}), 400

    silver_price = request.args.get('silver_price')
    if silver_price is None:
        silver_price = get_default_silver_price()
    gold_price = request.args.get('gold_price')
    if gold_price is None:
        gold_price = get_default_gold_price()

    return jsonify(resolve_nisab(
        method,
        silver_price_per_gram=silver_price,
        gold_price_per_gram=gold_price,
        override=request.args.get('override'),
    ))


@api_bp.route('/calculate/salary', methods=['POST'])
def calculate_salary():
    """Calculate zakat on salary income.

    {
        "nisab": {"method": "silver", "silver_price_per_gram": 12},
        "salary": {"monthly_income": 10000, "living_expense": 3266, "calculation_mode": "annual"}
    }
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    settings, error = _parse_settings(body)
    if error:
        return jsonify({'error': error}), 400

    salary = _object_field(body, 'salary')
    if salary is None:
        return jsonify({'error': 'salary must be an object'}), 400
    mode = salary.get('calculation_mode')
    if mode is not None and (not isinstance(mode, str) or mode not in SALARY_CALCULATION_MODES):
        return jsonify({'error': f"Invalid calculation mode: {mode}. Must be one of: {', '.join(SALARY_CALCULATION_MODES)}"}), 400

    result = calculate_salary_zakat(salary, settings)
    result['nisab_breakdown'] = resolve_nisab_settings(settings)
    return jsonify(result)


@api_bp.route('/calculate/produce', methods=['POST'])
def calculate_produce():
    """Calculate zakat on agricultural produce.

    {
        "produce": {"is_for_trade": false, "quantity_kg": 700, "watering_method": "natural",
                    "price_per_kg": 4.5}
    }

    Harvested produce is returned in kilograms; when price_per_kg is given
    the currency conversion is included under "in_currency".
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    settings, error = _parse_settings(body)
    if error:
        return jsonify({'error': error}), 400

    produce = _object_field(body, 'produce')
    if produce is None:
        return jsonify({'error': 'produce must be an object'}), 400
    if not _is_optional_bool(produce.get('is_for_trade')):
        return jsonify({'error': 'is_for_trade must be true or false'}), 400
    watering_method = produce.get('watering_method')
    if watering_method is not None and (not isinstance(watering_method, str) or watering_method not in PRODUCE_WATERING_RATES):
        return jsonify({'error': f"Invalid watering method: {watering_method}. Must be one of: {', '.join(PRODUCE_WATERING_RATES)}"}), 400

    result = calculate_produce_zakat(produce, settings)
    if produce.get('price_per_kg') is not None:
        result['in_currency'] = produce_in_currency(result, produce['price_per_kg'])
    return jsonify(result)


@api_bp.route('/calculate/net-value', methods=['POST'])
def calculate_net_value():
    """Calculate zakat for trade, industry or other agricultural products.

    {"category": "trade", "market_value": 50000, "operating_costs": 12000}
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    settings, error = _parse_settings(body)
    if error:
        return jsonify({'error': error}), 400

    category = body.get('category', DEFAULT_NET_VALUE_CATEGORY)
    if not isinstance(category, str) or category not in NET_VALUE_CATEGORIES:
        return jsonify({'error': f"Invalid category: {category}. Must be one of: {', '.join(NET_VALUE_CATEGORIES)}"}), 400

    result = calculate_net_value_zakat(
        body.get('market_value'),
        body.get('operating_costs'),
        settings,
        category=category,
    )
    return jsonify(result)


@api_bp.route('/calculate/quick', methods=['POST'])
def calculate_quick():
    """Quick calculation from typed cash, gold value and debt strings.

    {"cash": "12,000", "gold_value": "٥٠٠٠", "debt": "$1,500"}
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    settings, error = _parse_settings(body)
    if error:
        return jsonify({'error': error}), 400

    inputs = map_quick_form(body)
    result = calculate_net_value_zakat(inputs['market_value'], inputs['operating_costs'], settings)
    result['inputs'] = inputs
    return jsonify(result)


@api_bp.route('/livestock', methods=['POST'])
def livestock():
    """Resolve livestock zakat due in kind.

    {
        "species": "camels",
        "owned_count": 130,
        "camel121_choice": "2_hiqqah",
        "prices": {"camel_bint_labun": 1000, "camel_hiqqah": 1500}
    }

    cash_equivalent is null when a required price is missing.
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    species = body.get('species')
    if not isinstance(species, str) or not is_valid_species(species):
        valid_species = [s['id'] for s in get_supported_species()]
        return jsonify({'error': f"Invalid species: {species}. Must be one of: {', '.join(valid_species)}"}), 400

    choice = body.get('camel121_choice')
    if choice is not None and (not isinstance(choice, str) or choice not in CAMEL_121_CHOICES):
        return jsonify({'error': f"Invalid camel121_choice: {choice}. Must be one of: {', '.join(CAMEL_121_CHOICES)}"}), 400

    prices = body.get('prices')
    if prices is not None and not isinstance(prices, dict):
        return jsonify({'error': 'prices must be an object'}), 400

    result = resolve_livestock_due(species, body.get('owned_count'), camel121_choice=choice)
    current_app.logger.debug(f"Livestock {species} {body.get('owned_count')}: {result.due_text}")

    response = result.to_dict()
    response['species'] = species
    response['required_price_keys'] = required_price_keys(result.due_items)
    if prices is not None:
        response['cash_equivalent'] = cash_equivalent(result.due_items, prices)
    return jsonify(response)


def _combined_response(line_items: list, settings: NisabSettings):
    items = recalculate_line_items(line_items, settings)
    return jsonify({
        'settings': settings.to_dict(),
        'nisab_breakdown': resolve_nisab_settings(settings),
        'line_items': items,
        'combined_total': combined_total(items),
    })


@api_bp.route('/calculate/combined', methods=['POST'])
def calculate_combined():
    """Recalculate stored line items against the given nisab settings and sum them.

    {
        "nisab": {"method": "gold", "gold_price_per_gram": 700},
        "line_items": [
            {"id": "a1", "category": "salary", "inputs": {"monthly_income": 12000}},
            {"id": "b2", "category": "trade", "inputs": {"market_value": 90000, "operating_costs": 5000}}
        ]
    }
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    settings, error = _parse_settings(body)
    if error:
        return jsonify({'error': error}), 400

    line_items = body.get('line_items', [])
    if not isinstance(line_items, list):
        return jsonify({'error': 'line_items must be a list'}), 400
    for item in line_items:
        if not isinstance(item, dict) or 'category' not in item:
            return jsonify({'error': 'Line items require a category'}), 400
        if item['category'] not in LINE_ITEM_CATEGORIES:
            return jsonify({'error': f"Invalid category: {item['category']}. Must be one of: {', '.join(LINE_ITEM_CATEGORIES)}"}), 400
        if not isinstance(item.get('inputs', {}), dict):
            return jsonify({'error': 'Line item inputs must be an object'}), 400
        if item['category'] == 'produce' and not _is_optional_bool((item.get('inputs') or {}).get('is_for_trade')):
            return jsonify({'error': 'is_for_trade must be true or false'}), 400

    return _combined_response(line_items, settings)


@api_bp.route('/calculate/detailed', methods=['POST'])
def calculate_detailed():
    """Calculate from the raw detailed form and its category toggles.

    {
        "form": {"global": {"method": "silver", "silver_price_per_gram": "12"},
                 "salary": {"monthly_income": "10000"},
                 "trade": {"market_value": "50000", "operating_costs": "2000"}},
        "toggles": {"salary": true, "trade": true}
    }
    """
    body = _get_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    form = _object_field(body, 'form')
    toggles = _object_field(body, 'toggles')
    if form is None or toggles is None:
        return jsonify({'error': 'form and toggles must be objects'}), 400

    mapped, validation_error = map_detailed_form(form, toggles)
    if validation_error:
        return jsonify({'error': validation_error}), 400

    return _combined_response(mapped['line_items'], mapped['settings'])
