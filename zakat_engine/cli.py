"""Flask CLI commands for running zakat calculations from a terminal."""
import functools

import click
from flask.cli import with_appcontext

from zakat_engine.constants import (
    NISAB_METHODS,
    SALARY_CALCULATION_MODES,
    PRODUCE_WATERING_RATES,
    NET_VALUE_CATEGORIES,
    DEFAULT_NET_VALUE_CATEGORY,
    CAMEL_121_CHOICES,
    LIVESTOCK_SPECIES,
    UNIT_KG,
)
from zakat_engine.data.livestock import PRICE_KEYS
from zakat_engine.services.nisab import NisabSettings, resolve_nisab_settings, format_compact_value
from zakat_engine.services.calc import (
    calculate_salary_zakat,
    calculate_produce_zakat,
    calculate_net_value_zakat,
)
from zakat_engine.services.livestock import (
    resolve_livestock_due,
    cash_equivalent,
    format_due_items,
)
from zakat_engine.services.config import (
    get_default_nisab_method,
    get_default_silver_price,
    get_default_gold_price,
)


def nisab_options(command):
    """Add --method/--silver-price/--gold-price/--override and pass NisabSettings."""
    @click.option('--method', type=click.Choice(NISAB_METHODS), default=None,
                  help='Nisab basis (default: ZAKAT_DEFAULT_NISAB_METHOD or silver)')
    @click.option('--silver-price', type=float, default=None, help='Silver price per gram')
    @click.option('--gold-price', type=float, default=None, help='Gold price per gram')
    @click.option('--override', type=float, default=None, help='Explicit nisab value')
    @functools.wraps(command)
    def wrapper(method, silver_price, gold_price, override, **kwargs):
        settings = NisabSettings(
            method=method or get_default_nisab_method(),
            silver_price_per_gram=silver_price if silver_price is not None else get_default_silver_price(),
            gold_price_per_gram=gold_price if gold_price is not None else get_default_gold_price(),
            override=override,
        )
        return command(settings=settings, **kwargs)
    return wrapper


def echo_result(result: dict):
    unit = ' kg' if result['unit'] == UNIT_KG else ''
    click.echo(f"Nisab: {format_compact_value(result['nisab'])}{unit}")
    click.echo(f"Total wealth: {format_compact_value(result['total_wealth'])}{unit}")
    if result['has_zakat_due']:
        click.echo(f"Zakat due: {format_compact_value(result['total_zakat'])}{unit}")
    else:
        click.echo('No zakat due')


@click.command('nisab')
@nisab_options
@with_appcontext
def nisab_command(settings):
    """Show the nisab threshold for the given settings."""
    breakdown = resolve_nisab_settings(settings)
    click.echo(breakdown['detail_summary'])


@click.command('salary')
@click.argument('monthly_income', type=float)
@click.option('--expense', type=float, default=None, help='Monthly living expense (default: 3266)')
@click.option('--mode', type=click.Choice(list(SALARY_CALCULATION_MODES)), default='annual')
@nisab_options
@with_appcontext
def salary_command(monthly_income, expense, mode, settings):
    """Calculate zakat on a monthly salary."""
    result = calculate_salary_zakat({
        'monthly_income': monthly_income,
        'living_expense': expense,
        'calculation_mode': mode,
    }, settings)
    echo_result(result)


@click.command('produce')
@click.option('--kg', 'quantity_kg', type=float, default=0, help='Harvested quantity in kg')
@click.option('--watering', type=click.Choice(list(PRODUCE_WATERING_RATES)), default='natural')
@click.option('--trade', 'market_value', type=float, default=None,
              help='Market value; treats the produce as trade goods')
@nisab_options
@with_appcontext
def produce_command(quantity_kg, watering, market_value, settings):
    """Calculate zakat on harvested or traded produce."""
    result = calculate_produce_zakat({
        'is_for_trade': market_value is not None,
        'quantity_kg': quantity_kg,
        'market_value': market_value,
        'watering_method': watering,
    }, settings)
    echo_result(result)


@click.command('net-value')
@click.argument('market_value', type=float)
@click.argument('operating_costs', type=float, default=0)
@click.option('--category', type=click.Choice(list(NET_VALUE_CATEGORIES)), default=DEFAULT_NET_VALUE_CATEGORY)
@nisab_options
@with_appcontext
def net_value_command(market_value, operating_costs, category, settings):
    """Calculate zakat on trade, industry or other agricultural products."""
    result = calculate_net_value_zakat(market_value, operating_costs, settings, category=category)
    echo_result(result)


def _parse_prices(ctx, param, values):
    prices = {}
    for value in values:
        key, sep, amount = value.partition('=')
        if not sep or key not in PRICE_KEYS:
            raise click.BadParameter(f"expected KEY=PRICE with KEY one of: {', '.join(PRICE_KEYS)}")
        try:
            prices[key] = float(amount)
        except ValueError:
            raise click.BadParameter(f'invalid price for {key}: {amount}')
    return prices


@click.command('livestock')
@click.argument('species', type=click.Choice(LIVESTOCK_SPECIES))
@click.argument('owned_count', type=int)
@click.option('--choice', type=click.Choice(list(CAMEL_121_CHOICES)), default=None,
              help='Schedule for 121-129 camels (default: 2_hiqqah)')
@click.option('--price', 'prices', multiple=True, callback=_parse_prices,
              help='Price per animal as KEY=PRICE, e.g. camel_hiqqah=1500')
@with_appcontext
def livestock_command(species, owned_count, choice, prices):
    """Show the animals due on a herd."""
    result = resolve_livestock_due(species, owned_count, camel121_choice=choice)
    click.echo(f'Due: {result.due_text}')

    if result.camel121_choice_options:
        options = result.camel121_choice_options
        click.echo(f"Alternatives: {format_due_items(options.first)} or {format_due_items(options.second)}")

    if prices:
        total = cash_equivalent(result.due_items, prices)
        if total is None:
            click.echo('Cash equivalent: missing prices')
        else:
            click.echo(f'Cash equivalent: {format_compact_value(total)}')


def register_cli(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(nisab_command)
    app.cli.add_command(salary_command)
    app.cli.add_command(produce_command)
    app.cli.add_command(net_value_command)
    app.cli.add_command(livestock_command)
