"""Livestock zakat: due-item resolution and cash equivalence.

Small herds are resolved from the tier tables in data/livestock.py. Larger
camel (>= 130) and cattle (>= 60) herds are covered by whole units of two age
classes (40/50 camels, 30/40 cattle), picking the combination that leaves the
smallest remainder, then the fewest animals, then the most of the older class.
"""
import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Union

from zakat_engine.constants import (
    DEFAULT_CAMEL_121_CHOICE,
    NO_ZAKAT_DUE_TEXT,
)
from zakat_engine.data.livestock import (
    SHEEP_GOAT_TIERS,
    SHEEP_GOAT_PER_HUNDRED_FROM,
    CATTLE_TIERS,
    CAMEL_TIERS,
    CAMEL_CHOICE_RANGE,
    CAMEL_CHOICE_SCHEDULES,
    UNIT_SEARCH_RULES,
    get_class_label,
    is_valid_species,
)
from .sanitize import to_whole_count

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheepDue:
    """Sheep owed (sheep/goat herds and camel herds under 25)."""
    count: int
    kind: str = field(default='sheep', init=False)

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'count': self.count}


@dataclass(frozen=True)
class CamelDue:
    """Camels of one age class owed."""
    age_class: str      # bint_makhad, bint_labun, hiqqah, jadhaah
    count: int
    kind: str = field(default='camel_class', init=False)

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'class': self.age_class, 'count': self.count}


@dataclass(frozen=True)
class CattleDue:
    """Cattle of one age class owed."""
    age_class: str      # tabi, musinnah
    count: int
    kind: str = field(default='cattle_class', init=False)

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'class': self.age_class, 'count': self.count}


DueItem = Union[SheepDue, CamelDue, CattleDue]


@dataclass(frozen=True)
class Camel121Options:
    """Both valid schedules for 121-129 camels."""
    first: tuple     # 2 hiqqah
    second: tuple    # 3 bint labun

    def to_dict(self) -> dict:
        return {
            'first': [item.to_dict() for item in self.first],
            'second': [item.to_dict() for item in self.second],
        }


@dataclass(frozen=True)
class LivestockZakatResult:
    due_items: tuple
    due_text: str
    is_due: bool
    # Only set for 121-129 camels
    camel121_choice_options: Optional[Camel121Options] = None

    def to_dict(self) -> dict:
        data = {
            'due_items': [item.to_dict() for item in self.due_items],
            'due_text': self.due_text,
            'is_due': self.is_due,
        }
        if self.camel121_choice_options is not None:
            data['camel121_choice_options'] = self.camel121_choice_options.to_dict()
        return data


@dataclass(frozen=True)
class UnitCombination:
    """A covering of the herd by small-class and large-class units."""
    small_count: int
    large_count: int
    covered: int
    remainder: int

    @property
    def animal_count(self) -> int:
        return self.small_count + self.large_count

    def rank(self) -> tuple:
        # Lower is better
        return (self.remainder, self.animal_count, -self.large_count)


def make_due_item(kind: str, age_class: Optional[str], count: int) -> DueItem:
    if kind == 'camel_class':
        return CamelDue(age_class, count)
    if kind == 'cattle_class':
        return CattleDue(age_class, count)
    return SheepDue(count)


def price_key_of(item: DueItem) -> str:
    """Canonical price key: 'sheep', 'camel_<class>' or 'cattle_<class>'."""
    if item.kind == 'camel_class':
        return f'camel_{item.age_class}'
    if item.kind == 'cattle_class':
        return f'cattle_{item.age_class}'
    return 'sheep'


def due_item_label(item: DueItem) -> str:
    return get_class_label(item.kind, getattr(item, 'age_class', None))


def format_due_items(items) -> str:
    """Join due items as e.g. '2 bint labun + 1 hiqqah'."""
    return ' + '.join(f'{item.count} {due_item_label(item)}' for item in items)


def required_price_keys(due_items) -> list[str]:
    """Price keys needed to value the due items, de-duplicated, in order."""
    keys = []
    for item in due_items:
        key = price_key_of(item)
        if key not in keys:
            keys.append(key)
    return keys


def cash_equivalent(due_items, prices: dict) -> Optional[float]:
    """Cash value of the due animals, or None if any price is missing.

    Args:
        due_items: Due items from a livestock resolution
        prices: Mapping of price key -> price per animal

    Returns:
        Sum of count * price; 0 when nothing is due; None when a required
        price is absent, non-numeric, non-finite or not positive
    """
    total = 0.0
    for item in due_items:
        price = prices.get(price_key_of(item))
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        if not math.isfinite(price) or price <= 0:
            return None
        total += item.count * price
    return total


def find_unit_combination(owned: int, species: str) -> UnitCombination:
    """Search the (small, large) unit pairs that cover the herd.

    A pair qualifies when it covers at least the species floor and the
    uncovered remainder is smaller than one small unit. For a given number
    of large units only the largest small count can qualify, so the search
    is linear in the number of large units.
    """
    rule = UNIT_SEARCH_RULES[species]
    small_unit = rule['small_unit']
    large_unit = rule['large_unit']

    best = None
    for large_count in range(owned // large_unit + 1):
        remaining = owned - large_count * large_unit
        small_count, remainder = divmod(remaining, small_unit)
        covered = owned - remainder
        if covered < rule['floor']:
            continue
        candidate = UnitCombination(small_count, large_count, covered, remainder)
        if best is None or candidate.rank() < best.rank():
            best = candidate

    if best is not None:
        logger.debug(f"{species} {owned}: {best.small_count}x{small_unit} + {best.large_count}x{large_unit}")
        return best

    small_count, large_count = rule['fallback']
    covered = small_count * small_unit + large_count * large_unit
    logger.warning(f"No unit combination for {owned} {species}; using minimal tier")
    return UnitCombination(small_count, large_count, covered, max(0, owned - covered))


def _combination_items(combo: UnitCombination, species: str) -> list:
    rule = UNIT_SEARCH_RULES[species]
    items = []
    if combo.small_count > 0:
        items.append(make_due_item(rule['kind'], rule['small_class'], combo.small_count))
    if combo.large_count > 0:
        items.append(make_due_item(rule['kind'], rule['large_class'], combo.large_count))
    return items


def _from_schedule(schedule) -> tuple:
    return tuple(make_due_item(kind, age_class, count) for kind, age_class, count in schedule)


def _lookup_tier(tiers, owned: int):
    for upper_bound, schedule in tiers:
        if owned <= upper_bound:
            return _from_schedule(schedule)
    return None


def build_result(due_items, camel121_choice_options: Optional[Camel121Options] = None) -> LivestockZakatResult:
    due_items = tuple(due_items)
    if not due_items:
        return LivestockZakatResult(due_items=(), due_text=NO_ZAKAT_DUE_TEXT, is_due=False)
    return LivestockZakatResult(
        due_items=due_items,
        due_text=format_due_items(due_items),
        is_due=True,
        camel121_choice_options=camel121_choice_options,
    )


def _resolve_sheep_goats(owned: int) -> LivestockZakatResult:
    if owned >= SHEEP_GOAT_PER_HUNDRED_FROM:
        return build_result([SheepDue(owned // 100)])
    return build_result(_lookup_tier(SHEEP_GOAT_TIERS, owned))


def _resolve_cattle(owned: int) -> LivestockZakatResult:
    items = _lookup_tier(CATTLE_TIERS, owned)
    if items is None:
        items = _combination_items(find_unit_combination(owned, 'cattle'), 'cattle')
    return build_result(items)


def _resolve_camels(owned: int, camel121_choice: str) -> LivestockZakatResult:
    items = _lookup_tier(CAMEL_TIERS, owned)
    if items is not None:
        return build_result(items)

    low, high = CAMEL_CHOICE_RANGE
    if low <= owned <= high:
        first = _from_schedule(CAMEL_CHOICE_SCHEDULES['2_hiqqah'])
        second = _from_schedule(CAMEL_CHOICE_SCHEDULES['3_bint_labun'])
        selected = second if camel121_choice == '3_bint_labun' else first
        return build_result(selected, camel121_choice_options=Camel121Options(first, second))

    return build_result(_combination_items(find_unit_combination(owned, 'camels'), 'camels'))


@lru_cache(maxsize=1024)
def _resolve(species: str, owned: int, camel121_choice: str) -> LivestockZakatResult:
    if species == 'camels':
        return _resolve_camels(owned, camel121_choice)
    if species == 'cattle':
        return _resolve_cattle(owned)
    return _resolve_sheep_goats(owned)


def resolve_livestock_due(species: str, owned_count, camel121_choice: Optional[str] = None) -> LivestockZakatResult:
    """Resolve the animals due on a herd.

    Args:
        species: 'camels', 'cattle' or 'sheep_goats'
        owned_count: Number of animals owned; invalid or negative counts
            count as 0 and fractions are floored
        camel121_choice: '2_hiqqah' (default) or '3_bint_labun', only
            consulted for 121-129 camels

    Returns:
        LivestockZakatResult

    Raises:
        ValueError: If species is unknown
    """
    if not is_valid_species(species):
        raise ValueError(f"Unknown livestock species: {species}")
    choice = camel121_choice if camel121_choice == '3_bint_labun' else DEFAULT_CAMEL_121_CHOICE
    return _resolve(species, to_whole_count(owned_count), choice)
