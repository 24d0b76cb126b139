"""Livestock due schedules for zakat calculation.

Tier tables map an inclusive upper bound of owned animals to the animals
due. Each due entry is a ``(kind, age_class, count)`` tuple where ``kind`` is
``sheep``, ``camel_class`` or ``cattle_class`` and ``age_class`` is None for
sheep.
"""

SPECIES = {
    'camels': {'name': 'Camels'},
    'cattle': {'name': 'Cattle'},
    'sheep_goats': {'name': 'Sheep & goats'},
}

# Camel age classes, youngest first
CAMEL_CLASSES = {
    'bint_makhad': {'label': 'bint makhad', 'age_years': 1},
    'bint_labun': {'label': 'bint labun', 'age_years': 2},
    'hiqqah': {'label': 'hiqqah', 'age_years': 3},
    'jadhaah': {'label': 'jadhaah', 'age_years': 4},
}

CATTLE_CLASSES = {
    'tabi': {'label': 'tabi', 'age_years': 2},
    'musinnah': {'label': 'musinnah', 'age_years': 3},
}

SHEEP_LABEL = 'sheep'

SHEEP_GOAT_TIERS = [
    (39, ()),
    (120, (('sheep', None, 1),)),
    (200, (('sheep', None, 2),)),
    (399, (('sheep', None, 3),)),
]
# From 400 head onwards one sheep is due per full hundred
SHEEP_GOAT_PER_HUNDRED_FROM = 400

CATTLE_TIERS = [
    (29, ()),
    (39, (('cattle_class', 'tabi', 1),)),
    (59, (('cattle_class', 'musinnah', 1),)),
]

CAMEL_TIERS = [
    (4, ()),
    (9, (('sheep', None, 1),)),
    (14, (('sheep', None, 2),)),
    (19, (('sheep', None, 3),)),
    (24, (('sheep', None, 4),)),
    (35, (('camel_class', 'bint_makhad', 1),)),
    (45, (('camel_class', 'bint_labun', 1),)),
    (60, (('camel_class', 'hiqqah', 1),)),
    (75, (('camel_class', 'jadhaah', 1),)),
    (90, (('camel_class', 'bint_labun', 2),)),
    (120, (('camel_class', 'hiqqah', 2),)),
]

# 121-129 camels: both schedules are valid, the owner picks one
CAMEL_CHOICE_RANGE = (121, 129)
CAMEL_CHOICE_SCHEDULES = {
    '2_hiqqah': (('camel_class', 'hiqqah', 2),),
    '3_bint_labun': (('camel_class', 'bint_labun', 3),),
}

# Above the tables the herd is covered by whole units of two age classes
UNIT_SEARCH_RULES = {
    'camels': {
        'kind': 'camel_class',
        'small_class': 'bint_labun',
        'small_unit': 40,
        'large_class': 'hiqqah',
        'large_unit': 50,
        'floor': 130,
        'fallback': (2, 1),
    },
    'cattle': {
        'kind': 'cattle_class',
        'small_class': 'tabi',
        'small_unit': 30,
        'large_class': 'musinnah',
        'large_unit': 40,
        'floor': 60,
        'fallback': (2, 0),
    },
}

# Canonical price keys, in the order a form should ask for them
PRICE_KEYS = [
    'sheep',
    'camel_bint_makhad',
    'camel_bint_labun',
    'camel_hiqqah',
    'camel_jadhaah',
    'cattle_tabi',
    'cattle_musinnah',
]


def is_valid_species(species: str) -> bool:
    """Check if a livestock species ID is valid."""
    return species in SPECIES


def get_supported_species() -> list[dict]:
    """Get list of livestock species for UI dropdowns."""
    return [
        {'id': species_id, 'name': info['name']}
        for species_id, info in SPECIES.items()
    ]


def get_class_label(kind: str, age_class: str | None) -> str:
    """Human-readable label for a due animal class."""
    if kind == 'camel_class':
        return CAMEL_CLASSES[age_class]['label']
    if kind == 'cattle_class':
        return CATTLE_CLASSES[age_class]['label']
    return SHEEP_LABEL
