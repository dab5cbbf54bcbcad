"""Domain constants for financial trees, comparisons and scaling."""

ROOT_CODE = "root"

ROOT_LABELS = {
    "de": "Gesamt",
    "fr": "Total",
    "it": "Totale",
    "en": "Total",
}

DEFAULT_LANGUAGE = "de"

SUPPORTED_LANGUAGES = ("de", "fr", "it", "en")

# Row code used by column-to-column comparisons.
COLUMN_ROW_CODE = "*"

DEFAULT_R_SQUARED_THRESHOLD = 0.7
SINGLE_ENTITY_R_SQUARED_THRESHOLD = 0.1
COEFFICIENT_OF_VARIATION_THRESHOLD = 0.01
MAX_OPTIMIZATION_ITERATIONS = 1000
MIN_ENTITY_COUNT_FOR_OPTIMIZATION = 3
MAX_COEFFICIENT_VALUE = 1_000_000
CONVERGENCE_TOLERANCE = 1e-12

# Scaling metric names starting with this prefix carry a formula.
CUSTOM_SCALING_PREFIX = "custom:"

# Entity ids of municipalities; other entities are cantons or the federation.
MUNICIPALITY_PREFIX = "gdn_"
INCOME_DIMENSIONS = (
    "einnahmen",
    "ertrag",
    "ord_einnahmen_funk",
    "einnahmen_funk",
)
EXPENSE_DIMENSIONS = (
    "ausgaben",
    "aufwand",
    "ord_ausgaben_funk",
    "ausgaben_funk",
)

CACHE_EXPIRY_SECONDS = 300


__all__ = [
    "ROOT_CODE",
    "ROOT_LABELS",
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "COLUMN_ROW_CODE",
    "DEFAULT_R_SQUARED_THRESHOLD",
    "SINGLE_ENTITY_R_SQUARED_THRESHOLD",
    "COEFFICIENT_OF_VARIATION_THRESHOLD",
    "MAX_OPTIMIZATION_ITERATIONS",
    "MIN_ENTITY_COUNT_FOR_OPTIMIZATION",
    "MAX_COEFFICIENT_VALUE",
    "CONVERGENCE_TOLERANCE",
    "CUSTOM_SCALING_PREFIX",
    "MUNICIPALITY_PREFIX",
    "INCOME_DIMENSIONS",
    "EXPENSE_DIMENSIONS",
    "CACHE_EXPIRY_SECONDS",
]
