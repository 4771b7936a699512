"""Core constants: category rules, display defaults and cache key structure.

Single source of truth for literal values shared by the validator, the
tree builder, the compatibility adapter and the cache layer.
"""

import re

# Category field limits
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_SUBCATEGORIES_PER_PARENT = 50
# Fraction of MAX_SUBCATEGORIES_PER_PARENT at which a soft warning is emitted
SUBCATEGORY_WARNING_RATIO = 0.8

# Display defaults
DEFAULT_COLOR = "#6b7280"
DEFAULT_ICON = "📂"
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Legacy subject value for audio without a category
UNCATEGORIZED_LABEL = "未分类"

# Historical subject spellings mapped to the canonical category name
SUBJECT_ALIASES: dict[str, str] = {
    "心血管科": "心血管",
    "心内科": "心血管",
    "神经内科": "神经科",
    "脑科": "神经科",
    "肿瘤内科": "肿瘤科",
    "癌症科": "肿瘤科",
}

# Cache names (also used as key prefixes)
CACHE_PREFIX_LIST = "categories"
CACHE_PREFIX_TREE = "tree"
CACHE_PREFIX_STATS = "stats"
CACHE_PREFIX_SINGLE = "category"

# Delimiters for composite keys: prefix:key:value|key:value
CACHE_KEY_SEP = ":"
CACHE_PARAM_SEP = "|"

# Fraction of capacity above which a cache is reported as near full
CACHE_UTILIZATION_WARNING = 0.9

# Search results cap
SEARCH_RESULT_LIMIT = 50
