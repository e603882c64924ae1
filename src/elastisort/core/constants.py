"""
Constants for sort clause composition.

This module defines:
- Reserved sort target keys
- Order strings
- Option keys used in sort documents
- Known sort modes, script sort types and distance computation modes
"""

# Reserved sort targets
SCORE_KEY = "_score"
DOC_KEY = "_doc"
GEO_DISTANCE_KEY = "_geo_distance"
SCRIPT_KEY = "_script"

RESERVED_KEYS = frozenset({SCORE_KEY, DOC_KEY, GEO_DISTANCE_KEY, SCRIPT_KEY})

# Order values
ORDER_ASC = "asc"
ORDER_DESC = "desc"

# Missing value placeholders
MISSING_LAST = "_last"
MISSING_FIRST = "_first"

# Option keys
ORDER = "order"
MISSING = "missing"
MODE = "mode"
UNMAPPED_TYPE = "unmapped_type"
NUMERIC_TYPE = "numeric_type"
FORMAT = "format"
NESTED = "nested"
NESTED_FILTER = "nested_filter"
NESTED_PATH = "nested_path"
DISTANCE_TYPE = "distance_type"
UNIT = "unit"
IGNORE_UNMAPPED = "ignore_unmapped"
TYPE = "type"
SCRIPT = "script"
PATH = "path"
FILTER = "filter"
MAX_CHILDREN = "max_children"

# Known values; builders pass others through unchanged
SORT_MODES = frozenset({"min", "max", "sum", "avg", "median"})
SCRIPT_SORT_TYPES = frozenset({"number", "string", "version"})
DISTANCE_TYPES = frozenset({"arc", "plane"})

# Search request/response keys
SORT = "sort"
TRACK_SCORES = "track_scores"
