"""
elastisort - Sort clause composition for search engine requests

This package provides polymorphic builders that describe how search results
are ordered and serialize them into canonical sort documents. It includes:

- Field, score, doc, geo distance and script sort builders
- Nested document scoping, recursively composable
- Assembly of the request's sort array and decoding of per-hit sort values
- JSON schema validation of sort documents
- Canonical JSON serialization with lexicographically ordered keys
"""

__version__ = "0.1.0"
__author__ = "elastisort Team"
__license__ = "See LICENSE file"

# Version compatibility check
import sys

if sys.version_info < (3, 12):
    raise RuntimeError("elastisort requires Python 3.12 or higher")

# Import commonly used components for easier access
from .core.exceptions import EncodingError, QueryError, ValidationError
from .core.serialization import dumps
from .search.query import (
    FieldSort,
    GeoDistanceSort,
    NestedSort,
    ScoreSort,
    Script,
    ScriptSort,
    SearchSource,
    SortInfo,
    TermQuery,
    parse_sort,
)

__all__ = [
    "FieldSort",
    "SortInfo",
    "ScoreSort",
    "GeoDistanceSort",
    "ScriptSort",
    "NestedSort",
    "Script",
    "TermQuery",
    "SearchSource",
    "parse_sort",
    "dumps",
    "QueryError",
    "EncodingError",
    "ValidationError",
]
