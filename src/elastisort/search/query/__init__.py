"""
Sort clause builders, their collaborators and the sort list assembler.
"""

from .base import SearchSource
from .filters import Query, RawQuery, TermQuery, TermsQuery
from .geo import GeoPoint
from .results import SearchHit, SearchResults
from .script import Script
from .sorting import (
    DocSort,
    FieldSort,
    GeoDistanceSort,
    NestedSort,
    ScoreSort,
    ScriptSort,
    Sorter,
    SortInfo,
    parse_sort,
)

__all__ = [
    "Sorter",
    "FieldSort",
    "SortInfo",
    "ScoreSort",
    "DocSort",
    "GeoDistanceSort",
    "ScriptSort",
    "NestedSort",
    "parse_sort",
    "Query",
    "TermQuery",
    "TermsQuery",
    "RawQuery",
    "Script",
    "GeoPoint",
    "SearchSource",
    "SearchHit",
    "SearchResults",
]
