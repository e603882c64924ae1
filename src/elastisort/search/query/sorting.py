"""
Sort clauses for search requests.

This module provides the builders that describe how matched documents are
ordered. Each builder encodes one sorting strategy:
- Field-based sorting (FieldSort, and the record-style SortInfo)
- Relevance score sorting (ScoreSort)
- Index order sorting (DocSort)
- Geographic distance sorting (GeoDistanceSort)
- Script-computed sorting (ScriptSort)

NestedSort is not a sort of its own. It scopes a field, geo or script sort to
the objects of a nested field and is attached under the "nested" key.

Every builder produces a plain dictionary through ``source()``. Key order in
that dictionary is irrelevant; ``core.serialization.dumps`` emits keys in
lexicographic order. Setters mutate the builder and return it so calls can be
chained:

    FieldSort("price").desc().sort_mode("avg").missing("_last")
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ...core import constants as c
from ...core.config import SortConfig, get_config
from ...core.exceptions import EncodingError, ValidationError
from .filters import Query, RawQuery
from .geo import GeoPoint
from .script import Script

logger = logging.getLogger(__name__)


def _order_value(ascending: bool) -> str:
    return c.ORDER_ASC if ascending else c.ORDER_DESC


def _parse_order(value: Any) -> bool:
    if value == c.ORDER_ASC:
        return True
    if value == c.ORDER_DESC:
        return False
    raise ValidationError(f"Invalid sort order: {value!r}")


class Sorter(ABC):
    """
    Contract shared by all sort clauses.

    Subclasses hold an ``ascending`` flag and implement ``source()``. The
    order setters live here because every sort kind accepts them.
    """

    ascending: bool = True

    def order(self, ascending: bool) -> "Sorter":
        self.ascending = ascending
        return self

    def asc(self) -> "Sorter":
        self.ascending = True
        return self

    def desc(self) -> "Sorter":
        self.ascending = False
        return self

    @abstractmethod
    def sort_key(self) -> str:
        """Top-level key this sort serializes under (field name or reserved target)."""

    @abstractmethod
    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        """
        Produce the sort clause document.

        Args:
            config: Settings to serialize with; the global default if omitted

        Raises:
            EncodingError: If an embedded collaborator cannot be encoded
        """


class NestedSort:
    """
    Nested document scoping for a sort.

    Restricts a sort to the objects under ``path``, optionally filtered, and
    may itself contain a deeper NestedSort for multi-level nested fields.

    Example:
        >>> NestedSort("offer").filter(TermQuery("offer.color", "blue")).source()
        {'path': 'offer', 'filter': {'term': {'offer.color': 'blue'}}}
    """

    def __init__(self, path: str):
        self.path = path
        self._filter: Optional[Query] = None
        self._nested_sort: Optional["NestedSort"] = None
        self._max_children: Optional[int] = None

    def filter(self, filter: Query) -> "NestedSort":
        self._filter = filter
        return self

    def nested_sort(self, nested_sort: "NestedSort") -> "NestedSort":
        self._nested_sort = nested_sort
        return self

    def max_children(self, max_children: int) -> "NestedSort":
        self._max_children = max_children
        return self

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        """
        Produce the nested sort document.

        The same document is used standalone and when embedded under a parent
        sort's "nested" key.

        Raises:
            EncodingError: If the filter cannot be encoded or the chain is
                deeper than the configured maximum
        """
        return self._source(1, (config or get_config()).max_nested_depth)

    def _source(self, level: int, limit: int) -> Dict[str, Any]:
        if level > limit:
            raise EncodingError(f"Nested sort deeper than {limit} levels at path {self.path!r}")

        document: Dict[str, Any] = {c.PATH: self.path}
        if self._filter is not None:
            document[c.FILTER] = self._filter.source()
        if self._nested_sort is not None:
            document[c.NESTED] = self._nested_sort._source(level + 1, limit)
        if self._max_children is not None:
            document[c.MAX_CHILDREN] = self._max_children
        return document

    @classmethod
    def from_source(cls, document: Any) -> "NestedSort":
        """
        Rebuild a NestedSort from its document.

        Raises:
            ValidationError: If the document is malformed
        """
        if not isinstance(document, dict) or c.PATH not in document:
            raise ValidationError(f"Nested sort needs a path: {document!r}")
        unknown = set(document) - {c.PATH, c.FILTER, c.NESTED, c.MAX_CHILDREN}
        if unknown:
            raise ValidationError(f"Unknown nested sort options: {sorted(unknown)}")

        nested = cls(document[c.PATH])
        if c.FILTER in document:
            nested.filter(RawQuery(document[c.FILTER]))
        if c.NESTED in document:
            nested.nested_sort(cls.from_source(document[c.NESTED]))
        if c.MAX_CHILDREN in document:
            nested.max_children(document[c.MAX_CHILDREN])
        return nested


class _NestedScopedSorter(Sorter):
    """Base for sorts that accept nested scoping (field, geo distance, script)."""

    def __init__(self):
        self.ascending = True
        self._sort_mode: Optional[str] = None
        self._nested_filter: Optional[Query] = None
        self._nested_path: Optional[str] = None
        self._nested_sort: Optional[NestedSort] = None

    def sort_mode(self, sort_mode: str) -> "_NestedScopedSorter":
        """Set how multi-valued fields are reduced: min, max, sum, avg or median."""
        self._sort_mode = sort_mode
        return self

    def nested_filter(self, nested_filter: Query) -> "_NestedScopedSorter":
        """Set the legacy nested filter. Prefer nested_sort()."""
        self._nested_filter = nested_filter
        return self

    def nested_path(self, nested_path: str) -> "_NestedScopedSorter":
        """Set the legacy nested path. Prefer nested_sort()."""
        self._nested_path = nested_path
        return self

    def nested_sort(self, nested_sort: NestedSort) -> "_NestedScopedSorter":
        self._nested_sort = nested_sort
        return self

    def _add_options(self, document: Dict[str, Any], config: Optional[SortConfig]) -> None:
        document[c.ORDER] = _order_value(self.ascending)
        if self._sort_mode is not None:
            document[c.MODE] = self._sort_mode
        if self._nested_filter is not None:
            document[c.NESTED_FILTER] = self._nested_filter.source()
        if self._nested_path is not None:
            document[c.NESTED_PATH] = self._nested_path
        if self._nested_sort is not None:
            document[c.NESTED] = self._nested_sort.source(config)
            if self._nested_filter is not None or self._nested_path is not None:
                logger.debug(
                    f"Sort on {self.sort_key()!r} carries both nested_path/nested_filter and nested"
                )

    def _read_options(self, options: Dict[str, Any]) -> None:
        if c.ORDER in options:
            self.ascending = _parse_order(options[c.ORDER])
        if c.MODE in options:
            self.sort_mode(options[c.MODE])
        if c.NESTED_FILTER in options:
            self.nested_filter(RawQuery(options[c.NESTED_FILTER]))
        if c.NESTED_PATH in options:
            self.nested_path(options[c.NESTED_PATH])
        if c.NESTED in options:
            self.nested_sort(NestedSort.from_source(options[c.NESTED]))


_SCOPED_OPTIONS = frozenset({c.ORDER, c.MODE, c.NESTED_FILTER, c.NESTED_PATH, c.NESTED})


class FieldSort(_NestedScopedSorter):
    """
    Sort by the value of a document field.

    Ascending by default. Documents without a value are placed according to
    ``missing`` ("_last", "_first", or a literal substitute value).

    Example:
        >>> FieldSort("grade").source()
        {'grade': {'order': 'asc'}}
    """

    OPTIONS = _SCOPED_OPTIONS | {c.MISSING, c.UNMAPPED_TYPE, c.NUMERIC_TYPE, c.FORMAT}

    def __init__(self, field_name: str):
        super().__init__()
        self.field_name = field_name
        self._missing: Any = None
        self._unmapped_type: Optional[str] = None
        self._numeric_type: Optional[str] = None
        self._format: Optional[str] = None

    def missing(self, missing: Any) -> "FieldSort":
        self._missing = missing
        return self

    def unmapped_type(self, unmapped_type: str) -> "FieldSort":
        """Type to assume for indices where the field is not mapped."""
        self._unmapped_type = unmapped_type
        return self

    def numeric_type(self, numeric_type: str) -> "FieldSort":
        self._numeric_type = numeric_type
        return self

    def format(self, format: str) -> "FieldSort":
        """Date format for sort values of date fields."""
        self._format = format
        return self

    def sort_key(self) -> str:
        return self.field_name

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self._missing is not None:
            options[c.MISSING] = self._missing
        if self._unmapped_type is not None:
            options[c.UNMAPPED_TYPE] = self._unmapped_type
        if self._numeric_type is not None:
            options[c.NUMERIC_TYPE] = self._numeric_type
        if self._format is not None:
            options[c.FORMAT] = self._format
        self._add_options(options, config)
        return {self.field_name: options}

    @classmethod
    def from_options(cls, field_name: str, options: Any) -> "FieldSort":
        sort = cls(field_name)
        if isinstance(options, str):
            sort.ascending = _parse_order(options)
            return sort
        if not isinstance(options, dict):
            raise ValidationError(f"Invalid options for field sort {field_name!r}: {options!r}")
        unknown = set(options) - cls.OPTIONS
        if unknown:
            raise ValidationError(f"Unknown field sort options: {sorted(unknown)}")

        sort._read_options(options)
        if c.MISSING in options:
            sort.missing(options[c.MISSING])
        if c.UNMAPPED_TYPE in options:
            sort.unmapped_type(options[c.UNMAPPED_TYPE])
        if c.NUMERIC_TYPE in options:
            sort.numeric_type(options[c.NUMERIC_TYPE])
        if c.FORMAT in options:
            sort.format(options[c.FORMAT])
        return sort


@dataclass
class SortInfo(Sorter):
    """
    Record-style field sort.

    Carries the same options as FieldSort except nested_sort, set directly
    as attributes instead of through chained setters. Serialization is
    delegated to FieldSort so both produce identical documents.

    Attributes:
        field (str): Field to sort by
        ascending (bool): Sort direction, ascending by default
        missing (Any): Placement or substitute for documents without the field
        sort_mode (Optional[str]): Reduction for multi-valued fields
        nested_filter (Optional[Query]): Legacy nested filter
        nested_path (Optional[str]): Legacy nested path
        unmapped_type (Optional[str]): Type to assume where the field is unmapped
    """

    field: str
    ascending: bool = True
    missing: Any = None
    sort_mode: Optional[str] = None
    nested_filter: Optional[Query] = None
    nested_path: Optional[str] = None
    unmapped_type: Optional[str] = None

    def to_field_sort(self) -> FieldSort:
        sort = FieldSort(self.field).order(self.ascending)
        if self.missing is not None:
            sort.missing(self.missing)
        if self.sort_mode is not None:
            sort.sort_mode(self.sort_mode)
        if self.nested_filter is not None:
            sort.nested_filter(self.nested_filter)
        if self.nested_path is not None:
            sort.nested_path(self.nested_path)
        if self.unmapped_type is not None:
            sort.unmapped_type(self.unmapped_type)
        return sort

    def sort_key(self) -> str:
        return self.field

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        return self.to_field_sort().source(config)


class ScoreSort(Sorter):
    """
    Sort by relevance score.

    Descending by default, so the best matches come first.
    """

    def __init__(self):
        self.ascending = False

    def sort_key(self) -> str:
        return c.SCORE_KEY

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        return {c.SCORE_KEY: {c.ORDER: _order_value(self.ascending)}}


class DocSort(Sorter):
    """Sort by index order. The cheapest sort when order does not matter."""

    def __init__(self):
        self.ascending = True

    def sort_key(self) -> str:
        return c.DOC_KEY

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        return {c.DOC_KEY: {c.ORDER: _order_value(self.ascending)}}


class GeoDistanceSort(_NestedScopedSorter):
    """
    Sort by distance from one or more reference points.

    Reference points are kept in the order they were added; points come
    before geohashes in the output. With several points the backend sorts by
    the distance aggregated according to ``sort_mode``.

    Example:
        >>> GeoDistanceSort("pin.location").point(-70, 40).unit("km").source()
        {'_geo_distance': {'pin.location': [{'lat': -70, 'lon': 40}], 'unit': 'km', 'order': 'asc'}}
    """

    OPTIONS = _SCOPED_OPTIONS | {c.DISTANCE_TYPE, c.UNIT, c.IGNORE_UNMAPPED}

    def __init__(self, field_name: str):
        super().__init__()
        self.field_name = field_name
        self._points: List[GeoPoint] = []
        self._geohashes: List[str] = []
        self._distance_type: Optional[str] = None
        self._unit: Optional[str] = None
        self._ignore_unmapped: Optional[bool] = None

    def point(self, lat: float, lon: float) -> "GeoDistanceSort":
        self._points.append(GeoPoint(lat=lat, lon=lon))
        return self

    def points(self, *points: GeoPoint) -> "GeoDistanceSort":
        self._points.extend(points)
        return self

    def point_from_text(self, text: str) -> "GeoDistanceSort":
        """Add a point given as "lat,lon" text."""
        self._points.append(GeoPoint.from_string(text))
        return self

    def geohashes(self, *geohashes: str) -> "GeoDistanceSort":
        self._geohashes.extend(geohashes)
        return self

    def distance_type(self, distance_type: str) -> "GeoDistanceSort":
        """Distance computation: "arc" (default on the backend) or "plane"."""
        self._distance_type = distance_type
        return self

    geo_distance = distance_type

    def unit(self, unit: str) -> "GeoDistanceSort":
        self._unit = unit
        return self

    def ignore_unmapped(self, ignore_unmapped: bool) -> "GeoDistanceSort":
        self._ignore_unmapped = ignore_unmapped
        return self

    def sort_key(self) -> str:
        return c.GEO_DISTANCE_KEY

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        if not self._points and not self._geohashes:
            raise EncodingError(f"Geo distance sort on {self.field_name!r} has no reference point")

        options: Dict[str, Any] = {
            self.field_name: [p.source() for p in self._points] + list(self._geohashes)
        }
        if self._distance_type is not None:
            options[c.DISTANCE_TYPE] = self._distance_type
        if self._unit is not None:
            options[c.UNIT] = self._unit
        if self._ignore_unmapped is not None:
            options[c.IGNORE_UNMAPPED] = self._ignore_unmapped
        self._add_options(options, config)
        return {c.GEO_DISTANCE_KEY: options}

    @classmethod
    def from_options(cls, options: Any) -> "GeoDistanceSort":
        if not isinstance(options, dict):
            raise ValidationError(f"Invalid geo distance sort options: {options!r}")
        fields = [key for key in options if key not in cls.OPTIONS]
        if len(fields) != 1:
            raise ValidationError(f"Geo distance sort needs exactly one field, got {fields}")

        field_name = fields[0]
        sort = cls(field_name)
        values = options[field_name]
        # a single object or "lat,lon" string is accepted as a one-point list
        if isinstance(values, (dict, str)) or (
            isinstance(values, list) and len(values) == 2 and all(_is_number(v) for v in values)
        ):
            values = [values]
        if not isinstance(values, list):
            raise ValidationError(f"Invalid geo points for {field_name!r}: {values!r}")
        for value in values:
            if isinstance(value, str) and "," not in value:
                sort.geohashes(value)
            else:
                sort.points(GeoPoint.from_value(value))

        sort._read_options(options)
        if c.DISTANCE_TYPE in options:
            sort.distance_type(options[c.DISTANCE_TYPE])
        if c.UNIT in options:
            sort.unit(options[c.UNIT])
        if c.IGNORE_UNMAPPED in options:
            sort.ignore_unmapped(options[c.IGNORE_UNMAPPED])
        return sort


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ScriptSort(_NestedScopedSorter):
    """
    Sort by a value computed by a script.

    Both the script and its result type ("number", "string") are required.
    """

    OPTIONS = _SCOPED_OPTIONS | {c.TYPE, c.SCRIPT}

    def __init__(self, script: Script, type_: str):
        super().__init__()
        self.script = script
        self.type_ = type_

    def sort_key(self) -> str:
        return c.SCRIPT_KEY

    def source(self, config: Optional[SortConfig] = None) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            c.TYPE: self.type_,
            c.SCRIPT: self.script.source(),
        }
        self._add_options(options, config)
        return {c.SCRIPT_KEY: options}

    @classmethod
    def from_options(cls, options: Any) -> "ScriptSort":
        if not isinstance(options, dict) or c.SCRIPT not in options or c.TYPE not in options:
            raise ValidationError(f"Script sort needs script and type: {options!r}")
        unknown = set(options) - cls.OPTIONS
        if unknown:
            raise ValidationError(f"Unknown script sort options: {sorted(unknown)}")

        sort = cls(Script.from_source(options[c.SCRIPT]), options[c.TYPE])
        sort._read_options(options)
        return sort


def _parse_simple(sort: Sorter, options: Any) -> Sorter:
    if isinstance(options, str):
        sort.ascending = _parse_order(options)
        return sort
    if not isinstance(options, dict) or set(options) - {c.ORDER}:
        raise ValidationError(f"Invalid options for {sort.sort_key()} sort: {options!r}")
    if c.ORDER in options:
        sort.ascending = _parse_order(options[c.ORDER])
    return sort


def parse_sort(document: Union[str, Dict[str, Any]]) -> Sorter:
    """
    Rebuild a sort builder from a sort document.

    Accepts every document the builders in this module produce, plus the
    short forms the backend understands: a bare field name (ascending, or
    descending for "_score") and ``{field: "asc"|"desc"}``. Embedded filters
    become RawQuery values and scripts become Script values, so
    ``parse_sort(doc).source()`` reproduces ``doc``.

    Args:
        document: Sort document or bare field name

    Returns:
        The matching Sorter

    Raises:
        ValidationError: If the document is not a valid sort clause
    """
    if isinstance(document, str):
        if document == c.SCORE_KEY:
            return ScoreSort()
        if document == c.DOC_KEY:
            return DocSort()
        return FieldSort(document)

    if not isinstance(document, dict) or len(document) != 1:
        raise ValidationError(f"Sort document must have exactly one key: {document!r}")

    key, options = next(iter(document.items()))
    if key == c.SCORE_KEY:
        return _parse_simple(ScoreSort(), options)
    if key == c.DOC_KEY:
        return _parse_simple(DocSort(), options)
    if key == c.GEO_DISTANCE_KEY:
        return GeoDistanceSort.from_options(options)
    if key == c.SCRIPT_KEY:
        return ScriptSort.from_options(options)
    return FieldSort.from_options(key, options)
