"""
Tests for sort clause builders.
"""

import logging

import pytest

from elastisort.core.config import SortConfig, set_config
from elastisort.core.exceptions import EncodingError, ValidationError
from elastisort.core.serialization import dumps, loads
from elastisort.search.query import (
    DocSort,
    FieldSort,
    GeoDistanceSort,
    GeoPoint,
    NestedSort,
    Query,
    RawQuery,
    ScoreSort,
    Script,
    ScriptSort,
    SortInfo,
    TermQuery,
    parse_sort,
)


class FailingQuery(Query):
    """Filter clause whose serialization always fails."""

    def source(self):
        raise EncodingError("filter cannot be encoded")


def test_sort_info():
    """Test record-style field sort in descending order."""
    builder = SortInfo(field="grade", ascending=False)
    assert dumps(builder.source()) == '{"grade":{"order":"desc"}}'


def test_sort_info_complex(blue_variant_filter):
    """Test record-style field sort with every legacy nested option."""
    builder = SortInfo(
        field="price",
        ascending=False,
        missing="_last",
        sort_mode="avg",
        nested_filter=blue_variant_filter,
        nested_path="variant",
    )
    expected = (
        '{"price":{"missing":"_last","mode":"avg",'
        '"nested_filter":{"term":{"product.color":"blue"}},'
        '"nested_path":"variant","order":"desc"}}'
    )
    assert dumps(builder.source()) == expected


def test_sort_info_matches_field_sort():
    """Test SortInfo and the equivalent FieldSort produce the same document."""
    info = SortInfo(field="price", missing="_first", unmapped_type="long")
    builder = FieldSort("price").missing("_first").unmapped_type("long")
    assert info.source() == builder.source()
    assert info.to_field_sort().source() == builder.source()


def test_score_sort_defaults_to_descending():
    """Test score sort is descending unless configured."""
    builder = ScoreSort()
    assert builder.ascending is False
    assert dumps(builder.source()) == '{"_score":{"order":"desc"}}'


def test_score_sort_order_ascending():
    """Test score sort in ascending order."""
    assert dumps(ScoreSort().asc().source()) == '{"_score":{"order":"asc"}}'


def test_score_sort_order_descending():
    """Test explicit descending score sort."""
    assert dumps(ScoreSort().desc().source()) == '{"_score":{"order":"desc"}}'


def test_doc_sort():
    """Test index order sort."""
    assert dumps(DocSort().source()) == '{"_doc":{"order":"asc"}}'


def test_field_sort():
    """Test field sort is ascending by default."""
    assert dumps(FieldSort("grade").source()) == '{"grade":{"order":"asc"}}'


def test_field_sort_order_desc():
    """Test descending field sort."""
    assert dumps(FieldSort("grade").desc().source()) == '{"grade":{"order":"desc"}}'


@pytest.mark.parametrize("ascending,expected", [(True, "asc"), (False, "desc")])
def test_field_sort_order_flag(ascending, expected):
    """Test order(bool) maps to asc/desc."""
    assert FieldSort("grade").order(ascending).source() == {"grade": {"order": expected}}


def test_field_sort_complex(blue_variant_filter):
    """Test field sort with missing, mode, unmapped type and legacy nested options."""
    builder = (
        FieldSort("price")
        .desc()
        .sort_mode("avg")
        .missing("_last")
        .unmapped_type("product")
        .nested_filter(blue_variant_filter)
        .nested_path("variant")
    )
    expected = (
        '{"price":{"missing":"_last","mode":"avg",'
        '"nested_filter":{"term":{"product.color":"blue"}},'
        '"nested_path":"variant","order":"desc","unmapped_type":"product"}}'
    )
    assert dumps(builder.source()) == expected


def test_field_sort_setter_order_does_not_change_output(blue_variant_filter):
    """Test key order depends only on key names, not on setter order."""
    first = (
        FieldSort("price")
        .unmapped_type("product")
        .nested_path("variant")
        .missing("_last")
        .nested_filter(blue_variant_filter)
        .sort_mode("avg")
        .desc()
    )
    second = (
        FieldSort("price")
        .desc()
        .sort_mode("avg")
        .nested_filter(blue_variant_filter)
        .missing("_last")
        .nested_path("variant")
        .unmapped_type("product")
    )
    assert dumps(first.source()) == dumps(second.source())


def test_field_sort_omits_unset_options():
    """Test only configured options appear in the document."""
    options = FieldSort("price").missing(0).source()["price"]
    assert options == {"missing": 0, "order": "asc"}
    assert None not in options.values()


def test_field_sort_numeric_type_and_format():
    """Test numeric type and date format options."""
    builder = FieldSort("created").numeric_type("date_nanos").format("strict_date_optional_time")
    expected = (
        '{"created":{"format":"strict_date_optional_time",'
        '"numeric_type":"date_nanos","order":"asc"}}'
    )
    assert dumps(builder.source()) == expected


def test_field_sort_with_nested_sort(offer_nested_sort):
    """Test field sort scoped by a nested sort descriptor."""
    builder = FieldSort("offer.price").asc().sort_mode("avg").nested_sort(offer_nested_sort)
    expected = (
        '{"offer.price":{"mode":"avg",'
        '"nested":{"filter":{"term":{"offer.color":"blue"}},"path":"offer"},'
        '"order":"asc"}}'
    )
    assert dumps(builder.source()) == expected


def test_field_sort_emits_legacy_and_nested_scoping(offer_nested_sort, caplog):
    """Test legacy nested options and nested sort are both emitted when both are set."""
    caplog.set_level(logging.DEBUG, logger="elastisort.search.query.sorting")
    builder = FieldSort("offer.price").nested_path("offer").nested_sort(offer_nested_sort)

    options = builder.source()["offer.price"]

    assert options["nested_path"] == "offer"
    assert options["nested"] == offer_nested_sort.source()
    assert "carries both" in caplog.text


def test_field_sort_propagates_filter_error():
    """Test errors from the embedded filter reach the caller unchanged."""
    builder = FieldSort("price").nested_filter(FailingQuery()).nested_path("variant")
    with pytest.raises(EncodingError, match="filter cannot be encoded"):
        builder.source()


def test_geo_distance_sort():
    """Test geo distance sort with a single point."""
    builder = (
        GeoDistanceSort("pin.location")
        .point(-70, 40)
        .order(True)
        .unit("km")
        .sort_mode("min")
        .geo_distance("plane")
    )
    expected = (
        '{"_geo_distance":{"distance_type":"plane","mode":"min","order":"asc",'
        '"pin.location":[{"lat":-70,"lon":40}],"unit":"km"}}'
    )
    assert dumps(builder.source()) == expected


def test_geo_distance_sort_order_desc():
    """Test descending geo distance sort with arc distance."""
    builder = (
        GeoDistanceSort("pin.location")
        .point(-70, 40)
        .unit("km")
        .sort_mode("min")
        .geo_distance("arc")
        .desc()
    )
    expected = (
        '{"_geo_distance":{"distance_type":"arc","mode":"min","order":"desc",'
        '"pin.location":[{"lat":-70,"lon":40}],"unit":"km"}}'
    )
    assert dumps(builder.source()) == expected


def test_geo_distance_sort_keeps_points_in_call_order():
    """Test several reference points in the order they were added."""
    builder = (
        GeoDistanceSort("location")
        .point(1, 2)
        .points(GeoPoint(lat=3, lon=4))
        .point_from_text("5.5, 6.5")
        .geohashes("drm3btev3e86")
    )
    assert builder.source()["_geo_distance"]["location"] == [
        {"lat": 1, "lon": 2},
        {"lat": 3, "lon": 4},
        {"lat": 5.5, "lon": 6.5},
        "drm3btev3e86",
    ]


def test_geo_distance_sort_requires_a_point():
    """Test a geo distance sort without reference points cannot be encoded."""
    with pytest.raises(EncodingError, match="no reference point"):
        GeoDistanceSort("location").source()


def test_geo_distance_sort_nested_options(offer_nested_sort):
    """Test geo distance sort with nested scoping and ignore_unmapped."""
    builder = (
        GeoDistanceSort("offer.location")
        .point(10, 20)
        .ignore_unmapped(True)
        .nested_sort(offer_nested_sort)
    )
    options = builder.source()["_geo_distance"]
    assert options["ignore_unmapped"] is True
    assert options["nested"] == {"filter": {"term": {"offer.color": "blue"}}, "path": "offer"}


def test_script_sort(factor_script):
    """Test ascending script sort."""
    builder = ScriptSort(factor_script, "number").order(True)
    expected = (
        '{"_script":{"order":"asc","script":{"params":{"factor":1.1},'
        '"source":"doc[\'field_name\'].value * factor"},"type":"number"}}'
    )
    assert dumps(builder.source()) == expected


def test_script_sort_order_desc(factor_script):
    """Test descending script sort."""
    builder = ScriptSort(factor_script, "number").desc()
    expected = (
        '{"_script":{"order":"desc","script":{"params":{"factor":1.1},'
        '"source":"doc[\'field_name\'].value * factor"},"type":"number"}}'
    )
    assert dumps(builder.source()) == expected


def test_script_sort_mode_and_nested_path():
    """Test script sort with a sort mode and legacy nested path."""
    builder = ScriptSort(Script("doc['offer.price'].value"), "number").sort_mode("max").nested_path("offer")
    assert builder.source() == {
        "_script": {
            "type": "number",
            "script": "doc['offer.price'].value",
            "order": "asc",
            "mode": "max",
            "nested_path": "offer",
        }
    }


def test_script_sort_propagates_script_error():
    """Test errors from the embedded script reach the caller unchanged."""
    builder = ScriptSort(Script("params.x").param("x", object()), "number")
    with pytest.raises(EncodingError, match="script params"):
        builder.source()


def test_nested_sort(offer_nested_sort):
    """Test standalone nested sort descriptor."""
    expected = '{"filter":{"term":{"offer.color":"blue"}},"path":"offer"}'
    assert dumps(offer_nested_sort.source()) == expected


def test_nested_sort_recursion():
    """Test a nested sort embeds its inner nested sort verbatim."""
    inner = NestedSort("parent.child").filter(TermQuery("parent.child.kind", "a")).max_children(5)
    outer = NestedSort("parent").nested_sort(inner)
    assert outer.source() == {"path": "parent", "nested": inner.source()}
    assert dumps(outer.source()) == (
        '{"nested":{"filter":{"term":{"parent.child.kind":"a"}},'
        '"max_children":5,"path":"parent.child"},"path":"parent"}'
    )


def test_nested_sort_depth_limit():
    """Test nesting deeper than the configured limit cannot be encoded."""
    set_config(SortConfig(max_nested_depth=2))
    two_levels = NestedSort("a").nested_sort(NestedSort("a.b"))
    assert two_levels.source()["nested"] == {"path": "a.b"}

    three_levels = NestedSort("a").nested_sort(NestedSort("a.b").nested_sort(NestedSort("a.b.c")))
    with pytest.raises(EncodingError, match="deeper than 2"):
        three_levels.source()


def test_nested_sort_cycle_is_rejected():
    """Test a nested sort containing itself fails instead of recursing forever."""
    nested = NestedSort("loop")
    nested.nested_sort(nested)
    with pytest.raises(EncodingError):
        nested.source()


def test_nested_sort_propagates_filter_error():
    """Test errors from the nested filter reach the caller of the parent sort."""
    builder = FieldSort("offer.price").nested_sort(NestedSort("offer").filter(FailingQuery()))
    with pytest.raises(EncodingError, match="filter cannot be encoded"):
        builder.source()


@pytest.mark.parametrize(
    "builder",
    [
        FieldSort("grade"),
        FieldSort("price")
        .desc()
        .sort_mode("avg")
        .missing("_last")
        .unmapped_type("product")
        .nested_filter(TermQuery("product.color", "blue"))
        .nested_path("variant"),
        FieldSort("offer.price").nested_sort(
            NestedSort("offer").nested_sort(NestedSort("offer.seller").max_children(3))
        ),
        ScoreSort(),
        DocSort().desc(),
        GeoDistanceSort("pin.location").point(-70, 40).geohashes("u33").unit("km"),
        ScriptSort(Script("doc['f'].value * factor").param("factor", 1.1), "number"),
        ScriptSort(Script.stored("sort-script").lang("painless"), "string").desc(),
    ],
)
def test_parse_sort_roundtrip(builder):
    """Test decoding a produced document and encoding it again is idempotent."""
    encoded = dumps(builder.source())
    assert dumps(parse_sort(loads(encoded)).source()) == encoded


def test_parse_sort_short_forms():
    """Test bare names and string orders."""
    assert parse_sort("grade").source() == {"grade": {"order": "asc"}}
    assert parse_sort("_score").source() == {"_score": {"order": "desc"}}
    assert parse_sort({"price": "desc"}).source() == {"price": {"order": "desc"}}
    assert parse_sort({"_score": "asc"}).source() == {"_score": {"order": "asc"}}


def test_parse_sort_builds_raw_filters():
    """Test embedded filters become raw queries."""
    sort = parse_sort({"price": {"nested_filter": {"term": {"a": 1}}, "nested_path": "v"}})
    assert isinstance(sort, FieldSort)
    assert sort._nested_filter == RawQuery({"term": {"a": 1}})


def test_parse_sort_geo_point_shapes():
    """Test geo points given as object, lon/lat array and text."""
    sort = parse_sort({"_geo_distance": {"location": [[-70, 40], "40,-70"], "order": "asc"}})
    assert sort.source()["_geo_distance"]["location"] == [
        {"lat": 40, "lon": -70},
        {"lat": 40.0, "lon": -70.0},
    ]
    single = parse_sort({"_geo_distance": {"location": {"lat": 1, "lon": 2}}})
    assert single.source()["_geo_distance"]["location"] == [{"lat": 1, "lon": 2}]


@pytest.mark.parametrize(
    "document",
    [
        {"a": {"order": "asc"}, "b": {"order": "asc"}},
        {"price": {"order": "up"}},
        {"price": {"bogus": 1}},
        {"price": 3},
        {"_score": {"mode": "avg"}},
        {"_geo_distance": {"order": "asc"}},
        {"_geo_distance": {"a": [{"lat": 1, "lon": 2}], "b": [{"lat": 1, "lon": 2}]}},
        {"_script": {"type": "number"}},
        {"_script": {"type": "number", "script": "x", "unit": "km"}},
        {"offer.price": {"nested": {"filter": {}}}},
        ["price"],
    ],
)
def test_parse_sort_rejects_malformed_documents(document):
    """Test malformed sort documents raise validation errors."""
    with pytest.raises(ValidationError):
        parse_sort(document)
