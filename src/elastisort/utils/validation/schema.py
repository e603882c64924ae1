"""
Schema Validation Components for sort documents

This module provides JSON schema-based validation of produced or hand-written
sort documents. It supports:
- One schema per sort kind (field, score, doc, geo distance, script)
- A recursive schema for nested sort descriptors
- Warnings for option values the backend may not recognize

Validation never changes a document; it reports problems through a
ValidationResult so callers can inspect sort lists before sending them.
"""

from typing import Any, Dict

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate as json_validate

from ...core import constants as c
from .base import ValidationResult

DRAFT = "https://json-schema.org/draft/2020-12/schema"

ORDER_SCHEMA = {"enum": [c.ORDER_ASC, c.ORDER_DESC]}

DEFS: Dict[str, Any] = {
    "nested": {
        "type": "object",
        "properties": {
            c.PATH: {"type": "string", "minLength": 1},
            c.FILTER: {"type": "object"},
            c.NESTED: {"$ref": "#/$defs/nested"},
            c.MAX_CHILDREN: {"type": "integer", "minimum": 0},
        },
        "required": [c.PATH],
    },
    "geo_point": {
        "oneOf": [
            {
                "type": "object",
                "properties": {"lat": {"type": "number"}, "lon": {"type": "number"}},
                "required": ["lat", "lon"],
                "additionalProperties": False,
            },
            {"type": "string", "minLength": 1},
            {"type": "array", "items": {"type": "number"}, "minItems": 2, "maxItems": 2},
        ]
    },
}

SCOPED_PROPERTIES: Dict[str, Any] = {
    c.ORDER: ORDER_SCHEMA,
    c.MODE: {"type": "string"},
    c.NESTED_FILTER: {"type": "object"},
    c.NESTED_PATH: {"type": "string", "minLength": 1},
    c.NESTED: {"$ref": "#/$defs/nested"},
}


def _schema(body: Dict[str, Any]) -> Dict[str, Any]:
    return {"$schema": DRAFT, "$defs": DEFS, **body}


SIMPLE_SORT_SCHEMA = _schema(
    {
        "type": "object",
        "properties": {c.ORDER: ORDER_SCHEMA},
        "required": [c.ORDER],
    }
)

FIELD_SORT_SCHEMA = _schema(
    {
        "type": "object",
        "properties": {
            **SCOPED_PROPERTIES,
            c.MISSING: {},
            c.UNMAPPED_TYPE: {"type": "string"},
            c.NUMERIC_TYPE: {"type": "string"},
            c.FORMAT: {"type": "string"},
        },
        "required": [c.ORDER],
    }
)

GEO_DISTANCE_SORT_SCHEMA = _schema(
    {
        "type": "object",
        "properties": {
            **SCOPED_PROPERTIES,
            c.DISTANCE_TYPE: {"type": "string"},
            c.UNIT: {"type": "string"},
            c.IGNORE_UNMAPPED: {"type": "boolean"},
        },
        "required": [c.ORDER],
        # the single remaining key is the field name holding the points
        "additionalProperties": {
            "type": "array",
            "items": {"$ref": "#/$defs/geo_point"},
            "minItems": 1,
        },
        "minProperties": 2,
    }
)

SCRIPT_SORT_SCHEMA = _schema(
    {
        "type": "object",
        "properties": {
            **SCOPED_PROPERTIES,
            c.TYPE: {"type": "string", "minLength": 1},
            c.SCRIPT: {
                "oneOf": [
                    {"type": "string", "minLength": 1},
                    {
                        "type": "object",
                        "properties": {
                            "source": {"type": "string"},
                            "id": {"type": "string"},
                            "lang": {"type": "string"},
                            "params": {"type": "object"},
                        },
                        "oneOf": [{"required": ["source"]}, {"required": ["id"]}],
                        "additionalProperties": False,
                    },
                ]
            },
        },
        "required": [c.ORDER, c.TYPE, c.SCRIPT],
    }
)

NESTED_SORT_SCHEMA = _schema({"$ref": "#/$defs/nested"})


class SortSchemaValidator:
    """
    JSON Schema-based validator for sort documents.

    Each document is checked against the schema of its sort kind, chosen by
    its single top-level key. Option values outside the known sets (sort
    modes, script sort types, distance types) and unknown option keys only
    produce warnings, since the backend may support options this package
    does not know about.

    Attributes:
        schemas (Dict[str, Dict[str, Any]]): Schemas keyed by reserved sort target
        field_schema (Dict[str, Any]): Schema for sorts on a user field
    """

    def __init__(self):
        self.schemas: Dict[str, Dict[str, Any]] = {
            c.SCORE_KEY: SIMPLE_SORT_SCHEMA,
            c.DOC_KEY: SIMPLE_SORT_SCHEMA,
            c.GEO_DISTANCE_KEY: GEO_DISTANCE_SORT_SCHEMA,
            c.SCRIPT_KEY: SCRIPT_SORT_SCHEMA,
        }
        self.field_schema: Dict[str, Any] = FIELD_SORT_SCHEMA

    def validate(self, document: Any) -> ValidationResult:
        """
        Validate a single sort document.

        Args:
            document: A sort document such as FieldSort(...).source()

        Returns:
            ValidationResult containing validation details and any errors or warnings

        Example:
            >>> validator = SortSchemaValidator()
            >>> validator.validate({"grade": {"order": "asc"}}).is_valid
            True
        """
        if not isinstance(document, dict) or len(document) != 1:
            return ValidationResult(
                is_valid=False,
                errors=["Sort document must be an object with exactly one key"],
            )

        key, options = next(iter(document.items()))
        schema = self.schemas.get(key, self.field_schema)
        errors = []
        warnings = []

        try:
            json_validate(instance=options, schema=schema)
        except JsonSchemaError as e:
            errors.append(f"Schema validation failed for {key!r}: {e.message}")

        if isinstance(options, dict):
            warnings.extend(self._option_warnings(key, options, schema))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            context={"sort_key": key},
        )

    def validate_nested(self, document: Any) -> ValidationResult:
        """Validate a standalone nested sort descriptor."""
        errors = []
        try:
            json_validate(instance=document, schema=NESTED_SORT_SCHEMA)
        except JsonSchemaError as e:
            errors.append(f"Schema validation failed for nested sort: {e.message}")
        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=self._nested_warnings(document),
            context={"sort_key": c.NESTED},
        )

    def _option_warnings(self, key: str, options: Dict[str, Any], schema: Dict[str, Any]) -> list:
        warnings = []
        unknown = sorted(set(options) - set(schema["properties"]))
        if key == c.GEO_DISTANCE_KEY:
            # one unknown key is the point field itself
            if len(unknown) > 1:
                warnings.append(f"Geo distance sort has several point fields: {unknown}")
        elif unknown:
            warnings.append(f"Unknown options for {key!r}: {unknown}")
        mode = options.get(c.MODE)
        if isinstance(mode, str) and mode not in c.SORT_MODES:
            warnings.append(f"Unknown sort mode for {key!r}: {mode}")
        if key == c.SCRIPT_KEY:
            script_type = options.get(c.TYPE)
            if isinstance(script_type, str) and script_type not in c.SCRIPT_SORT_TYPES:
                warnings.append(f"Unknown script sort type: {script_type}")
        if key == c.GEO_DISTANCE_KEY:
            distance_type = options.get(c.DISTANCE_TYPE)
            if isinstance(distance_type, str) and distance_type not in c.DISTANCE_TYPES:
                warnings.append(f"Unknown distance type: {distance_type}")
        if c.NESTED in options and (c.NESTED_PATH in options or c.NESTED_FILTER in options):
            warnings.append(f"Sort on {key!r} mixes nested with nested_path/nested_filter")
        warnings.extend(self._nested_warnings(options.get(c.NESTED)))
        return warnings

    def _nested_warnings(self, nested: Any) -> list:
        warnings = []
        depth = 1
        while isinstance(nested, dict):
            unknown = sorted(set(nested) - set(DEFS["nested"]["properties"]))
            if unknown:
                warnings.append(f"Unknown options for nested sort at depth {depth}: {unknown}")
            nested = nested.get(c.NESTED)
            depth += 1
        return warnings
