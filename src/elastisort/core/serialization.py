"""
Canonical JSON serialization for sort documents.

Sort builders produce plain dictionaries in whatever order their options were
populated. Key ordering is applied here, at serialization time: every object
is emitted with its keys in lexicographic order, which is the wire format the
search backend and the golden documents in the test suite expect.
"""

import json
from enum import Enum
from typing import Any

from .exceptions import EncodingError, ValidationError

SEPARATORS = (",", ":")


class SortJSONEncoder(json.JSONEncoder):
    """JSON encoder that understands builders embedded in documents."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Enum):
            return o.value
        source = getattr(o, "source", None)
        if callable(source):
            return source()
        return super().default(o)


def dumps(document: Any, indent: Any = None) -> str:
    """
    Serialize a document to canonical JSON text.

    Args:
        document: Dictionary, list or builder to serialize
        indent: Optional indentation passed to json.dumps

    Returns:
        JSON text with lexicographically ordered keys at every level

    Raises:
        EncodingError: If a value cannot be represented in JSON
    """
    separators = SEPARATORS if indent is None else None
    try:
        return json.dumps(
            document,
            cls=SortJSONEncoder,
            sort_keys=True,
            allow_nan=False,
            separators=separators,
            indent=indent,
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode document: {e}") from e


def loads(text: str) -> Any:
    """
    Parse JSON text.

    Raises:
        ValidationError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e


def canonicalize(document: Any) -> Any:
    """Return a copy of a document with every object's keys in sorted order."""
    if isinstance(document, dict):
        return {key: canonicalize(document[key]) for key in sorted(document)}
    if isinstance(document, (list, tuple)):
        return [canonicalize(item) for item in document]
    return document


def ensure_serializable(value: Any, what: str) -> None:
    """
    Check that a value can be encoded as JSON.

    Args:
        value: Value to check
        what: Description used in the error message

    Raises:
        EncodingError: If the value cannot be represented in JSON
    """
    try:
        json.dumps(value, cls=SortJSONEncoder, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"{what} is not JSON-serializable: {e}") from e


def roundtrip(document: Any) -> Any:
    """Encode and decode a document, resolving embedded builders to plain data."""
    return loads(dumps(document))
