"""
Filter clauses embeddable in sort documents.

Nested sorting restricts which nested objects take part in a sort through a
filter clause. The full query language lives outside this package; this
module defines the contract such clauses satisfy and a few concrete clauses:
- Term filters (exact value on one field)
- Terms filters (any of several values)
- Raw filters (an already-built query document, used when parsing)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ...core.serialization import ensure_serializable


class Query(ABC):
    """
    Contract for filter clauses.

    Any object with a ``source()`` method returning a JSON-compatible
    dictionary can be embedded in a sort; subclassing is optional.
    """

    @abstractmethod
    def source(self) -> Dict[str, Any]:
        """Produce the clause's document."""


class TermQuery(Query):
    """
    Exact-value filter on a single field.

    Serializes to ``{"term": {name: value}}``. When a boost or query name is
    configured the long form ``{"term": {name: {"value": value, ...}}}`` is used.
    """

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value
        self._boost: Optional[float] = None
        self._query_name: Optional[str] = None

    def boost(self, boost: float) -> "TermQuery":
        self._boost = boost
        return self

    def query_name(self, query_name: str) -> "TermQuery":
        self._query_name = query_name
        return self

    def source(self) -> Dict[str, Any]:
        """
        Produce the term clause document.

        Raises:
            EncodingError: If the value is not JSON-serializable
        """
        ensure_serializable(self.value, f"term value for {self.name!r}")
        if self._boost is None and self._query_name is None:
            return {"term": {self.name: self.value}}

        params: Dict[str, Any] = {"value": self.value}
        if self._boost is not None:
            params["boost"] = self._boost
        if self._query_name is not None:
            params["_name"] = self._query_name
        return {"term": {self.name: params}}


class TermsQuery(Query):
    """Filter matching any of several exact values on one field."""

    def __init__(self, name: str, *values: Any):
        self.name = name
        self.values: List[Any] = list(values)

    def source(self) -> Dict[str, Any]:
        ensure_serializable(self.values, f"terms values for {self.name!r}")
        return {"terms": {self.name: list(self.values)}}


class RawQuery(Query):
    """Pre-built query document, embedded verbatim."""

    def __init__(self, document: Dict[str, Any]):
        self.document = document

    def source(self) -> Dict[str, Any]:
        ensure_serializable(self.document, "raw query")
        return self.document

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawQuery) and other.document == self.document

    def __repr__(self) -> str:
        return f"RawQuery({self.document!r})"
