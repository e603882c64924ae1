"""
Search hit decoding for sorted results.

When a search is sorted, every hit carries a "sort" array of raw values, one
per submitted sort clause and in the same order. The values are not labeled;
this module decodes hits and pairs those values back with the sort clauses
that produced them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate

from ...core import constants as c
from ...core.exceptions import QueryError, ValidationError
from .sorting import Sorter

logger = logging.getLogger(__name__)

HIT_SCHEMA = {
    "type": "object",
    "properties": {
        "_id": {"type": "string"},
        "_index": {"type": "string"},
        "_score": {"type": ["number", "null"]},
        "_source": {"type": "object"},
        c.SORT: {"type": "array"},
    },
    "required": ["_id"],
}

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "took": {"type": "integer"},
        "hits": {
            "type": "object",
            "properties": {
                "total": {
                    "oneOf": [
                        {"type": "integer"},
                        {
                            "type": "object",
                            "properties": {"value": {"type": "integer"}},
                            "required": ["value"],
                        },
                    ]
                },
                "max_score": {"type": ["number", "null"]},
                "hits": {"type": "array", "items": HIT_SCHEMA},
            },
            "required": ["hits"],
        },
    },
    "required": ["hits"],
}


@dataclass
class SearchHit:
    """
    One matched document.

    Attributes:
        id (str): Document id
        index (Optional[str]): Index the document was found in
        score (Optional[float]): Relevance score, None unless computed
        sort_values (List[Any]): Raw sort values in sort clause order
        source (Optional[Dict[str, Any]]): Stored document, if returned
    """

    id: str
    index: Optional[str] = None
    score: Optional[float] = None
    sort_values: List[Any] = field(default_factory=list)
    source: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchHit":
        """
        Decode a hit object.

        Raises:
            ValidationError: If the hit does not match the expected structure
        """
        try:
            validate(instance=data, schema=HIT_SCHEMA)
        except JsonSchemaError as e:
            raise ValidationError(f"Invalid search hit: {e.message}") from e
        return cls(
            id=data["_id"],
            index=data.get("_index"),
            score=data.get("_score"),
            sort_values=list(data.get(c.SORT, [])),
            source=data.get("_source"),
        )

    def sort_map(self, sorters: Sequence[Sorter]) -> Dict[str, Any]:
        """
        Pair sort values with the sort clauses that produced them.

        Args:
            sorters: Sort clauses exactly as submitted with the request

        Returns:
            Dictionary from each sort's key (field name or reserved target such
            as "_score") to its value for this hit. If two clauses share a key
            the later one wins; use sort_pairs() to keep both.

        Raises:
            QueryError: If the number of values differs from the number of sorters
        """
        return {sorter.sort_key(): value for sorter, value in self.sort_pairs(sorters)}

    def sort_pairs(self, sorters: Sequence[Sorter]) -> List[Tuple[Sorter, Any]]:
        """Return (sorter, value) pairs in position order."""
        if len(sorters) != len(self.sort_values):
            logger.warning(
                f"Hit {self.id} has {len(self.sort_values)} sort values for {len(sorters)} sorters"
            )
            raise QueryError(
                f"Hit {self.id} has {len(self.sort_values)} sort values, expected {len(sorters)}"
            )
        return list(zip(sorters, self.sort_values))


@dataclass
class SearchResults:
    """
    Decoded hits of a search response.

    Attributes:
        hits (List[SearchHit]): Matched documents in response order
        total (Optional[int]): Total number of matches
        max_score (Optional[float]): Highest score, None when not tracked
        took (Optional[int]): Time the search took, in milliseconds
    """

    hits: List[SearchHit] = field(default_factory=list)
    total: Optional[int] = None
    max_score: Optional[float] = None
    took: Optional[int] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "SearchResults":
        """
        Decode a search response body.

        Raises:
            ValidationError: If the response does not match the expected structure
        """
        try:
            validate(instance=response, schema=RESPONSE_SCHEMA)
        except JsonSchemaError as e:
            raise ValidationError(f"Invalid search response: {e.message}") from e

        hits = response["hits"]
        total = hits.get("total")
        if isinstance(total, dict):
            total = total["value"]
        return cls(
            hits=[SearchHit.from_dict(hit) for hit in hits["hits"]],
            total=total,
            max_score=hits.get("max_score"),
            took=response.get("took"),
        )

    def sort_values(self) -> List[List[Any]]:
        """Sort value arrays of all hits, in hit order."""
        return [hit.sort_values for hit in self.hits]
