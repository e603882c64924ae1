"""
Sort list assembly for search requests.

This module defines SearchSource, the part of a search request body that
carries sorting. It collects sort clauses in call order and serializes them
into the request's "sort" array:
- Field sorts by name and direction
- Record-style SortInfo sorts
- Any Sorter (score, geo distance, script, doc)
- Score tracking when sorting on fields
"""

import logging
from typing import Any, Dict, List, Optional

from ...core import constants as c
from ...core.config import SortConfig, get_config
from ...core.exceptions import QueryError
from ...core.serialization import dumps
from ...utils.validation.schema import SortSchemaValidator
from .sorting import FieldSort, Sorter, SortInfo

logger = logging.getLogger(__name__)


class SearchSource:
    """
    Sort section of a search request body.

    The position of each sort clause in the produced array is the position of
    its value in every hit's sort values, so the order in which sorts are
    added is preserved exactly.

    Attributes:
        config (Optional[SortConfig]): Settings used instead of the global default
    """

    def __init__(self, config: Optional[SortConfig] = None):
        self.config = config
        self._sorters: List[Sorter] = []
        self._track_scores: Optional[bool] = None

    @property
    def sorters(self) -> List[Sorter]:
        """Sort clauses in submission order."""
        return list(self._sorters)

    def sort(self, field: str, ascending: bool = True) -> "SearchSource":
        """Add a sort on a field by name."""
        self._sorters.append(FieldSort(field).order(ascending))
        return self

    def sort_with_info(self, info: SortInfo) -> "SearchSource":
        self._sorters.append(info)
        return self

    def sort_by(self, *sorters: Sorter) -> "SearchSource":
        self._sorters.extend(sorters)
        return self

    def track_scores(self, track_scores: bool) -> "SearchSource":
        """Compute relevance scores even when sorting on fields."""
        self._track_scores = track_scores
        return self

    def source(self) -> Dict[str, Any]:
        """
        Produce the sort section of the request body.

        Each sort clause is serialized in order; the first failure aborts the
        whole array and propagates to the caller.

        Returns:
            Dictionary with a "sort" array and, if set, "track_scores"

        Raises:
            EncodingError: If a sort clause cannot be encoded
            QueryError: If document validation is enabled and a clause is invalid
        """
        config = self.config or get_config()
        validator = SortSchemaValidator() if config.validate_documents else None

        documents = []
        for sorter in self._sorters:
            document = sorter.source(config)
            if validator is not None:
                result = validator.validate(document)
                if not result.is_valid:
                    raise QueryError("; ".join(result.errors))
            documents.append(document)

        body: Dict[str, Any] = {}
        if documents:
            body[c.SORT] = documents
        if self._track_scores is not None:
            body[c.TRACK_SCORES] = self._track_scores

        logger.debug(f"Serialized {len(documents)} sort clauses")
        return body

    def to_json(self, indent: Any = None) -> str:
        """Serialize the sort section to canonical JSON text."""
        return dumps(self.source(), indent=indent)
