"""
Validation package.

This package provides JSON schema based checks for sort documents.
"""

from .base import ValidationResult
from .schema import SortSchemaValidator

__all__ = [
    "ValidationResult",
    "SortSchemaValidator",
]
