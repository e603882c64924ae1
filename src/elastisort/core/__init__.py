"""
Core components shared by the sort builders: exceptions, constants,
configuration and canonical serialization.
"""

from .config import SortConfig, get_config, set_config
from .exceptions import ConfigurationError, EncodingError, QueryError, ValidationError
from .serialization import canonicalize, dumps, loads

__all__ = [
    "SortConfig",
    "get_config",
    "set_config",
    "QueryError",
    "EncodingError",
    "ValidationError",
    "ConfigurationError",
    "dumps",
    "loads",
    "canonicalize",
]
