"""
Configuration for sort composition.

This module provides the SortConfig settings object and a process-wide default
instance used by builders that do not receive an explicit configuration.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class SortConfig:
    """
    Settings controlling sort serialization.

    Attributes:
        max_nested_depth: Maximum number of NestedSort levels serialized in one
            chain before an EncodingError is raised
        validate_documents: Whether SearchSource checks every produced sort
            document against the JSON schemas before returning it
    """

    max_nested_depth: int = 16
    validate_documents: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value has the wrong type or range
        """
        if isinstance(self.max_nested_depth, bool) or not isinstance(self.max_nested_depth, int):
            raise ConfigurationError("max_nested_depth must be an integer")
        if self.max_nested_depth < 1:
            raise ConfigurationError("max_nested_depth must be positive")
        if not isinstance(self.validate_documents, bool):
            raise ConfigurationError("validate_documents must be a boolean")


_config: Optional[SortConfig] = None


def get_config() -> SortConfig:
    """Return the active configuration, creating the default on first use."""
    global _config
    if _config is None:
        _config = SortConfig()
    return _config


def set_config(config: Optional[SortConfig]) -> None:
    """
    Replace the active configuration.

    Passing None restores the defaults on the next get_config() call.
    """
    global _config
    if config is not None:
        config.validate()
        logger.debug(f"Sort configuration replaced: {config}")
    _config = config
