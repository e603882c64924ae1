"""
Custom exceptions for the sort composition system.

This module defines the hierarchy of custom exceptions used throughout the package
to report failures while composing, serializing, parsing or validating sort clauses.
Each exception type corresponds to a specific category of errors that may occur.
"""


class QueryError(Exception):
    """
    Raised when search composition operations fail.

    This exception is raised when a sort list or search source cannot be
    assembled or interpreted, such as a response whose sort values cannot be
    paired with the sort clauses that were submitted.

    Examples:
        * Hit sort values that do not line up with the submitted sorters
        * Invalid sort direction strings
    """


class EncodingError(QueryError):
    """
    Raised when a document cannot be produced.

    Sort builders never raise this on their own account for configured
    values; it is raised by embedded collaborators (scripts, filter clauses)
    and by the geo point and nesting depth checks, and then propagates
    unchanged to the caller of ``source()``.

    Examples:
        * Script parameters that are not JSON-serializable
        * Geo distance sort without any reference point
        * Nested sort descriptors deeper than the configured limit
    """


class ValidationError(Exception):
    """
    Raised when input data fails validation.

    This exception is raised when a sort document, a geo point string or a
    search response does not have the expected structure.

    Examples:
        * Sort document with more than one target key
        * Malformed "lat,lon" text
        * Search response hit without a sort array
    """

    def __str__(self) -> str:
        """Format validation error message."""
        return f"Validation Error: {super().__str__()}"


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    Examples:
        * Non-positive nesting depth limit
        * Wrong value types in configuration
    """
