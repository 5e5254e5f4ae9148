"""Domain-specific exceptions for the park reporting engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from ParkAPIError for easy catching.

Data-quality problems in source records are NOT raised: they are dropped,
counted, or mapped to sentinels. These exceptions cover caller mistakes.
"""


class ParkAPIError(Exception):
    """Base exception for all park_core errors.

    Users can catch this exception to handle any park_core error.
    """

    pass


class ConfigError(ParkAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided (e.g. a page size of 0)
    - A filter specification contradicts itself (start after end, min above max)
    - Configuration files cannot be loaded or parsed
    """

    pass


class DataQualityError(ParkAPIError):
    """Raised when strict normalization rejects a source collection.

    Only raised when a caller opts into ``strict=True`` normalization; by
    default malformed records are dropped and reported as a count.
    """

    pass
