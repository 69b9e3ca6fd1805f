"""Custom exceptions for the indicators service.

Refresh jobs catch all of these at the per-cycle boundary; the read path
only lets them escape as a generic server error.
"""


class IndicatorServiceError(Exception):
    """Base exception for all service errors."""


class UpstreamError(IndicatorServiceError):
    """Raised when the SGS API cannot be reached, times out, or answers non-2xx."""


class PayloadError(IndicatorServiceError):
    """Raised when the upstream body is not the expected series payload."""


class EmptySeriesError(PayloadError):
    """Raised when the upstream series is empty or absent."""


class InvalidValueError(PayloadError):
    """Raised when a series value is not an invariant-format decimal."""


class InvalidDateError(PayloadError):
    """Raised when a series date is not a valid DD/MM/YYYY calendar date."""


class StoreError(IndicatorServiceError):
    """Raised when the indicator store cannot be read or written."""


class CacheError(IndicatorServiceError):
    """Raised when the result cache cannot be read or written."""
