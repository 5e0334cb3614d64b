from __future__ import annotations


class GpxAuditError(Exception):
    """Base class for errors raised by gpxaudit."""


class ValidationError(GpxAuditError, ValueError):
    """
    Malformed input to a public entry point (wrong container type, non-numeric
    entries, out-of-range coordinates, bad grid size).

    Data-quality conditions in otherwise well-formed input (missing or
    non-increasing timestamps, zero distances) are counted, never raised.
    """


class InvalidBandwidth(ValidationError):
    """Bandwidth is not a finite, strictly positive number."""
