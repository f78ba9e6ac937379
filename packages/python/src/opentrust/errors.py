"""Error taxonomy for opentrust.

Every error carries a short machine-readable ``code``.  Validation and
input errors also subclass :class:`ValueError` so that callers written
against plain ``ValueError`` keep working.
"""

from __future__ import annotations


class OpenTrustError(Exception):
    """Base class for all opentrust errors."""

    code = "OPENTRUST_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(OpenTrustError, ValueError):
    """A judgment, fusion input, or mapper configuration is invalid."""

    code = "VALIDATION_ERROR"


class ConformanceError(OpenTrustError):
    """A conformance seal cannot be generated or verified."""

    code = "CONFORMANCE_ERROR"


class InputError(OpenTrustError, ValueError):
    """A mapper received raw input of the wrong type or shape."""

    code = "INPUT_ERROR"


MapperError = OpenTrustError
