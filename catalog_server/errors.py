"""
Error types raised by catalog operations.

Every operation catches failures at its own boundary and re-raises one of
these, carrying a message that can be shown to the user as-is.
"""
from __future__ import annotations

import typing as t


class CatalogError(Exception):
    """Base class for all user-facing catalog failures."""

    kind = "error"

    def __init__(self, user_message: str, operation: t.Optional[str] = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.operation = operation


class ConfigurationError(CatalogError):
    """The hosted store is not configured (missing URL or key)."""

    kind = "configuration"


class ValidationError(CatalogError):
    """Bad input detected before any side effect (wrong file type, no confirmation)."""

    kind = "validation"


class NotFoundError(CatalogError):
    """Unknown course or item id."""

    kind = "not_found"


class ExtractionError(CatalogError):
    """The extraction service failed or returned no usable course shells."""

    kind = "extraction"


class UpstreamError(CatalogError):
    """The database or storage service was unreachable or rejected a request."""

    kind = "upstream"

    def __init__(
        self,
        user_message: str,
        operation: t.Optional[str] = None,
        upstream_message: str = "",
        status_code: t.Optional[int] = None,
    ) -> None:
        super().__init__(user_message, operation)
        self.upstream_message = upstream_message or user_message
        self.status_code = status_code


class PartialFailureError(UpstreamError):
    """A blob was uploaded but its metadata write failed; the blob was removed again."""

    kind = "partial_failure"


class ReplaceError(UpstreamError):
    """The destructive catalog replace failed midway.

    Nothing is rolled back: persisted state may be partially deleted or
    partially re-seeded until the next successful import, reset or fetch.
    """

    kind = "replace"
    state_may_be_inconsistent = True
