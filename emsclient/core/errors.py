# ============================================================================
# CLIENT EXCEPTIONS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Typed failures surfaced to callers of the EMS client
# CREATED: 18 OCT 2026
# ============================================================================
"""
EMS Client Exceptions

Every failure raised by the client derives from EMSClientError and carries
its structured fields as attributes. Network and parse failures of manifest
documents are normalized to ManifestUnavailableError, with the original
failure kept on ``.cause`` (and as ``__cause__`` when raised ``from`` it).

Absence of data (no matching entity, no matching format) is never an error.
"""

from typing import Any, Optional


class EMSClientError(Exception):
    """Base exception for EMS client operations."""
    pass


class MalformedUrlError(EMSClientError):
    """Raised when a URL cannot be parsed."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        message = f"Malformed URL: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RequestTimeoutError(EMSClientError):
    """Raised when the fetch capability does not answer in time."""

    def __init__(self, url: str, timeout_seconds: float):
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Request to {url} timed out after {timeout_seconds}s")


class FetchFailedError(EMSClientError):
    """Raised when the fetch capability fails or answers with an error status."""

    def __init__(
        self,
        url: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.cause = cause
        self.status_code = status_code
        if status_code is not None:
            detail = f"status {status_code}"
        else:
            detail = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Request to {url} failed: {detail}")


class ManifestUnavailableError(EMSClientError):
    """Raised for any failure while loading a manifest document."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Unable to retrieve manifest from {url}: {detail}")


class NoStyleForLocaleError(EMSClientError):
    """Raised when a tile service has no style of a format in either locale."""

    def __init__(self, format_type: str, locale: str, default_locale: str):
        self.format_type = format_type
        self.locale = locale
        self.default_locale = default_locale
        super().__init__(
            f"Cannot find {format_type} tile layer for locale {locale} or {default_locale}"
        )


class InvalidVersionError(EMSClientError):
    """Raised when no catalog version can be resolved."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid version: {value}")


class UnsupportedLanguageError(EMSClientError):
    """Raised by the language transform for an unknown language."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f"{language} is not a supported language")


class UnsupportedOperationError(EMSClientError):
    """Raised by the colour transform for an unknown blend mode."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} is not a supported blend mode")


__all__ = [
    "EMSClientError",
    "MalformedUrlError",
    "RequestTimeoutError",
    "FetchFailedError",
    "ManifestUnavailableError",
    "NoStyleForLocaleError",
    "InvalidVersionError",
    "UnsupportedLanguageError",
    "UnsupportedOperationError",
]
