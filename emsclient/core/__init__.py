# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# CREATED: 18 OCT 2026
# ============================================================================

from emsclient.core.contracts import ServiceType, FormatType, StyleFormat, BlendMode
from emsclient.core.errors import (
    EMSClientError,
    MalformedUrlError,
    RequestTimeoutError,
    FetchFailedError,
    ManifestUnavailableError,
    NoStyleForLocaleError,
    InvalidVersionError,
    UnsupportedLanguageError,
    UnsupportedOperationError,
)

__all__ = [
    # Enums
    "ServiceType",
    "FormatType",
    "StyleFormat",
    "BlendMode",
    # Errors
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
