# ============================================================================
# EMS CLIENT PACKAGE
# ============================================================================
# STATUS: Package root
# PURPOSE: Public API of the Elastic Maps Service client
# CREATED: 18 OCT 2026
# ============================================================================
"""
Async client for the Elastic Maps Service catalog of tile services and
vector file layers.
"""

from emsclient.__version__ import __version__
from emsclient.core.config import ClientConfig
from emsclient.core.contracts import BlendMode, FormatType, ServiceType, StyleFormat
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
from emsclient.core.logging import configure_logging
from emsclient.core.models import FileLayerField, RasterStyle, VectorStyle
from emsclient.infrastructure.transport import HttpxFetcher
from emsclient.services import EMSClient, EmsService, FileLayer, TMSService

__all__ = [
    "__version__",
    # Client
    "EMSClient",
    "ClientConfig",
    "HttpxFetcher",
    "configure_logging",
    # Entities
    "EmsService",
    "TMSService",
    "FileLayer",
    "FileLayerField",
    "RasterStyle",
    "VectorStyle",
    # Enums
    "BlendMode",
    "FormatType",
    "ServiceType",
    "StyleFormat",
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
