# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides the immutable client configuration and its defaults.
"""

from emsclient.core.config.defaults import (
    ClientDefaults,
    get_defaults,
    DEFAULT_LANGUAGE,
    DEFAULT_EMS_VERSION,
    EMS_LOAD_TIMEOUT_SECONDS,
    DEFAULT_CACHE_SIZE,
)
from emsclient.core.config.client_config import (
    ClientConfig,
    FetchFunction,
    HtmlSanitizer,
)

__all__ = [
    "ClientDefaults",
    "get_defaults",
    "DEFAULT_LANGUAGE",
    "DEFAULT_EMS_VERSION",
    "EMS_LOAD_TIMEOUT_SECONDS",
    "DEFAULT_CACHE_SIZE",
    "ClientConfig",
    "FetchFunction",
    "HtmlSanitizer",
]
