# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for locale, versioning, timeouts, caching
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Constant values used by the client when the configuration leaves a field
unset. The default language is the default locale of the maps service,
not of the embedding application.

Design:
- Immutable dataclass for defaults
- Type-safe access
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class ClientDefaults:
    """Defaults applied by ClientConfig and the catalog resolver."""

    default_language: str = "en"
    default_app_name: str = "kibana"

    # Catalog version used when the configured one cannot be coerced
    default_ems_version: str = "8.1"

    # Bounded wait for a single fetch (32000 ms)
    load_timeout_seconds: float = 32.0

    # Derived-artifact cache capacity
    cache_size: int = 10

    # Consent parameter sent with every request
    terms_of_service_param: str = "elastic_tile_service_tos"
    terms_of_service_value: str = "agree"
    app_name_param: str = "my_app_name"
    app_version_param: str = "my_app_version"

    # Fallback collection name inside a topojson document
    feature_collection_path: str = "data"

    def seed_query_params(self, app_name: str, app_version: str) -> Dict[str, str]:
        """Fixed consent/identification parameters in wire order."""
        return {
            self.terms_of_service_param: self.terms_of_service_value,
            self.app_name_param: app_name,
            self.app_version_param: app_version,
        }


_defaults = ClientDefaults()


def get_defaults() -> ClientDefaults:
    """Get the shared defaults instance."""
    return _defaults


DEFAULT_LANGUAGE = _defaults.default_language
DEFAULT_EMS_VERSION = _defaults.default_ems_version
EMS_LOAD_TIMEOUT_SECONDS = _defaults.load_timeout_seconds
DEFAULT_CACHE_SIZE = _defaults.cache_size


__all__ = [
    "ClientDefaults",
    "get_defaults",
    "DEFAULT_LANGUAGE",
    "DEFAULT_EMS_VERSION",
    "EMS_LOAD_TIMEOUT_SECONDS",
    "DEFAULT_CACHE_SIZE",
]
