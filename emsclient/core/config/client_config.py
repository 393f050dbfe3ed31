# ============================================================================
# CLIENT CONFIGURATION
# ============================================================================
# STATUS: Core - Configuration management
# PURPOSE: Immutable client configuration with environment loading
# CREATED: 18 OCT 2026
# ============================================================================
"""
Client Configuration

Supplied once when an EMSClient is constructed and never mutated. The
query-parameter set derived from it is the only part of the client state
that changes afterwards (see EMSClient.add_query_params).

Two mutually exclusive catalog strategies are selected here:
- tile_api_url / file_api_url combined with the catalog version
- manifest_service_url (deprecated), a single root catalog URL that takes
  precedence when set
"""

import os
import warnings
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from emsclient.core.config.defaults import get_defaults
from emsclient.core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.CLIENT)

FetchFunction = Callable[[str], Awaitable[Any]]
HtmlSanitizer = Callable[[str], str]


def _identity(html: str) -> str:
    return html


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an EMSClient."""

    # Transport (mandatory)
    fetch_function: Optional[FetchFunction] = None

    # Identification sent with every request
    app_version: Optional[str] = None
    app_name: str = get_defaults().default_app_name
    kbn_version: Optional[str] = None  # deprecated alias of app_version

    # Catalog endpoints
    tile_api_url: str = ""
    file_api_url: str = ""
    manifest_service_url: Optional[str] = None  # deprecated
    ems_version: Optional[str] = None

    # Presentation
    language: str = get_defaults().default_language
    landing_page_url: str = ""
    html_sanitizer: HtmlSanitizer = _identity

    # Rewriting and caching
    proxy_path: str = ""
    cache_size: int = get_defaults().cache_size
    additional_query_params: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.fetch_function is None:
            raise ValueError("fetch_function is required")
        if self.cache_size <= 0:
            raise ValueError(f"cache_size must be positive, got {self.cache_size}")
        if self.html_sanitizer is None:
            object.__setattr__(self, "html_sanitizer", _identity)

    @property
    def resolved_app_version(self) -> Optional[str]:
        """app_version, falling back to the deprecated kbn_version."""
        return self.app_version or self.kbn_version

    @property
    def uses_legacy_manifest(self) -> bool:
        """True when the deprecated single manifest URL is configured."""
        return bool(self.manifest_service_url)

    def warn_deprecations(self) -> None:
        """Emit warnings for deprecated fields that are in use."""
        if self.kbn_version:
            message = (
                'The "kbn_version" parameter is deprecated. '
                'Please use "app_version" instead.'
            )
            logger.warning(message)
            warnings.warn(message, DeprecationWarning, stacklevel=3)

    @classmethod
    def from_env(cls, fetch_function: FetchFunction, **overrides: Any) -> "ClientConfig":
        """Load configuration from environment variables."""
        defaults = get_defaults()
        values: Dict[str, Any] = dict(
            fetch_function=fetch_function,
            app_name=os.environ.get("EMS_APP_NAME", defaults.default_app_name),
            app_version=os.environ.get("EMS_APP_VERSION"),
            tile_api_url=os.environ.get("EMS_TILE_API_URL", ""),
            file_api_url=os.environ.get("EMS_FILE_API_URL", ""),
            manifest_service_url=os.environ.get("EMS_MANIFEST_SERVICE_URL") or None,
            ems_version=os.environ.get("EMS_VERSION"),
            language=os.environ.get("EMS_LANGUAGE", defaults.default_language),
            landing_page_url=os.environ.get("EMS_LANDING_PAGE_URL", ""),
            proxy_path=os.environ.get("EMS_PROXY_PATH", ""),
            cache_size=int(os.environ.get("EMS_CACHE_SIZE", defaults.cache_size)),
        )
        values.update(overrides)
        return cls(**values)


__all__ = ["ClientConfig", "FetchFunction", "HtmlSanitizer"]
