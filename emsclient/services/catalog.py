# ============================================================================
# CATALOG RESOLVER
# ============================================================================
# STATUS: Service - Two-level catalog resolution
# PURPOSE: Root catalog -> per-type manifest -> entity facades, per epoch
# CREATED: 18 OCT 2026
# ============================================================================
"""
Catalog Resolver

Walks the two-level catalog for one configuration epoch:

    uninitialized -> root catalog -> per-type manifest -> entities

Each transition is an AsyncOnce handle owned by the CatalogResolver, so
every network step runs at most once per epoch. The owning client replaces
the whole resolver when its query parameters change; a new resolver starts
with fresh, unstarted handles.

Root catalog strategies (selected once from the configuration):

- ApiUrlCatalog: builds {type, manifest} entries from the configured tile
  and file API URLs and the resolved catalog version. No network call.
- LegacyManifestCatalog: fetches a single externally supplied root catalog.
  Deprecated; emits a deprecation warning every time an epoch loads it.

Version resolution accepts a date-stamped API revision (YYYY-MM-DD) verbatim
and otherwise coerces any version-like input to ``vMAJOR.MINOR``.
"""

import re
import warnings
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from emsclient.core.config import DEFAULT_EMS_VERSION
from emsclient.core.contracts import ServiceType
from emsclient.core.errors import InvalidVersionError
from emsclient.core.logging import get_logger, log_context, ComponentType
from emsclient.core.models import (
    CatalogManifest,
    CatalogService,
    FileCatalog,
    FileLayerConfig,
    TileCatalog,
    TMSServiceConfig,
)
from emsclient.infrastructure.loader import AsyncOnce, parse_manifest
from emsclient.infrastructure.urls import join_proxy_path, to_absolute

logger = get_logger(__name__, ComponentType.CATALOG)

GetManifest = Callable[[str], Awaitable[Any]]
ExtendUrl = Callable[[str], str]


# ============================================================================
# VERSION RESOLUTION
# ============================================================================

API_REVISION_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_VERSION_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_version(value: Any) -> Optional[Tuple[int, int, int]]:
    """
    Extract the first ``MAJOR[.MINOR[.PATCH]]`` run from ``value``.

    Missing parts default to 0. Returns None when no digits are found.

    Examples:
        >>> coerce_version("7.x.x")
        (7, 0, 0)
        >>> coerce_version("v8.13.2-SNAPSHOT")
        (8, 13, 2)
    """
    if value is None:
        return None
    match = _VERSION_RE.search(str(value))
    if not match:
        return None
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return major, minor, patch


def resolve_version(version: Optional[str], default: str = DEFAULT_EMS_VERSION) -> str:
    """
    Resolve the catalog version token used in manifest paths.

    Raises:
        InvalidVersionError: Neither ``version`` nor ``default`` can be coerced.
    """
    if isinstance(version, str) and API_REVISION_RE.match(version.strip()):
        return version.strip()

    coerced = coerce_version(version) or coerce_version(default)
    if coerced is None:
        raise InvalidVersionError(version)
    major, minor, _ = coerced
    return f"v{major}.{minor}"


# ============================================================================
# ROOT CATALOG STRATEGIES
# ============================================================================

class CatalogStrategy(ABC):
    """How the root catalog of an epoch is obtained."""

    name: str = ""

    @abstractmethod
    async def load(self, get_manifest: GetManifest, extend_url: ExtendUrl) -> CatalogManifest:
        """Produce the root catalog."""


class ApiUrlCatalog(CatalogStrategy):
    """Root catalog built from the tile/file API URLs and the version token."""

    name = "api_url"

    def __init__(self, tile_api_url: str, file_api_url: str, version: str):
        self.tile_api_url = tile_api_url
        self.file_api_url = file_api_url
        self.version = version

    def manifest_url(self, api_url: str) -> str:
        return to_absolute(api_url, f"{self.version}/manifest")

    async def load(self, get_manifest: GetManifest, extend_url: ExtendUrl) -> CatalogManifest:
        services: List[CatalogService] = []
        if self.tile_api_url:
            services.append(CatalogService(
                type=ServiceType.TMS.value,
                manifest=self.manifest_url(self.tile_api_url),
            ))
        if self.file_api_url:
            services.append(CatalogService(
                type=ServiceType.FILE.value,
                manifest=self.manifest_url(self.file_api_url),
            ))
        return CatalogManifest(services=services)


class LegacyManifestCatalog(CatalogStrategy):
    """Root catalog fetched from a single manifest URL (deprecated)."""

    name = "legacy_manifest"

    DEPRECATION_MESSAGE = (
        'The "manifest_service_url" parameter is deprecated. '
        'Consider using "tile_api_url" and "file_api_url" instead.'
    )

    def __init__(self, manifest_service_url: str):
        self.manifest_service_url = manifest_service_url

    async def load(self, get_manifest: GetManifest, extend_url: ExtendUrl) -> CatalogManifest:
        logger.warning(self.DEPRECATION_MESSAGE)
        warnings.warn(self.DEPRECATION_MESSAGE, DeprecationWarning, stacklevel=2)
        url = extend_url(self.manifest_service_url)
        body = await get_manifest(url)
        return parse_manifest(url, body, CatalogManifest)


def select_catalog_strategy(
    tile_api_url: str,
    file_api_url: str,
    version: str,
    manifest_service_url: Optional[str] = None,
) -> CatalogStrategy:
    """The legacy manifest URL, when configured, takes precedence."""
    if manifest_service_url:
        return LegacyManifestCatalog(manifest_service_url)
    return ApiUrlCatalog(tile_api_url, file_api_url, version)


# ============================================================================
# RESOLVER (ONE PER EPOCH)
# ============================================================================

class CatalogResolver:
    """
    Memoized catalog walk for one configuration epoch.

    Entity construction is delegated to the factories supplied by the owning
    client, so facades are created once per epoch and keep their own style
    memoization for the rest of it.
    """

    def __init__(
        self,
        strategy: CatalogStrategy,
        get_manifest: GetManifest,
        extend_url: ExtendUrl,
        proxy_path: str,
        build_tms_service: Callable[[TMSServiceConfig], Any],
        build_file_layer: Callable[[FileLayerConfig], Any],
        epoch: int = 0,
    ):
        self.strategy = strategy
        self.epoch = epoch
        self._get_manifest = get_manifest
        self._extend_url = extend_url
        self._proxy_path = proxy_path
        self._build_tms_service = build_tms_service
        self._build_file_layer = build_file_layer

        self.main_catalog = AsyncOnce(self._load_main_catalog, "main_catalog")
        self.default_tms_catalog = AsyncOnce(self._load_default_tms_catalog, "default_tms_catalog")
        self.default_file_catalog = AsyncOnce(self._load_default_file_catalog, "default_file_catalog")
        self.tms_services = AsyncOnce(self._load_tms_services, "tms_services")
        self.file_layers = AsyncOnce(self._load_file_layers, "file_layers")

    async def _load_main_catalog(self) -> CatalogManifest:
        with log_context(epoch=self.epoch, operation="main_catalog"):
            catalog = await self.strategy.load(self._get_manifest, self._extend_url)
            logger.debug(
                f"Root catalog loaded with {len(catalog.services)} services",
                extra={"strategy": self.strategy.name},
            )
            return catalog

    async def _per_type_manifest_url(self, service_type: ServiceType) -> Optional[str]:
        catalog = await self.main_catalog()
        service = catalog.first_of_type(service_type)
        if service is None:
            logger.debug(f"No {service_type.value} service in root catalog")
            return None
        return join_proxy_path(self._proxy_path, service.manifest)

    async def _load_default_tms_catalog(self) -> TileCatalog:
        url = await self._per_type_manifest_url(ServiceType.TMS)
        if url is None:
            return TileCatalog()
        body = await self._get_manifest(url)
        return parse_manifest(url, body, TileCatalog)

    async def _load_default_file_catalog(self) -> FileCatalog:
        url = await self._per_type_manifest_url(ServiceType.FILE)
        if url is None:
            return FileCatalog()
        body = await self._get_manifest(url)
        return parse_manifest(url, body, FileCatalog)

    async def _load_tms_services(self) -> list:
        manifest = await self.default_tms_catalog()
        return [self._build_tms_service(config) for config in manifest.services]

    async def _load_file_layers(self) -> list:
        manifest = await self.default_file_catalog()
        return [self._build_file_layer(config) for config in manifest.layers]


__all__ = [
    "API_REVISION_RE",
    "coerce_version",
    "resolve_version",
    "CatalogStrategy",
    "ApiUrlCatalog",
    "LegacyManifestCatalog",
    "select_catalog_strategy",
    "CatalogResolver",
]
