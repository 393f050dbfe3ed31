# ============================================================================
# EMS CLIENT
# ============================================================================
# STATUS: Service - Public entry point
# PURPOSE: Configuration epochs, query parameters and catalog access
# CREATED: 18 OCT 2026
# ============================================================================
"""
EMS Client

Owns everything that outlives a single configuration epoch:

- the ClientConfig and the resolved catalog version
- the query-parameter set sent with every request
- the ManifestLoader (fetch with timeout, status check, JSON body)
- the derived-artifact cache

and one CatalogResolver holding the memoized loaders of the current epoch.

Epochs:
    add_query_params() with at least one changed value clears the artifact
    cache and installs a fresh CatalogResolver in the same synchronous step.
    Callers that already hold entities from the previous epoch keep them,
    but new lookups go through the new resolver and fetch again.

Usage:
    from emsclient import EMSClient, HttpxFetcher

    async with HttpxFetcher() as fetcher:
        client = EMSClient(
            fetch_function=fetcher,
            app_name="kibana",
            app_version="8.6.0",
            tile_api_url="https://tiles.maps.elastic.co",
            file_api_url="https://vector.maps.elastic.co",
        )
        services = await client.get_tms_services()
"""

from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from emsclient.core.config import ClientConfig, get_defaults
from emsclient.core.logging import get_logger, log_context, ComponentType
from emsclient.core.models import (
    CatalogManifest,
    FileCatalog,
    FileLayerConfig,
    TileCatalog,
    TMSServiceConfig,
)
from emsclient.infrastructure.cache import ArtifactCache
from emsclient.infrastructure.loader import ManifestLoader
from emsclient.infrastructure.urls import unescape_template_placeholders, with_query_params
from emsclient.services.catalog import CatalogResolver, resolve_version, select_catalog_strategy
from emsclient.services.file_layer import FileLayer
from emsclient.services.tms_service import TMSService

logger = get_logger(__name__, ComponentType.CLIENT)


class EMSClient:
    """Client for the Elastic Maps Service catalog."""

    def __init__(self, config: Optional[ClientConfig] = None, **kwargs: Any):
        if config is None:
            config = ClientConfig(**kwargs)
        elif kwargs:
            config = replace(config, **kwargs)
        config.warn_deprecations()

        defaults = get_defaults()
        self.config = config
        self._ems_version = resolve_version(config.ems_version)

        self._query_params: Dict[str, str] = defaults.seed_query_params(
            config.app_name, config.resolved_app_version or ""
        )
        self._query_params.update(
            {key: str(value) for key, value in config.additional_query_params.items()}
        )

        self._loader = ManifestLoader(
            config.fetch_function,
            lambda: self._query_params,
            defaults.load_timeout_seconds,
        )
        self._cache: ArtifactCache[Dict[str, Any]] = ArtifactCache(config.cache_size)
        self._strategy = select_catalog_strategy(
            config.tile_api_url,
            config.file_api_url,
            self._ems_version,
            config.manifest_service_url,
        )
        self._epoch = 0
        self._catalog = self._new_catalog()

    def __repr__(self) -> str:
        return f"EMSClient(version={self._ems_version!r}, epoch={self._epoch})"

    # ------------------------------------------------------------------
    # EPOCHS
    # ------------------------------------------------------------------

    def _new_catalog(self) -> CatalogResolver:
        return CatalogResolver(
            strategy=self._strategy,
            get_manifest=lambda url: self.get_manifest(url),
            extend_url=self.extend_url_with_params,
            proxy_path=self.config.proxy_path,
            build_tms_service=self._build_tms_service,
            build_file_layer=self._build_file_layer,
            epoch=self._epoch,
        )

    def _build_tms_service(self, config: TMSServiceConfig) -> TMSService:
        return TMSService(config, self, self.config.proxy_path)

    def _build_file_layer(self, config: FileLayerConfig) -> FileLayer:
        return FileLayer(config, self, self.config.proxy_path)

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def ems_version(self) -> str:
        return self._ems_version

    @property
    def load_timeout_seconds(self) -> float:
        return self._loader.timeout_seconds

    # ------------------------------------------------------------------
    # QUERY PARAMETERS
    # ------------------------------------------------------------------

    def get_query_params(self) -> Dict[str, str]:
        return dict(self._query_params)

    def add_query_params(self, additional_query_params: Mapping[str, Any]) -> None:
        """
        Merge parameters into the query-parameter set.

        When any value actually changes, the artifact cache is cleared and a
        new configuration epoch starts. Identical values are a no-op.
        """
        updates = {key: str(value) for key, value in additional_query_params.items()}
        changed = [key for key, value in updates.items() if self._query_params.get(key) != value]
        if not changed:
            return

        query_params = dict(self._query_params)
        query_params.update(updates)

        self._cache.clear()
        self._query_params = query_params
        self._epoch += 1
        self._catalog = self._new_catalog()

        logger.info(
            f"Query parameters changed, starting epoch {self._epoch}",
            extra={"changed": changed},
        )

    def extend_url_with_params(self, url: str) -> str:
        """Apply the current query parameters, keeping ``{z}/{x}/{y}`` placeholders."""
        return unescape_template_placeholders(with_query_params(url, self._query_params))

    # ------------------------------------------------------------------
    # MANIFESTS
    # ------------------------------------------------------------------

    async def get_manifest(self, url: str) -> Any:
        """Fetch a JSON document, raising ManifestUnavailableError on failure."""
        with log_context(url=url, epoch=self._epoch):
            return await self._loader.get_manifest(url)

    async def get_main_manifest(self) -> CatalogManifest:
        return await self._catalog.main_catalog()

    async def get_default_tms_manifest(self) -> TileCatalog:
        return await self._catalog.default_tms_catalog()

    async def get_default_file_manifest(self) -> FileCatalog:
        return await self._catalog.default_file_catalog()

    async def get_tms_services(self) -> List[TMSService]:
        return await self._catalog.tms_services()

    async def get_file_layers(self) -> List[FileLayer]:
        return await self._catalog.file_layers()

    async def find_tms_service_by_id(self, id: str) -> Optional[TMSService]:
        for service in await self.get_tms_services():
            if service.has_id(id):
                return service
        return None

    async def find_file_layer_by_id(self, id: str) -> Optional[FileLayer]:
        for layer in await self.get_file_layers():
            if layer.has_id(id):
                return layer
        return None

    # ------------------------------------------------------------------
    # DERIVED ARTIFACTS
    # ------------------------------------------------------------------

    async def load_geojson(
        self,
        id: str,
        loader: Callable[[], Awaitable[Optional[Dict[str, Any]]]],
    ) -> Optional[Dict[str, Any]]:
        """Cached feature collection for ``id``, loading it once on a miss."""
        with log_context(layer_id=id, operation="load_geojson"):
            return await self._cache.get_or_load(id, loader)

    def cache_geojson(self, id: str, feature_collection: Dict[str, Any]) -> None:
        self._cache.set(id, feature_collection)

    def get_cached_geojson(self, id: str) -> Optional[Dict[str, Any]]:
        return self._cache.get(id)

    # ------------------------------------------------------------------
    # LOCALE & PRESENTATION
    # ------------------------------------------------------------------

    @staticmethod
    def get_default_locale() -> str:
        return get_defaults().default_language

    def get_locale(self) -> str:
        return self.config.language

    def get_value_in_language(self, i18n: Optional[Mapping[str, str]]) -> str:
        """Value for the client locale, else for the default locale, else ""."""
        if not i18n:
            return ""
        value = i18n.get(self.get_locale())
        if value:
            return value
        return i18n.get(self.get_default_locale()) or ""

    def get_tile_api_url(self) -> str:
        return self.config.tile_api_url

    def get_file_api_url(self) -> str:
        return self.config.file_api_url

    def get_landing_page_url(self) -> str:
        return self.config.landing_page_url

    def sanitize_html(self, html: str) -> str:
        return self.config.html_sanitizer(html)


__all__ = ["EMSClient"]
