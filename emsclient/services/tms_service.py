# ============================================================================
# TILE MAP SERVICE
# ============================================================================
# STATUS: Service - Entity facade for tile services
# PURPOSE: Locale-aware style resolution and vector style inlining
# CREATED: 18 OCT 2026
# ============================================================================
"""
Tile Map Service

Read-only view over one TMSServiceConfig of the tile catalog. Style
documents are fetched lazily and memoized per instance (one AsyncOnce per
stage):

    raster          RasterStyle for the locale-selected raster format
    vector (raw)    VectorStyle as published
    vector (inline) raw style with every source replaced by its fetched
                    TileJSON, tile URLs rewritten (absolute, proxied, query
                    parameters), attribution set to the service's HTML
                    attribution, and sprite/glyphs made absolute and proxied

Inlining issues one fetch per source that has a ``url``.

Style URL selection prefers the client locale, then the default locale,
and raises NoStyleForLocaleError when neither has a format.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from emsclient.core.contracts import BlendMode, StyleFormat
from emsclient.core.errors import NoStyleForLocaleError
from emsclient.core.logging import get_logger, log_context, ComponentType
from emsclient.core.models import (
    RasterStyle,
    TMSFormat,
    TMSServiceConfig,
    VectorSource,
    VectorStyle,
)
from emsclient.infrastructure.loader import AsyncOnce, parse_manifest
from emsclient.services import style_transforms
from emsclient.services.ems_service import EntitySupport

if TYPE_CHECKING:
    from emsclient.services.client import EMSClient

logger = get_logger(__name__, ComponentType.SERVICE)


class TMSService:
    """Facade over one tile service of the catalog."""

    SUPPORTED_LANGUAGES = style_transforms.SUPPORTED_LANGUAGES

    def __init__(self, config: TMSServiceConfig, client: "EMSClient", proxy_path: str = ""):
        self._config = config
        self._client = client
        self._support = EntitySupport(client, config.attribution, client.get_tile_api_url(), proxy_path)

        self._raster_style = AsyncOnce(self._load_raster_style, f"{config.id}.raster")
        self._vector_style_raw = AsyncOnce(self._load_vector_style_raw, f"{config.id}.vector_raw")
        self._vector_style_inlined = AsyncOnce(
            self._load_vector_style_inlined, f"{config.id}.vector_inlined"
        )

    def __repr__(self) -> str:
        return f"TMSService({self.get_id()!r})"

    # ------------------------------------------------------------------
    # STYLE UTILITIES
    # ------------------------------------------------------------------

    @staticmethod
    def transform_language_property(layer: Dict[str, Any], lang: str) -> Optional[Union[str, List[Any]]]:
        return style_transforms.transform_language_property(layer, lang)

    @staticmethod
    def transform_color_properties(
        layer: Dict[str, Any],
        color: Optional[str] = None,
        operation: Union[str, BlendMode] = BlendMode.MULTIPLY,
        percentage: float = 0,
    ) -> List[Dict[str, Any]]:
        return style_transforms.transform_color_properties(layer, color, operation, percentage)

    # ------------------------------------------------------------------
    # IDENTITY & ATTRIBUTION
    # ------------------------------------------------------------------

    def get_id(self) -> str:
        return self._config.id

    def has_id(self, id: str) -> bool:
        return self._config.id == id

    def get_display_name(self) -> str:
        return self._client.get_value_in_language(self._config.name)

    def get_attributions(self) -> List[Dict[str, str]]:
        return self._support.attributions()

    def get_markdown_attribution(self) -> str:
        return self._support.markdown_attribution()

    def get_html_attribution(self) -> str:
        return self._support.html_attribution()

    def get_origin(self) -> str:
        return self._support.origin()

    def get_api_url(self) -> str:
        return self._support.api_url

    # ------------------------------------------------------------------
    # STYLE LOADING
    # ------------------------------------------------------------------

    def _get_formats(self, format_type: StyleFormat, locale: str) -> List[TMSFormat]:
        return [
            style for style in self._config.formats
            if style.locale == locale and style.format == format_type.value
        ]

    def _get_style_url_for_locale(self, format_type: StyleFormat) -> str:
        locale = self._client.get_locale()
        default_locale = self._client.get_default_locale()
        formats = self._get_formats(format_type, locale)
        if not formats:
            formats = self._get_formats(format_type, default_locale)
        if not formats:
            raise NoStyleForLocaleError(format_type.value, locale, default_locale)
        return formats[0].url

    async def _fetch_style(self, format_type: StyleFormat, model):
        style_url = self._support.extended_url(self._get_style_url_for_locale(format_type))
        with log_context(service_id=self.get_id(), operation=f"{format_type.value}_style"):
            body = await self._client.get_manifest(style_url)
            return parse_manifest(style_url, body, model)

    async def _load_raster_style(self) -> RasterStyle:
        return await self._fetch_style(StyleFormat.RASTER, RasterStyle)

    async def _load_vector_style_raw(self) -> VectorStyle:
        return await self._fetch_style(StyleFormat.VECTOR, VectorStyle)

    async def _inline_source(self, source: VectorSource, attribution: str) -> VectorSource:
        source_url = self._support.extended_url(source.url)
        body = await self._client.get_manifest(source_url)
        fetched = parse_manifest(source_url, body, VectorSource)
        tiles = [self._support.extended_url(tile) for tile in fetched.tiles or []]
        return fetched.model_copy(update={
            "type": "vector",
            "tiles": tiles,
            "attribution": attribution,
        })

    async def _load_vector_style_inlined(self) -> VectorStyle:
        raw = await self._vector_style_raw()
        attribution = self.get_html_attribution()

        names = [name for name, source in raw.sources.items() if source.url]
        with log_context(service_id=self.get_id(), operation="inline_sources"):
            logger.debug(f"Inlining {len(names)} sources")
            fetched = await asyncio.gather(
                *(self._inline_source(raw.sources[name], attribution) for name in names)
            )
        inlined = dict(zip(names, fetched))

        # Sources without a url are already self-contained
        sources = {name: inlined.get(name, source) for name, source in raw.sources.items()}
        return raw.model_copy(update={
            "sources": sources,
            "sprite": self._support.proxied_url(raw.sprite),
            "glyphs": self._support.proxied_url(raw.glyphs),
        })

    # ------------------------------------------------------------------
    # RASTER
    # ------------------------------------------------------------------

    async def get_default_raster_style(self) -> RasterStyle:
        """Raster TileJSON with absolute, proxied tile URLs."""
        style = await self._raster_style()
        tiles = [self._support.proxied_url(tile) for tile in style.tiles]
        return style.model_copy(update={"tiles": tiles})

    async def get_url_template(self) -> str:
        """First raster tile URL template, ready to request; "" without tiles."""
        style = await self._raster_style()
        if not style.tiles:
            return ""
        return self._support.extended_url(style.tiles[0])

    async def get_min_zoom(self) -> Optional[int]:
        return (await self._raster_style()).minzoom

    async def get_max_zoom(self) -> Optional[int]:
        return (await self._raster_style()).maxzoom

    # ------------------------------------------------------------------
    # VECTOR
    # ------------------------------------------------------------------

    async def get_vector_style_sheet(self) -> VectorStyle:
        """Self-contained vector style with every source inlined."""
        return await self._vector_style_inlined()

    async def get_vector_style_sheet_raw(self) -> VectorStyle:
        """Vector style as published, without further requests."""
        return await self._vector_style_raw()

    async def get_url_template_for_vector(self, source_id: str) -> str:
        """Last tile URL template of an inlined source; "" when absent."""
        style = await self._vector_style_inlined()
        source = style.sources.get(source_id)
        if source is None or not source.tiles:
            return ""
        # Inlined tiles are already absolute and proxied
        return self._client.extend_url_with_params(source.tiles[-1])

    async def _get_sprite_sheet_root_path(self) -> str:
        style = await self._vector_style_raw()
        return self._support.proxied_url(style.sprite) or ""

    async def get_url_template_for_glyphs(self) -> str:
        style = await self._vector_style_raw()
        return self._support.proxied_url(style.glyphs) or ""

    async def get_sprite_sheet_json_path(self, is_retina: bool = False) -> str:
        root = await self._get_sprite_sheet_root_path()
        if not root:
            return ""
        return root + ("@2x" if is_retina else "") + ".json"

    async def get_sprite_sheet_png_path(self, is_retina: bool = False) -> str:
        root = await self._get_sprite_sheet_root_path()
        if not root:
            return ""
        return root + ("@2x" if is_retina else "") + ".png"

    async def get_sprite_sheet_meta(self, is_retina: bool = False) -> Optional[Dict[str, Any]]:
        """Sprite sheet image path and its fetched JSON index, or None."""
        json_path = await self.get_sprite_sheet_json_path(is_retina)
        png_path = await self.get_sprite_sheet_png_path(is_retina)
        if not json_path or not png_path:
            return None
        sprites = await self._client.get_manifest(self._client.extend_url_with_params(json_path))
        return {"png": png_path, "json": sprites}


__all__ = ["TMSService"]
