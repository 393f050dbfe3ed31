# ============================================================================
# FILE LAYER
# ============================================================================
# STATUS: Service - Entity facade for vector file layers
# PURPOSE: Format selection, localized metadata and cached layer data
# CREATED: 18 OCT 2026
# ============================================================================
"""
File Layer

Read-only view over one FileLayerConfig of the file catalog. Instances are
created once per configuration epoch by the client and are cheap to
discard.

Format selection:
- default format: the one flagged ``legacy_default``, else the first one
- format of type: the first format of that type, else the default format

get_geojson() returns the layer data as a GeoJSON FeatureCollection,
consulting the client's derived-artifact cache first.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from emsclient.core.logging import get_logger, log_context, ComponentType
from emsclient.core.models import FileLayerConfig, FileLayerField, FileLayerFormat
from emsclient.infrastructure.urls import with_fragment
from emsclient.services.ems_service import EntitySupport
from emsclient.services.formats import convert_to_feature_collection

if TYPE_CHECKING:
    from emsclient.services.client import EMSClient

logger = get_logger(__name__, ComponentType.SERVICE)


class FileLayer:
    """Facade over one file layer of the catalog."""

    def __init__(self, config: FileLayerConfig, client: "EMSClient", proxy_path: str = ""):
        self._config = config
        self._client = client
        self._support = EntitySupport(client, config.attribution, client.get_file_api_url(), proxy_path)

    def __repr__(self) -> str:
        return f"FileLayer({self.get_id()!r})"

    # ------------------------------------------------------------------
    # IDENTITY & ATTRIBUTION
    # ------------------------------------------------------------------

    def get_id(self) -> str:
        return self._config.layer_id

    def has_id(self, id: str) -> bool:
        """Match the layer id or any of its legacy ids."""
        return self._config.layer_id == id or id in self._config.legacy_ids

    def get_display_name(self) -> str:
        return self._client.get_value_in_language(self._config.layer_name) or ""

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

    def get_created_at(self) -> Optional[str]:
        return self._config.created_at

    def get_ems_hot_link(self) -> str:
        """Landing page link focused on this layer in the client locale."""
        return with_fragment(
            self._client.get_landing_page_url(),
            f"file/{self.get_id()}",
            {"locale": self._client.get_locale()},
        )

    # ------------------------------------------------------------------
    # FIELDS
    # ------------------------------------------------------------------

    def get_fields(self) -> List[FileLayerField]:
        return self._config.fields

    def get_fields_in_language(self) -> List[Dict[str, str]]:
        return [
            {
                "type": field.type,
                "name": field.id,
                "description": self._client.get_value_in_language(field.label),
            }
            for field in self.get_fields()
        ]

    # ------------------------------------------------------------------
    # FORMATS
    # ------------------------------------------------------------------

    def _get_default_format(self) -> Optional[FileLayerFormat]:
        for layer_format in self._config.formats:
            if layer_format.legacy_default:
                return layer_format
        return self._config.formats[0] if self._config.formats else None

    def _get_format_of_type(self, format_type: str) -> Optional[FileLayerFormat]:
        for layer_format in self._config.formats:
            if layer_format.type == format_type:
                return layer_format
        return self._get_default_format()

    def _format_url(self, layer_format: Optional[FileLayerFormat]) -> Optional[str]:
        if layer_format is None or not layer_format.url:
            return None
        return self._support.extended_url(layer_format.url)

    @staticmethod
    def _format_meta(layer_format: Optional[FileLayerFormat]) -> Optional[Dict[str, Any]]:
        meta = getattr(layer_format, "meta", None)
        if meta is None:
            return None
        return meta.model_dump(exclude_none=True)

    def get_default_format_type(self) -> Optional[str]:
        layer_format = self._get_default_format()
        return layer_format.type if layer_format is not None else None

    def get_default_format_url(self) -> Optional[str]:
        return self._format_url(self._get_default_format())

    def get_default_format_meta(self) -> Optional[Dict[str, Any]]:
        return self._format_meta(self._get_default_format())

    def get_format_of_type(self, format_type: str) -> Optional[str]:
        layer_format = self._get_format_of_type(format_type)
        return layer_format.type if layer_format is not None else None

    def get_format_of_type_url(self, format_type: str) -> Optional[str]:
        return self._format_url(self._get_format_of_type(format_type))

    def get_format_of_type_meta(self, format_type: str) -> Optional[Dict[str, Any]]:
        return self._format_meta(self._get_format_of_type(format_type))

    # ------------------------------------------------------------------
    # DATA
    # ------------------------------------------------------------------

    async def get_geojson(self) -> Optional[Dict[str, Any]]:
        """
        Layer data as a GeoJSON FeatureCollection.

        Served from the derived-artifact cache when present; otherwise the
        default format is fetched, converted and cached. Returns None when
        the layer has no convertible format.

        Raises:
            ManifestUnavailableError: The layer document could not be loaded.
        """
        return await self._client.load_geojson(self.get_id(), self._fetch_geojson)

    async def _fetch_geojson(self) -> Optional[Dict[str, Any]]:
        layer_format = self._get_default_format()
        if layer_format is None or layer_format.format_type is None:
            logger.debug(f"No convertible format for layer {self.get_id()}")
            return None

        url = self._format_url(layer_format)
        with log_context(layer_id=self.get_id(), operation="get_geojson"):
            body = await self._client.get_manifest(url)
            return convert_to_feature_collection(layer_format, body)


__all__ = ["FileLayer"]
