# ============================================================================
# CATALOG MANIFEST MODELS
# ============================================================================
# STATUS: Domain model - Wire shapes of the catalog service
# PURPOSE: Pydantic models for root, tile and file manifests
# CREATED: 18 OCT 2026
# ============================================================================
"""
Catalog Manifest Models

Wire format of the maps catalog:

    root catalog   {version?, services: [{id?, name?, manifest, type}]}
    tile catalog   {version?, services: [TMSServiceConfig]}
    file catalog   {version?, layers: [FileLayerConfig]}

Unknown fields are kept (extra="allow") so newer catalogs still parse.
File layer formats are a tagged union discriminated by ``type``; a format
type this client does not know parses as UnknownFormat instead of failing
the whole manifest.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from emsclient.core.contracts import FormatType, ServiceType


LocalizedStrings = Dict[str, str]


class ManifestModel(BaseModel):
    """Base for every catalog document."""

    model_config = ConfigDict(extra="allow")


# ============================================================================
# ROOT CATALOG
# ============================================================================

class CatalogService(ManifestModel):
    """One {serviceType, manifestURL} pair of the root catalog."""

    id: Optional[str] = None
    name: Optional[str] = None
    manifest: str
    type: str

    def is_type(self, service_type: ServiceType) -> bool:
        return self.type == service_type.value


class CatalogManifest(ManifestModel):
    """Root listing of per-type manifests."""

    version: Optional[str] = None
    services: List[CatalogService] = Field(default_factory=list)

    def first_of_type(self, service_type: ServiceType) -> Optional[CatalogService]:
        """First catalog entry of the given type, or None."""
        for service in self.services:
            if service.is_type(service_type):
                return service
        return None


# ============================================================================
# SHARED ENTITY BLOCKS
# ============================================================================

class Attribution(ManifestModel):
    """Attribution entry: locale-keyed label and locale-keyed URL."""

    label: LocalizedStrings = Field(default_factory=dict)
    url: LocalizedStrings = Field(default_factory=dict)


# ============================================================================
# TILE CATALOG
# ============================================================================

class TMSFormat(ManifestModel):
    """A style document published by a tile service."""

    locale: str
    format: str
    url: str


class TMSServiceConfig(ManifestModel):
    """Configuration block of one tile service."""

    id: str
    name: LocalizedStrings = Field(default_factory=dict)
    formats: List[TMSFormat] = Field(default_factory=list)
    attribution: List[Attribution] = Field(default_factory=list)


class TileCatalog(ManifestModel):
    """Per-type manifest listing tile services."""

    version: Optional[str] = None
    services: List[TMSServiceConfig] = Field(default_factory=list)


# ============================================================================
# FILE CATALOG
# ============================================================================

class FileLayerField(ManifestModel):
    """Field metadata of a file layer."""

    type: str
    id: str
    label: LocalizedStrings = Field(default_factory=dict)
    values: Optional[List[str]] = None
    regex: Optional[str] = None
    alias: Optional[List[str]] = None


class TopoJsonMeta(ManifestModel):
    """Metadata of a topojson format."""

    feature_collection_path: Optional[str] = None


class GeoJsonFormat(ManifestModel):
    type: Literal["geojson"] = "geojson"
    url: str
    legacy_default: bool = False

    @property
    def format_type(self) -> Optional[FormatType]:
        return FormatType.GEOJSON

    @property
    def meta(self) -> None:
        return None


class TopoJsonFormat(ManifestModel):
    type: Literal["topojson"] = "topojson"
    url: str
    legacy_default: bool = False
    meta: Optional[TopoJsonMeta] = None

    @property
    def format_type(self) -> Optional[FormatType]:
        return FormatType.TOPOJSON


class UnknownFormat(ManifestModel):
    """A format type this client cannot convert."""

    type: str
    url: str = ""
    legacy_default: bool = False

    @property
    def format_type(self) -> Optional[FormatType]:
        return None

    @property
    def meta(self) -> None:
        return None


def _format_tag(value: Any) -> str:
    """Discriminator: known format types map to themselves, others to 'unknown'."""
    if isinstance(value, dict):
        format_type = value.get("type")
    else:
        format_type = getattr(value, "type", None)
    if FormatType.parse(format_type) is not None:
        return format_type
    return "unknown"


FileLayerFormat = Annotated[
    Union[
        Annotated[GeoJsonFormat, Tag("geojson")],
        Annotated[TopoJsonFormat, Tag("topojson")],
        Annotated[UnknownFormat, Tag("unknown")],
    ],
    Discriminator(_format_tag),
]


class FileLayerConfig(ManifestModel):
    """Configuration block of one file layer."""

    layer_id: str
    created_at: Optional[str] = None
    formats: List[FileLayerFormat] = Field(default_factory=list)
    fields: List[FileLayerField] = Field(default_factory=list)
    legacy_ids: List[str] = Field(default_factory=list)
    layer_name: LocalizedStrings = Field(default_factory=dict)
    attribution: List[Attribution] = Field(default_factory=list)


class FileCatalog(ManifestModel):
    """Per-type manifest listing file layers."""

    version: Optional[str] = None
    layers: List[FileLayerConfig] = Field(default_factory=list)


__all__ = [
    "LocalizedStrings",
    "ManifestModel",
    "CatalogService",
    "CatalogManifest",
    "Attribution",
    "TMSFormat",
    "TMSServiceConfig",
    "TileCatalog",
    "FileLayerField",
    "TopoJsonMeta",
    "GeoJsonFormat",
    "TopoJsonFormat",
    "UnknownFormat",
    "FileLayerFormat",
    "FileLayerConfig",
    "FileCatalog",
]
