# ============================================================================
# CORE MODELS
# ============================================================================
# STATUS: Core - Model exports
# PURPOSE: Export catalog manifest and style document models
# CREATED: 18 OCT 2026
# ============================================================================

from emsclient.core.models.manifest import (
    LocalizedStrings,
    ManifestModel,
    CatalogService,
    CatalogManifest,
    Attribution,
    TMSFormat,
    TMSServiceConfig,
    TileCatalog,
    FileLayerField,
    TopoJsonMeta,
    GeoJsonFormat,
    TopoJsonFormat,
    UnknownFormat,
    FileLayerFormat,
    FileLayerConfig,
    FileCatalog,
)
from emsclient.core.models.style import (
    StyleModel,
    RasterStyle,
    VectorSource,
    VectorStyle,
)

__all__ = [
    # Manifests
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
    # Styles
    "StyleModel",
    "RasterStyle",
    "VectorSource",
    "VectorStyle",
]
