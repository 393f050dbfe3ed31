# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Service - Client and entity facades
# PURPOSE: Catalog resolution, tile services, file layers, style utilities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

The EMSClient resolves the catalog once per configuration epoch and hands
out TMSService and FileLayer facades.

Usage:
    from emsclient.services import EMSClient

    client = EMSClient(fetch_function=fetch, tile_api_url=..., file_api_url=...)
    layer = await client.find_file_layer_by_id("world_countries")
    feature_collection = await layer.get_geojson()
"""

from .catalog import CatalogResolver, resolve_version
from .ems_service import EmsService
from .file_layer import FileLayer
from .tms_service import TMSService
from .client import EMSClient

__all__ = [
    "CatalogResolver",
    "resolve_version",
    "EmsService",
    "FileLayer",
    "TMSService",
    "EMSClient",
]
