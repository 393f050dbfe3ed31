# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared by models and services
# PURPOSE: Discriminators for catalog services, file formats, styles, blends
# CREATED: 18 OCT 2026
# EXPORTS: ServiceType, FormatType, StyleFormat, BlendMode, ORIGIN_EMS
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the EMS client.

These enums are the explicit tags that replace shape probing on manifest
documents:
- ServiceType: entries of the root catalog
- FormatType: file layer formats (tagged union discriminator)
- StyleFormat: tile service style documents
- BlendMode: colour operations of the style utilities
"""

from enum import Enum


ORIGIN_EMS = "elastic_maps_service"


class ServiceType(str, Enum):
    """Entry types of the root catalog."""
    TMS = "tms"
    FILE = "file"


class FormatType(str, Enum):
    """
    File layer formats.

    GEOJSON bodies are used as-is, TOPOJSON bodies are decoded into a
    feature collection before caching.
    """
    GEOJSON = "geojson"
    TOPOJSON = "topojson"

    @classmethod
    def parse(cls, value: str):
        """Return the matching member or None for an unknown format."""
        try:
            return cls(value)
        except ValueError:
            return None


class StyleFormat(str, Enum):
    """Style document families published per tile service."""
    RASTER = "raster"
    VECTOR = "vector"


class BlendMode(str, Enum):
    """Colour blend operations for style recolouring."""
    MULTIPLY = "multiply"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    SCREEN = "screen"
    OVERLAY = "overlay"
    BURN = "burn"
    DODGE = "dodge"


__all__ = [
    "ORIGIN_EMS",
    "ServiceType",
    "FormatType",
    "StyleFormat",
    "BlendMode",
]
