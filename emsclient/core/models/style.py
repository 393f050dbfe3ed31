# ============================================================================
# STYLE DOCUMENT MODELS
# ============================================================================
# STATUS: Domain model - Raster and vector style documents
# PURPOSE: Typed views over style JSON fetched per tile service
# CREATED: 18 OCT 2026
# ============================================================================
"""
Style Document Models

Tile services publish two style families, tagged by StyleFormat:

- RasterStyle: a TileJSON document (tiles, zoom range, bounds).
- VectorStyle: a map style whose ``sources`` each point to their own
  TileJSON document. Inlining replaces every source with the fetched,
  URL-rewritten document.

Only the keys the client reads or rewrites are typed; everything else is
carried through untouched (extra="allow"). Use ``to_dict()`` to hand a
document to a renderer.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from emsclient.core.contracts import StyleFormat


class StyleModel(BaseModel):
    """Base for style documents."""

    model_config = ConfigDict(extra="allow")

    style_format: ClassVar[Optional[StyleFormat]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible dict, without unset optional keys."""
        return self.model_dump(exclude_none=True)


class RasterStyle(StyleModel):
    """TileJSON document of a raster tile service."""

    style_format: ClassVar[Optional[StyleFormat]] = StyleFormat.RASTER

    tilejson: Optional[str] = None
    name: Optional[str] = None
    attribution: Optional[str] = None
    minzoom: Optional[int] = None
    maxzoom: Optional[int] = None
    bounds: Optional[List[float]] = None
    center: Optional[List[float]] = None
    format: Optional[str] = None
    type: Optional[str] = None
    tiles: List[str] = Field(default_factory=list)


class VectorSource(StyleModel):
    """A named source of a vector style."""

    type: Optional[str] = None
    url: Optional[str] = None
    tiles: Optional[List[str]] = None
    attribution: Optional[str] = None
    minzoom: Optional[int] = None
    maxzoom: Optional[int] = None


class VectorStyle(StyleModel):
    """Vector map style document."""

    style_format: ClassVar[Optional[StyleFormat]] = StyleFormat.VECTOR

    version: Optional[int] = None
    name: Optional[str] = None
    sources: Dict[str, VectorSource] = Field(default_factory=dict)
    sprite: Optional[str] = None
    glyphs: Optional[str] = None
    layers: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "StyleModel",
    "RasterStyle",
    "VectorSource",
    "VectorStyle",
]
