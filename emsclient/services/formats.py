# ============================================================================
# FILE LAYER FORMAT CONVERSION
# ============================================================================
# STATUS: Service - Raw layer documents to feature collections
# PURPOSE: Convert geojson/topojson bodies into GeoJSON FeatureCollections
# CREATED: 18 OCT 2026
# ============================================================================
"""
File Layer Format Conversion

Dispatches on the explicit FormatType of a file layer format:

    GEOJSON   -> body returned unchanged
    TOPOJSON  -> named object decoded into a FeatureCollection
    unknown   -> None (no convertible representation)

TopoJSON decoding follows the TopoJSON specification: quantized arcs are
delta-decoded and transformed back to coordinates, negative arc indexes
(``~i``) walk an arc in reverse, and shared arc endpoints are not repeated.
"""

from typing import Any, Dict, List, Optional, Sequence

from emsclient.core.config import get_defaults
from emsclient.core.contracts import FormatType


# ============================================================================
# DISPATCH
# ============================================================================

def feature_collection_path(layer_format: Any) -> str:
    """Object path inside a topojson document, defaulting to ``data``."""
    meta = getattr(layer_format, "meta", None)
    path = getattr(meta, "feature_collection_path", None) if meta is not None else None
    return path or get_defaults().feature_collection_path


def convert_to_feature_collection(layer_format: Any, body: Any) -> Optional[Dict[str, Any]]:
    """
    Convert a fetched layer body according to its format type.

    Returns None when the body is empty or the format is not convertible.
    """
    if body is None:
        return None
    format_type = layer_format.format_type
    if format_type is FormatType.GEOJSON:
        return body
    elif format_type is FormatType.TOPOJSON:
        return topojson_feature(body, feature_collection_path(layer_format))
    return None


# ============================================================================
# TOPOJSON
# ============================================================================

def _resolve_object(topology: Dict[str, Any], path: str) -> Optional[Dict[str, Any]]:
    """Walk a dotted path below ``topology['objects']``."""
    node: Any = topology.get("objects") or {}
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, dict) else None


class _TopologyDecoder:
    """Decodes geometries of one topology."""

    def __init__(self, topology: Dict[str, Any]):
        self.arcs: List[List[Sequence[float]]] = topology.get("arcs") or []
        transform = topology.get("transform")
        if transform:
            self.scale = transform.get("scale", [1, 1])
            self.translate = transform.get("translate", [0, 0])
        else:
            self.scale = None
            self.translate = None

    def _position(self, position: Sequence[float]) -> List[float]:
        output = list(position)
        if self.scale is not None:
            output[0] = position[0] * self.scale[0] + self.translate[0]
            output[1] = position[1] * self.scale[1] + self.translate[1]
        return output

    def _decode_arc(self, index: int) -> List[List[float]]:
        arc = self.arcs[~index if index < 0 else index]
        points = []
        x = y = 0
        for position in arc:
            if self.scale is not None:
                # Quantized arcs are delta-encoded
                x += position[0]
                y += position[1]
                point = [x * self.scale[0] + self.translate[0], y * self.scale[1] + self.translate[1]]
                point.extend(position[2:])
            else:
                point = list(position)
            points.append(point)
        if index < 0:
            points.reverse()
        return points

    def line(self, arc_indexes: Sequence[int]) -> List[List[float]]:
        points: List[List[float]] = []
        for index in arc_indexes:
            decoded = self._decode_arc(index)
            if points:
                # Consecutive arcs share their joining point
                points.pop()
            points.extend(decoded)
        if len(points) < 2 and points:
            points.append(list(points[0]))
        return points

    def ring(self, arc_indexes: Sequence[int]) -> List[List[float]]:
        points = self.line(arc_indexes)
        while points and len(points) < 4:
            points.append(list(points[0]))
        return points

    def polygon(self, rings: Sequence[Sequence[int]]) -> List[List[List[float]]]:
        return [self.ring(ring) for ring in rings]

    def geometry(self, obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        geometry_type = obj.get("type")
        if geometry_type == "GeometryCollection":
            return {
                "type": "GeometryCollection",
                "geometries": [self.geometry(child) for child in obj.get("geometries", [])],
            }
        elif geometry_type == "Point":
            coordinates: Any = self._position(obj["coordinates"])
        elif geometry_type == "MultiPoint":
            coordinates = [self._position(p) for p in obj["coordinates"]]
        elif geometry_type == "LineString":
            coordinates = self.line(obj["arcs"])
        elif geometry_type == "MultiLineString":
            coordinates = [self.line(arcs) for arcs in obj["arcs"]]
        elif geometry_type == "Polygon":
            coordinates = self.polygon(obj["arcs"])
        elif geometry_type == "MultiPolygon":
            coordinates = [self.polygon(rings) for rings in obj["arcs"]]
        else:
            return None
        return {"type": geometry_type, "coordinates": coordinates}

    def feature(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        feature: Dict[str, Any] = {"type": "Feature"}
        if obj.get("id") is not None:
            feature["id"] = obj["id"]
        if obj.get("bbox") is not None:
            feature["bbox"] = obj["bbox"]
        feature["properties"] = obj.get("properties") or {}
        feature["geometry"] = self.geometry(obj)
        return feature


def topojson_feature(topology: Dict[str, Any], path: str) -> Optional[Dict[str, Any]]:
    """
    Decode the object at ``path`` into GeoJSON.

    A GeometryCollection becomes a FeatureCollection with one feature per
    member geometry; any other object becomes a single Feature. Returns
    None when the path does not name an object.
    """
    obj = _resolve_object(topology, path)
    if obj is None:
        return None
    decoder = _TopologyDecoder(topology)
    if obj.get("type") == "GeometryCollection":
        return {
            "type": "FeatureCollection",
            "features": [decoder.feature(child) for child in obj.get("geometries", [])],
        }
    return decoder.feature(obj)


__all__ = [
    "feature_collection_path",
    "convert_to_feature_collection",
    "topojson_feature",
]
