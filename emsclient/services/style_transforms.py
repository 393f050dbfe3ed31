# ============================================================================
# STYLE TRANSFORMS
# ============================================================================
# STATUS: Service - Stateless vector style utilities
# PURPOSE: Label language substitution and paint colour blending
# CREATED: 18 OCT 2026
# ============================================================================
"""
Style Transforms

Pure functions over style layer dicts (map style layer specification).
Nothing here is cached; callers apply the results with their renderer,
e.g. ``map.setLayoutProperty`` / ``map.setPaintProperty``.

transform_language_property(layer, lang)
    New ``text-field`` expression preferring ``name:<lang>``.

transform_color_properties(layer, color, operation, percentage)
    New values for every colour paint property of a layer, blended with
    ``color``. ``percentage`` is the share of the original colour mixed back
    into the blended one (0 = fully blended, 1 = unchanged).

Colours are parsed with Pillow's ImageColor (plus fractional-alpha rgba()
notation) and blended per channel with numpy.
"""

import re
from typing import Any, Dict, List, Optional, Union

import numpy as np
from PIL import ImageColor

from emsclient.core.contracts import BlendMode
from emsclient.core.errors import UnsupportedLanguageError, UnsupportedOperationError


# ============================================================================
# LANGUAGES
# ============================================================================

SUPPORTED_LANGUAGES: Dict[str, Dict[str, str]] = {
    "en": {"label": "English", "omt_code": "en"},
    "zh-CN": {"label": "Chinese", "omt_code": "zh"},
    "ja-JP": {"label": "Japanese", "omt_code": "ja"},
    "fr-FR": {"label": "French", "omt_code": "fr"},
    "es": {"label": "Spanish", "omt_code": "es"},
    "ar": {"label": "Arabic", "omt_code": "ar"},
    "hi-IN": {"label": "Hindi", "omt_code": "hi"},
    "ru-RU": {"label": "Russian", "omt_code": "ru"},
    "pt-PT": {"label": "Portuguese", "omt_code": "pt"},
    "it": {"label": "Italian", "omt_code": "it"},
    "de": {"label": "German", "omt_code": "de"},
    "ko": {"label": "Korean", "omt_code": "ko"},
}

_LANGUAGE_KEYS = {key.lower(): key for key in SUPPORTED_LANGUAGES}

# Captures {name:xx} and {name_xx} labels
NAME_LABEL_RE = re.compile(r"\{name([:_])(.{2})\}")


def omt_code(lang: str) -> str:
    """OpenMapTiles language code for a UI locale (case-insensitive)."""
    key = _LANGUAGE_KEYS.get(str(lang).lower())
    if key is None:
        raise UnsupportedLanguageError(lang)
    return SUPPORTED_LANGUAGES[key]["omt_code"]


def _text_field(label: str, lang: str) -> Union[str, List[Any]]:
    match = NAME_LABEL_RE.search(label)
    if match:
        separator, code = match.groups()
        return ["coalesce", ["get", f"name:{lang}"], ["get", f"name{separator}{code}"]]
    elif "latin" in label and "nonlatin" in label:
        return [
            "coalesce",
            ["get", f"name:{lang}"],
            ["concat", ["get", "name:latin"], "\n", ["get", "name:nonlatin"]],
        ]
    return label


def transform_language_property(layer: Dict[str, Any], lang: str) -> Optional[Union[str, List[Any]]]:
    """
    Compute the localized ``text-field`` of a symbol layer.

    Returns None for non-symbol layers and layers without a string
    ``text-field``; returns the label unchanged when it is not a name label.

    Raises:
        UnsupportedLanguageError: ``lang`` is not in SUPPORTED_LANGUAGES.
    """
    code = omt_code(lang)
    if layer.get("type") != "symbol":
        return None
    layout = layer.get("layout")
    if not layout:
        return None
    text_field = layout.get("text-field")
    if text_field and isinstance(text_field, str):
        return _text_field(text_field, code)
    return None


# ============================================================================
# COLOURS
# ============================================================================

COLOR_LAYER_TYPES = ("background", "fill", "line", "symbol")

COLOR_PAINT_PROPERTIES = (
    "background-color",
    "circle-color",
    "circle-stroke-color",
    "fill-color",
    "fill-extrusion-color",
    "fill-outline-color",
    "icon-color",
    "icon-halo-color",
    "line-color",
    "text-color",
    "text-halo-color",
)

DEFAULT_TEXT_COLOR = "rgba(0,0,0,1)"

_RGBA_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)$",
    re.IGNORECASE,
)


def parse_color(value: str) -> Optional[np.ndarray]:
    """Parse a CSS colour into ``[r, g, b, alpha]`` (alpha in 0..1), or None."""
    match = _RGBA_RE.match(value.strip())
    if match:
        r, g, b, alpha = match.groups()
        return np.array([float(r), float(g), float(b), float(alpha) if alpha else 1.0])
    try:
        channels = ImageColor.getrgb(value)
    except ValueError:
        return None
    alpha = channels[3] / 255.0 if len(channels) == 4 else 1.0
    return np.array([*channels[:3], alpha], dtype=float)


def _blend_channels(bottom: np.ndarray, top: np.ndarray, mode: BlendMode) -> np.ndarray:
    a = bottom / 255.0
    b = top / 255.0
    with np.errstate(divide="ignore", invalid="ignore"):
        if mode is BlendMode.MULTIPLY:
            result = a * b
        elif mode is BlendMode.DARKEN:
            result = np.minimum(a, b)
        elif mode is BlendMode.LIGHTEN:
            result = np.maximum(a, b)
        elif mode is BlendMode.SCREEN:
            result = 1 - (1 - a) * (1 - b)
        elif mode is BlendMode.OVERLAY:
            result = np.where(top < 128, 2 * a * b, 1 - 2 * (1 - a) * (1 - b))
        elif mode is BlendMode.BURN:
            result = 1 - (1 - b) / a
        elif mode is BlendMode.DODGE:
            result = np.where(bottom >= 255, 1.0, b / (1 - a))
        else:
            raise UnsupportedOperationError(str(mode))
    result = np.nan_to_num(result, nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(result, 0.0, 1.0) * 255.0


def _format_color(rgba: np.ndarray) -> str:
    r, g, b = (int(v) for v in np.floor(np.clip(rgba[:3], 0, 255) + 0.5))
    alpha = float(np.clip(rgba[3], 0.0, 1.0))
    return f"rgba({r},{g},{b},{alpha:g})"


def blend_color(source: str, color: str, operation: BlendMode, percentage: float = 0) -> str:
    """
    Blend ``color`` over ``source`` and mix the original back in.

    The blend drops alpha (result is opaque); the mix interpolates in linear
    RGB and linearly in alpha. Unparseable inputs return ``source`` as-is.
    """
    source_rgba = parse_color(source)
    color_rgba = parse_color(color)
    if source_rgba is None or color_rgba is None:
        return source

    blended = np.append(_blend_channels(source_rgba[:3], color_rgba[:3], operation), 1.0)
    ratio = float(np.clip(percentage or 0, 0.0, 1.0))
    mixed_rgb = np.sqrt(blended[:3] ** 2 * (1 - ratio) + source_rgba[:3] ** 2 * ratio)
    mixed_alpha = blended[3] + ratio * (source_rgba[3] - blended[3])
    return _format_color(np.append(mixed_rgb, mixed_alpha))


def colorize_color(paint_value: Any, color: str, operation: BlendMode, percentage: float = 0) -> Any:
    """Blend a paint value: a colour string or a ``{stops: [[zoom, colour]]}`` function."""
    if isinstance(paint_value, str):
        return blend_color(paint_value, color, operation, percentage)
    if isinstance(paint_value, dict) and isinstance(paint_value.get("stops"), list):
        stops = []
        for stop in paint_value["stops"]:
            if isinstance(stop, (list, tuple)) and len(stop) == 2:
                stops.append([stop[0], colorize_color(stop[1], color, operation, percentage)])
            else:
                stops.append(stop)
        return {**paint_value, "stops": stops}
    # Expressions are left to the renderer
    return paint_value


def _blend_mode(operation: Union[str, BlendMode]) -> BlendMode:
    try:
        return BlendMode(operation)
    except ValueError:
        raise UnsupportedOperationError(str(operation)) from None


def transform_color_properties(
    layer: Dict[str, Any],
    color: Optional[str] = None,
    operation: Union[str, BlendMode] = BlendMode.MULTIPLY,
    percentage: float = 0,
) -> List[Dict[str, Any]]:
    """
    New colours for every colour paint property of ``layer``.

    Symbol layers always report ``text-color`` (black when unset). Layers of
    other types, or without paint, yield an empty list. With no ``color``
    the current values are returned unchanged.

    Raises:
        UnsupportedOperationError: ``operation`` is not a BlendMode.
    """
    mode = _blend_mode(operation) if color else None
    layer_type = layer.get("type")
    if layer_type not in COLOR_LAYER_TYPES:
        return []

    paint = layer.get("paint")
    if layer_type == "symbol":
        paint = {"text-color": DEFAULT_TEXT_COLOR, **(paint or {})}
    if not paint:
        return []

    results = []
    for prop, value in paint.items():
        if prop not in COLOR_PAINT_PROPERTIES:
            continue
        if color and value:
            value = colorize_color(value, color, mode, percentage)
        results.append({"property": prop, "color": value})
    return results


__all__ = [
    "SUPPORTED_LANGUAGES",
    "omt_code",
    "transform_language_property",
    "COLOR_PAINT_PROPERTIES",
    "parse_color",
    "blend_color",
    "colorize_color",
    "transform_color_properties",
]
