# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Module exports
# PURPOSE: URL resolution, manifest loading, caching and transport
# CREATED: 18 OCT 2026
# ============================================================================

from emsclient.infrastructure.urls import (
    is_absolute,
    to_absolute,
    with_query_params,
    unescape_template_placeholders,
    join_proxy_path,
    with_fragment,
)
from emsclient.infrastructure.loader import AsyncOnce, ManifestLoader, parse_manifest
from emsclient.infrastructure.cache import ArtifactCache
from emsclient.infrastructure.transport import HttpxFetcher

__all__ = [
    "is_absolute",
    "to_absolute",
    "with_query_params",
    "unescape_template_placeholders",
    "join_proxy_path",
    "with_fragment",
    "AsyncOnce",
    "ManifestLoader",
    "parse_manifest",
    "ArtifactCache",
    "HttpxFetcher",
]
