# ============================================================================
# VERSION - EMS CLIENT
# ============================================================================
"""
Version information for the EMS client.

This is the single source of truth for the package version.
Updated manually for each release.
"""
__version__ = "8.6.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-18"
