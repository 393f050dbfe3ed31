# ============================================================================
# ENTITY CAPABILITIES
# ============================================================================
# STATUS: Service - Shared behaviour of tile services and file layers
# PURPOSE: Attribution, identity and URL resolution for catalog entities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Entity Capabilities

TMSService and FileLayer are independent classes. What they share lives
here in two pieces:

- EmsService: the Protocol both facades satisfy (attribution, identity,
  display name, API URL, origin).
- EntitySupport: a small helper each facade owns, holding the entity's
  attribution entries and API base URL. It formats attribution in the
  client locale and rewrites resource URLs (absolute -> proxied ->
  query parameters).
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, runtime_checkable

from emsclient.core.contracts import ORIGIN_EMS
from emsclient.core.models import Attribution
from emsclient.infrastructure.urls import join_proxy_path, to_absolute

if TYPE_CHECKING:
    from emsclient.services.client import EMSClient


@runtime_checkable
class EmsService(Protocol):
    """Read-only view over one catalog entry."""

    def get_attributions(self) -> List[Dict[str, str]]: ...

    def get_markdown_attribution(self) -> str: ...

    def get_html_attribution(self) -> str: ...

    def get_display_name(self) -> str: ...

    def get_id(self) -> str: ...

    def has_id(self, id: str) -> bool: ...

    def get_origin(self) -> str: ...

    def get_api_url(self) -> str: ...


class EntitySupport:
    """Locale-aware attribution and URL rewriting for one entity."""

    def __init__(
        self,
        client: "EMSClient",
        attribution: List[Attribution],
        api_url: str,
        proxy_path: str,
    ):
        self._client = client
        self._attribution = attribution
        self.api_url = api_url
        self.proxy_path = proxy_path

    # ------------------------------------------------------------------
    # ATTRIBUTION
    # ------------------------------------------------------------------

    def attributions(self) -> List[Dict[str, str]]:
        """Attribution entries as ``{url, label}`` in the client locale."""
        value_in_language = self._client.get_value_in_language
        return [
            {
                "url": value_in_language(entry.url),
                "label": value_in_language(entry.label),
            }
            for entry in self._attribution
        ]

    def markdown_attribution(self) -> str:
        return "|".join(
            f"[{entry['label']}]({entry['url']})" for entry in self.attributions()
        )

    def html_attribution(self) -> str:
        """Sanitized HTML links joined by `` | `` inside a paragraph."""
        parts = []
        for entry in self.attributions():
            if entry["url"]:
                fragment = f'<a rel="noreferrer noopener" href="{entry["url"]}">{entry["label"]}</a>'
            else:
                fragment = entry["label"]
            parts.append(self._client.sanitize_html(fragment))
        return f"<p>{' | '.join(parts)}</p>"

    # ------------------------------------------------------------------
    # URLS
    # ------------------------------------------------------------------

    def absolute_url(self, url: str) -> str:
        """Resolve a relative resource path against the entity's API URL."""
        return to_absolute(self.api_url, url)

    def proxied_url(self, url: Optional[str]) -> Optional[str]:
        """Absolute URL routed through the proxy path."""
        if not url:
            return None
        if self.proxy_path and url.startswith(self.proxy_path):
            return url
        return join_proxy_path(self.proxy_path, self.absolute_url(url))

    def extended_url(self, url: Optional[str]) -> str:
        """Proxied URL carrying the current query parameters; "" for no URL."""
        proxied = self.proxied_url(url)
        if not proxied:
            return ""
        return self._client.extend_url_with_params(proxied)

    @staticmethod
    def origin() -> str:
        return ORIGIN_EMS


__all__ = ["EmsService", "EntitySupport"]
