# ============================================================================
# HTTPX TRANSPORT TESTS
# ============================================================================
# STATUS: Tests - HttpxFetcher adapter
# PURPOSE: Verify the httpx-backed fetch capability end to end
# CREATED: 18 OCT 2026
# ============================================================================
"""
HTTPX Transport Tests

httpx.MockTransport serves canned manifests, so no network is used.

Run with:
    pytest tests/test_transport.py -v
"""

import asyncio

import httpx
import pytest

from emsclient import EMSClient, HttpxFetcher, ManifestUnavailableError

from ems_mocks import EMS_FILES, EMS_TILES, QUERY


def _make_fetcher(requests):
    def handler(request):
        requests.append(str(request.url))
        if request.url.path == "/v7.6/manifest" and request.url.host == "tiles.foobar":
            return httpx.Response(200, json=EMS_TILES)
        if request.url.path == "/v7.6/manifest" and request.url.host == "files.foobar":
            return httpx.Response(200, json=EMS_FILES)
        return httpx.Response(404, json={"error": "not found"})

    return HttpxFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestHttpxFetcher:

    def test_catalog_through_httpx(self):
        requests = []

        async def run():
            async with _make_fetcher(requests) as fetcher:
                client = EMSClient(
                    fetch_function=fetcher,
                    app_name="tester",
                    app_version="7.x.x",
                    tile_api_url="https://tiles.foobar",
                    file_api_url="https://files.foobar",
                    ems_version="7.6",
                )
                services = await client.get_tms_services()
                layers = await client.get_file_layers()
                return services, layers

        services, layers = asyncio.run(run())

        assert [service.get_id() for service in services][0] == "road_map"
        assert len(layers) == 3
        assert requests == [
            "https://tiles.foobar/v7.6/manifest?" + QUERY,
            "https://files.foobar/v7.6/manifest?" + QUERY,
        ]

    def test_error_status(self):
        async def run():
            async with _make_fetcher([]) as fetcher:
                client = EMSClient(fetch_function=fetcher, tile_api_url="https://elsewhere.foobar")
                await client.get_tms_services()

        with pytest.raises(ManifestUnavailableError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.cause.status_code == 404

    def test_owned_client_closed(self):
        async def run():
            fetcher = HttpxFetcher()
            await fetcher.aclose()
            return fetcher._client.is_closed

        assert asyncio.run(run()) is True

    def test_borrowed_client_left_open(self):
        async def run():
            client = httpx.AsyncClient()
            async with HttpxFetcher(client=client):
                pass
            closed = client.is_closed
            await client.aclose()
            return closed

        assert asyncio.run(run()) is False
