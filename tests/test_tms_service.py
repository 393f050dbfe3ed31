# ============================================================================
# TILE MAP SERVICE TESTS
# ============================================================================
# STATUS: Tests - Tile service facade
# PURPOSE: Raster/vector style resolution, inlining, proxying, sprites
# CREATED: 18 OCT 2026
# ============================================================================
"""
Tile Map Service Tests

Run with:
    pytest tests/test_tms_service.py -v
"""

import asyncio

import pytest

from emsclient import EmsService, NoStyleForLocaleError, TMSService
from emsclient.core.models import RasterStyle, VectorStyle
from emsclient.services.ems_service import EntitySupport

from ems_mocks import (
    PROXY_PATH,
    QUERY,
    SPRITE_SHEET,
    SPRITE_SHEET_RETINA,
    VECTOR_STYLE_BRIGHT,
    make_client,
    proxied_routes,
    requested_urls,
)


# ============================================================================
# HELPERS
# ============================================================================

def _get_service(service_id="road_map", **overrides):
    """Resolve one tile service through a mocked client."""
    client, get_manifest = make_client(**overrides)
    service = asyncio.run(client.find_tms_service_by_id(service_id))
    get_manifest.reset_mock()
    return client, service, get_manifest


def _make_proxied_client():
    return make_client(
        tile_api_url="http://proxy.com/foobar/tiles",
        file_api_url="http://proxy.com/foobar/vector",
        proxy_path=PROXY_PATH,
    )


# ============================================================================
# IDENTITY
# ============================================================================

class TestIdentity:

    def test_service_list(self):
        client, _ = make_client()
        services = asyncio.run(client.get_tms_services())
        assert [service.get_id() for service in services] == [
            "road_map", "road_map_desaturated", "dark_map",
        ]
        assert all(isinstance(service, EmsService) for service in services)

    def test_exact_id_match(self):
        _, service, _ = _get_service()
        assert isinstance(service, TMSService)
        assert service.has_id("road_map")
        assert not service.has_id("road")

    def test_display_name(self):
        _, service, _ = _get_service(language="fr")
        assert service.get_display_name() == "Carte routière - Claire"

    def test_metadata(self):
        _, service, _ = _get_service()
        assert service.get_origin() == "elastic_maps_service"
        assert service.get_api_url() == "https://tiles.foobar"

    def test_attribution_without_url(self):
        _, service, _ = _get_service("dark_map")
        assert service.get_html_attribution() == "<p>OpenMapTiles</p>"
        assert service.get_markdown_attribution() == "[OpenMapTiles]()"


# ============================================================================
# RASTER
# ============================================================================

class TestRasterStyle:

    def test_url_template_and_zoom(self):
        _, service, get_manifest = _get_service()

        async def run():
            return (
                await service.get_url_template(),
                await service.get_min_zoom(),
                await service.get_max_zoom(),
            )

        template, min_zoom, max_zoom = asyncio.run(run())

        assert template == (
            "https://tiles.foobar/raster/styles/osm-bright/{z}/{x}/{y}.png?" + QUERY
        )
        assert (min_zoom, max_zoom) == (0, 10)
        # Raster style memoized per instance
        assert get_manifest.await_count == 1

    def test_locale_fallback(self):
        _, service, _ = _get_service(language="zz")
        template = asyncio.run(service.get_url_template())
        assert template.startswith("https://tiles.foobar/raster/styles/osm-bright/{z}/{x}/{y}.png?")

    def test_locale_specific_style(self):
        _, service, get_manifest = _get_service("road_map_desaturated", language="fr")

        assert asyncio.run(service.get_min_zoom()) == 1
        assert requested_urls(get_manifest)[0].startswith(
            "https://tiles.foobar/styles/osm-bright-desaturated-fr.json?"
        )

    def test_default_raster_style_absolute_tiles(self):
        _, service, _ = _get_service("road_map_desaturated")

        style = asyncio.run(service.get_default_raster_style())

        assert isinstance(style, RasterStyle)
        assert style.tiles == [
            "https://tiles.foobar/raster/styles/osm-bright-desaturated/{z}/{x}/{y}.png",
        ]
        assert style.maxzoom == 18

    def test_no_tiles_yields_empty_template(self):
        _, service, _ = _get_service("dark_map")
        assert asyncio.run(service.get_url_template()) == ""

    def test_missing_format_raises(self):
        _, service, get_manifest = _get_service("dark_map", language="fr")

        with pytest.raises(NoStyleForLocaleError) as exc_info:
            asyncio.run(service.get_vector_style_sheet_raw())

        error = exc_info.value
        assert (error.format_type, error.locale, error.default_locale) == ("vector", "fr", "en")
        assert str(error) == "Cannot find vector tile layer for locale fr or en"
        get_manifest.assert_not_called()


# ============================================================================
# VECTOR
# ============================================================================

class TestVectorStyle:

    def test_raw_style(self):
        _, service, get_manifest = _get_service()

        style = asyncio.run(service.get_vector_style_sheet_raw())

        assert isinstance(style, VectorStyle)
        assert style.sources["openmaptiles"].url == "https://tiles.foobar/data/v3.json"
        assert style.sources["openmaptiles"].tiles is None
        assert get_manifest.await_count == 1

    def test_inlining_fetches_each_source_once(self):
        _, service, get_manifest = _get_service()

        async def run():
            first = await service.get_vector_style_sheet()
            second = await service.get_vector_style_sheet()
            return first, second

        first, second = asyncio.run(run())

        urls = requested_urls(get_manifest)
        assert len(urls) == 3
        assert urls[0].startswith("https://tiles.foobar/styles/osm-bright/style.json?")
        assert sorted(url.split("?")[0] for url in urls[1:]) == [
            "https://tiles.foobar/data/contours.json",
            "https://tiles.foobar/data/v3.json",
        ]
        assert second is first

    def test_inlined_sources(self):
        _, service, _ = _get_service()

        style = asyncio.run(service.get_vector_style_sheet())
        openmaptiles = style.sources["openmaptiles"]
        contours = style.sources["contours"]

        assert openmaptiles.type == "vector"
        assert openmaptiles.tiles == ["https://tiles.foobar/data/v3/{z}/{x}/{y}.pbf?" + QUERY]
        assert openmaptiles.maxzoom == 14
        assert openmaptiles.attribution == service.get_html_attribution()
        assert contours.tiles == ["https://tiles.foobar/data/contours/{z}/{x}/{y}.pbf?" + QUERY]
        # Sources without a url are kept as published
        assert style.sources["labels"].type == "geojson"
        assert len(style.layers) == len(VECTOR_STYLE_BRIGHT["layers"])

    def test_sprite_and_glyphs_resolved(self):
        _, service, _ = _get_service()

        style = asyncio.run(service.get_vector_style_sheet())

        assert style.sprite == "https://tiles.foobar/styles/osm-bright/sprite"
        assert style.glyphs == "https://tiles.foobar/fonts/{fontstack}/{range}.pbf"

    def test_raw_style_not_mutated_by_inlining(self):
        _, service, _ = _get_service()

        async def run():
            inlined = await service.get_vector_style_sheet()
            raw = await service.get_vector_style_sheet_raw()
            return inlined, raw

        inlined, raw = asyncio.run(run())
        assert raw.glyphs == "/fonts/{fontstack}/{range}.pbf"
        assert raw.sources["openmaptiles"].tiles is None
        assert inlined.sources["openmaptiles"].tiles is not None

    def test_url_template_for_vector(self):
        _, service, _ = _get_service()

        async def run():
            first = await service.get_url_template_for_vector("openmaptiles")
            second = await service.get_url_template_for_vector("openmaptiles")
            missing = await service.get_url_template_for_vector("nope")
            return first, second, missing

        first, second, missing = asyncio.run(run())

        assert first == "https://tiles.foobar/data/v3/{z}/{x}/{y}.pbf?" + QUERY
        assert second == first
        assert missing == ""

    def test_to_dict_for_renderer(self):
        _, service, _ = _get_service()
        document = asyncio.run(service.get_vector_style_sheet()).to_dict()
        assert document["metadata"] == {"openmaptiles:version": "3.x"}
        assert document["sources"]["openmaptiles"]["type"] == "vector"


# ============================================================================
# SPRITES
# ============================================================================

class TestSprites:

    def test_sprite_paths(self):
        _, service, _ = _get_service()

        async def run():
            return (
                await service.get_sprite_sheet_json_path(),
                await service.get_sprite_sheet_png_path(is_retina=True),
            )

        json_path, png_path = asyncio.run(run())
        assert json_path == "https://tiles.foobar/styles/osm-bright/sprite.json"
        assert png_path == "https://tiles.foobar/styles/osm-bright/sprite@2x.png"

    def test_sprite_meta(self):
        _, service, _ = _get_service()

        async def run():
            return await service.get_sprite_sheet_meta(), await service.get_sprite_sheet_meta(True)

        meta, retina = asyncio.run(run())
        assert meta == {"png": "https://tiles.foobar/styles/osm-bright/sprite.png", "json": SPRITE_SHEET}
        assert retina["json"] == SPRITE_SHEET_RETINA


# ============================================================================
# PROXY
# ============================================================================

class TestProxy:

    def test_raster_template_prefixed_once(self):
        client, _ = _make_proxied_client()

        services = asyncio.run(client.get_tms_services())
        assert len(services) == 1
        template = asyncio.run(services[0].get_url_template())

        assert template == "http://proxy.com/foobar/tiles/raster/osm_bright/{x}/{y}/{z}.jpg?" + QUERY

    def test_inlined_tiles_prefixed_once(self):
        client, _ = _make_proxied_client()

        async def run():
            service = (await client.get_tms_services())[0]
            return await service.get_vector_style_sheet(), await service.get_url_template_for_vector("openmaptiles")

        style, vector_template = asyncio.run(run())

        expected = "http://proxy.com/foobar/tiles/data/v3/{z}/{x}/{y}.pbf?" + QUERY
        assert style.sources["openmaptiles"].tiles == [expected]
        assert vector_template == expected
        assert vector_template.count("proxy.com") == 1
        assert vector_template.count("elastic_tile_service_tos") == 1
        assert style.sprite == "http://proxy.com/foobar/tiles/styles/osm-bright/sprite"
        assert style.glyphs == "http://proxy.com/foobar/tiles/fonts/{fontstack}/{range}.pbf"


SEPARATE_PROXIES = ["https://proxy.example/", "/api/proxy/"]


def _make_separately_proxied_client(proxy_path):
    return make_client(routes=proxied_routes(proxy_path), proxy_path=proxy_path)


@pytest.mark.parametrize("proxy_path", SEPARATE_PROXIES)
class TestSeparateProxyPath:
    """Proxy path that is not part of the tile API URL."""

    def test_manifest_requests_prefixed_once(self, proxy_path):
        client, get_manifest = _make_separately_proxied_client(proxy_path)

        async def run():
            service = await client.find_tms_service_by_id("road_map")
            await service.get_vector_style_sheet()

        asyncio.run(run())

        urls = requested_urls(get_manifest)
        assert urls[0].startswith(proxy_path + "https://tiles.foobar/v7.6/manifest")
        assert all(url.count(proxy_path) == 1 for url in urls)

    def test_raster_template_prefixed_once(self, proxy_path):
        client, _ = _make_separately_proxied_client(proxy_path)

        async def run():
            service = await client.find_tms_service_by_id("road_map")
            return await service.get_default_raster_style(), await service.get_url_template()

        style, template = asyncio.run(run())

        tile = proxy_path + "https://tiles.foobar/raster/styles/osm-bright/{z}/{x}/{y}.png"
        assert style.tiles == [tile]
        assert template == tile + "?" + QUERY

    def test_vector_templates_prefixed_once(self, proxy_path):
        client, _ = _make_separately_proxied_client(proxy_path)

        async def run():
            service = await client.find_tms_service_by_id("road_map")
            style = await service.get_vector_style_sheet()
            templates = [
                await service.get_url_template_for_vector("openmaptiles"),
                await service.get_url_template_for_vector("contours"),
            ]
            return style, templates

        style, templates = asyncio.run(run())

        openmaptiles = proxy_path + "https://tiles.foobar/data/v3/{z}/{x}/{y}.pbf?" + QUERY
        contours = proxy_path + "https://tiles.foobar/data/contours/{z}/{x}/{y}.pbf?" + QUERY
        assert templates == [openmaptiles, contours]
        assert style.sources["openmaptiles"].tiles == [openmaptiles]
        assert style.sources["contours"].tiles == [contours]
        for template in templates:
            assert template.count(proxy_path) == 1
            assert template.count("elastic_tile_service_tos") == 1
        assert style.sprite == proxy_path + "https://tiles.foobar/styles/osm-bright/sprite"
        assert style.glyphs == proxy_path + "https://tiles.foobar/fonts/{fontstack}/{range}.pbf"

    def test_sprite_and_glyph_paths_prefixed_once(self, proxy_path):
        client, _ = _make_separately_proxied_client(proxy_path)

        async def run():
            service = await client.find_tms_service_by_id("road_map")
            return (
                await service.get_sprite_sheet_json_path(),
                await service.get_sprite_sheet_png_path(True),
                await service.get_url_template_for_glyphs(),
                await service.get_sprite_sheet_meta(),
            )

        json_path, png_path, glyphs, meta = asyncio.run(run())

        sprite = proxy_path + "https://tiles.foobar/styles/osm-bright/sprite"
        assert json_path == sprite + ".json"
        assert png_path == sprite + "@2x.png"
        assert glyphs == proxy_path + "https://tiles.foobar/fonts/{fontstack}/{range}.pbf"
        assert meta == {"png": sprite + ".png", "json": SPRITE_SHEET}

    def test_already_proxied_url_kept(self, proxy_path):
        client, _ = make_client(proxy_path=proxy_path)
        support = EntitySupport(client, [], "https://tiles.foobar", proxy_path)

        proxied = proxy_path + "https://tiles.foobar/data/v3/{z}/{x}/{y}.pbf"
        assert support.proxied_url(proxied) == proxied
        assert support.extended_url(proxied) == proxied + "?" + QUERY


class TestExtendedUrl:

    def test_missing_url_extends_to_empty(self):
        client, _ = make_client()
        support = EntitySupport(client, [], "https://tiles.foobar", "")

        assert support.proxied_url(None) is None
        assert support.extended_url(None) == ""
        assert support.extended_url("") == ""


# ============================================================================
# STYLE UTILITIES
# ============================================================================

class TestStaticUtilities:

    def test_language_transform(self):
        layer = {"type": "symbol", "layout": {"text-field": "{name:en}"}}
        assert TMSService.transform_language_property(layer, "fr-FR") == [
            "coalesce", ["get", "name:fr"], ["get", "name:en"],
        ]

    def test_color_transform(self):
        layer = {"type": "fill", "paint": {"fill-color": "#ff0000"}}
        assert TMSService.transform_color_properties(layer, "#808080", "multiply") == [
            {"property": "fill-color", "color": "rgba(128,0,0,1)"},
        ]

    def test_supported_languages(self):
        assert "ja-JP" in TMSService.SUPPORTED_LANGUAGES
