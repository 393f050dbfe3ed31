# ============================================================================
# LOGGING TESTS
# ============================================================================
# STATUS: Tests - Structured logging
# PURPOSE: Context stacking, formatters, component loggers
# CREATED: 18 OCT 2026
# ============================================================================
"""
Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

from emsclient.core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    configure_logging,
    get_current_context,
    get_logger,
    log_context,
)


def _make_record(message="Fetching", extra=None):
    record = logging.LogRecord("emsclient.test", logging.INFO, __file__, 10, message, None, None)
    record.extra = extra or {}
    return record


class TestLogContext:

    def test_nested_contexts_inherit(self):
        with log_context(service_id="road_map", epoch=1):
            with log_context(operation="vector_style"):
                context = get_current_context()
                assert context.service_id == "road_map"
                assert context.epoch == 1
                assert context.operation == "vector_style"
            assert get_current_context().operation is None
        assert get_current_context().service_id is None

    def test_to_dict_skips_empty_fields(self):
        with log_context(layer_id="world_countries", extra={"format": "topojson"}):
            assert get_current_context().to_dict() == {
                "layer_id": "world_countries",
                "format": "topojson",
            }

    def test_tasks_keep_their_own_context(self):
        async def worker(layer_id):
            with log_context(layer_id=layer_id):
                await asyncio.sleep(0)
                return get_current_context().layer_id

        async def run():
            return await asyncio.gather(worker("a"), worker("b"))

        assert asyncio.run(run()) == ["a", "b"]


class TestFormatters:

    def test_structured_output(self):
        with log_context(service_id="road_map", epoch=2):
            output = StructuredFormatter().format(_make_record(extra={"url": "https://a.b"}))

        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["message"] == "Fetching"
        assert data["context"] == {"service_id": "road_map", "epoch": 2}
        assert data["data"] == {"url": "https://a.b"}

    def test_human_output(self):
        with log_context(layer_id="usa_states", epoch=0):
            output = HumanFormatter().format(_make_record())

        assert "INFO" in output
        assert "[layer=usa_states, epoch=0]" in output
        assert output.endswith("Fetching")


class TestLoggers:

    def test_component_added(self, caplog):
        logger = get_logger("emsclient.tests", ComponentType.CACHE)

        with caplog.at_level(logging.DEBUG, logger="emsclient.tests"):
            with log_context(layer_id="world_countries"):
                logger.debug("Artifact cache miss")

        record = caplog.records[-1]
        assert record.extra["component"] == "cache"
        assert record.extra["layer_id"] == "world_countries"

    def test_configure_logging_json(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG", json_output=True)
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[-1].formatter, StructuredFormatter)
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
