"""Tests for the request-id logging context."""

import asyncio
import logging

import pytest

from salon.logging_context import (
    RequestIdFilter,
    get_request_id,
    get_request_logger,
    set_request_id,
)


class TestRequestIdLogging:
    def test_filter_injects_request_id(self):
        set_request_id("REQ-abc123")
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        RequestIdFilter().filter(record)
        assert record.request_id == "REQ-abc123"

    def test_filter_attached_once(self):
        logger = get_request_logger("salon.test_once")
        get_request_logger("salon.test_once")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    @pytest.mark.asyncio
    async def test_isolated_per_task(self):
        async def _tagged(request_id):
            set_request_id(request_id)
            await asyncio.sleep(0)
            return get_request_id()

        results = await asyncio.gather(_tagged("REQ-1"), _tagged("REQ-2"))
        assert results == ["REQ-1", "REQ-2"]
