"""
SmartHome API: Middleware Tests
===============================

What we test:
    ✅ Client X-Request-ID is reused only when it is a short safe token
    ✅ Oversized or unsafe ids are replaced by a generated 8-char id
    ✅ Access log lines name the resource and pipeline that served the request
    ✅ Requests that reached no pipeline are tagged "-"
"""

import logging

import pytest

from smarthome.middleware.request_id import (
    MAX_REQUEST_ID_LENGTH,
    REQUEST_ID_HEADER,
    resolve_request_id,
)


class TestResolveRequestId:

    def test_safe_token_is_kept(self):
        assert resolve_request_id("trace-01.a_b") == "trace-01.a_b"

    @pytest.mark.parametrize("supplied", [
        None,
        "",
        "has space",
        "line\nbreak",
        "x" * (MAX_REQUEST_ID_LENGTH + 1),
    ])
    def test_unsafe_or_missing_id_is_replaced(self, supplied):
        rid = resolve_request_id(supplied)
        assert rid != supplied
        assert len(rid) == 8

    def test_generated_ids_differ(self):
        assert resolve_request_id(None) != resolve_request_id(None)


class TestRequestIdHeader:

    @pytest.mark.asyncio
    async def test_oversized_header_is_not_echoed(self, test_client):
        supplied = "a" * (MAX_REQUEST_ID_LENGTH + 1)
        response = await test_client.get("/users", headers={REQUEST_ID_HEADER: supplied})

        assert response.status_code == 200
        assert response.headers[REQUEST_ID_HEADER] != supplied
        assert len(response.headers[REQUEST_ID_HEADER]) == 8

    @pytest.mark.asyncio
    async def test_missing_header_gets_generated_id(self, test_client):
        response = await test_client.get("/devices")
        assert len(response.headers[REQUEST_ID_HEADER]) == 8


class TestAccessLog:

    @staticmethod
    def access_records(caplog):
        return [r for r in caplog.records if r.name == "smarthome.access"]

    @pytest.mark.asyncio
    async def test_create_is_tagged_with_resource_and_pipeline(self, test_client, caplog, alice):
        caplog.set_level(logging.INFO, logger="smarthome.access")

        await test_client.post("/users", json=alice, headers={REQUEST_ID_HEADER: "rid-1"})
        await test_client.post("/users", json=alice, headers={REQUEST_ID_HEADER: "rid-2"})

        first, second = self.access_records(caplog)
        assert first.operation == "user.create"
        assert first.levelno == logging.INFO
        assert first.getMessage().startswith("POST /users 200 ")
        assert "[rid-1] user.create" in first.getMessage()
        assert second.status == 409
        assert second.levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_read_and_delete_are_tagged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="smarthome.access")

        await test_client.get("/devices/esp-01")
        await test_client.delete("/devices/esp-01")

        assert [r.operation for r in self.access_records(caplog)] == ["device.read", "device.delete"]

    @pytest.mark.asyncio
    async def test_unrouted_request_is_untagged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="smarthome.access")

        response = await test_client.get("/thermostats")

        assert response.status_code == 404
        (record,) = self.access_records(caplog)
        assert record.operation == "-"

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="smarthome.access")

        await test_client.get("/health")

        assert self.access_records(caplog) == []
