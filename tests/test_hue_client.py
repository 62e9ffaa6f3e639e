"""Unit tests for HueHttpClient."""

import json
import logging

import httpx
import pytest

from hue_bridge.errors import HueConnectionError, HueTimeoutError
from hue_bridge.hue_client import DEFAULT_TIMEOUT_MS, HueHttpClient, redact_url


def make_client(handler, timeout_ms=0):
    return HueHttpClient(timeout_ms=timeout_ms, transport=httpx.MockTransport(handler))


class TestHueHttpClient:
    """Test the HTTP transport."""

    def test_get_returns_status_and_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert str(request.url) == "http://bridge.test/api/user/lights"
            return httpx.Response(200, json={"1": {"name": "Lamp"}})

        with make_client(handler) as client:
            result = client.get("http://bridge.test/api/user/lights")

        assert result.status_code == 200
        assert json.loads(result.body) == {"1": {"name": "Lamp"}}

    def test_put_sends_json_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = request.content.decode("utf-8")
            seen["content_type"] = request.headers.get("content-type")
            return httpx.Response(200, text="[]")

        with make_client(handler) as client:
            client.put("http://bridge.test/api/user/lights/1/state", '{"on":true}')

        assert seen == {"method": "PUT", "body": '{"on":true}', "content_type": "application/json"}

    def test_post_and_delete(self):
        methods = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(200, text="[]")

        with make_client(handler) as client:
            client.post("http://bridge.test/api/user/lights", "")
            client.delete("http://bridge.test/api/user/groups/1")

        assert methods == ["POST", "DELETE"]

    def test_non_200_is_returned_not_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="busy")

        with make_client(handler) as client:
            result = client.get("http://bridge.test/api/config")

        assert result.status_code == 503
        assert result.body == "busy"

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        with make_client(handler) as client:
            with pytest.raises(HueConnectionError):
                client.get("http://bridge.test/api/config")

    def test_timeout_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with make_client(handler) as client:
            with pytest.raises(HueTimeoutError):
                client.get("http://bridge.test/api/config")

    def test_default_timeout(self):
        client = HueHttpClient()
        assert client.timeout.connect == DEFAULT_TIMEOUT_MS / 1000.0
        assert client.timeout.read == DEFAULT_TIMEOUT_MS / 1000.0

    def test_timeout_configuration(self):
        client = HueHttpClient(timeout_ms=2500)
        assert client.timeout.connect == 2.5
        assert client.timeout.read == 2.5

        client.set_timeout(0)
        assert client.timeout.connect is None
        assert client.timeout.read is None

    def test_request_logged_without_username(self, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="[]")

        with caplog.at_level(logging.DEBUG, logger="hue_bridge.hue_client"):
            with make_client(handler) as client:
                client.get("http://bridge.test/api/secretuser1234/lights")

        assert "GET http://bridge.test/api/***/lights" in caplog.text
        assert "secretuser1234" not in caplog.text


class TestRedactUrl:
    """Test hiding the username in logged URLs."""

    def test_authenticated_url(self):
        assert redact_url("http://10.0.0.2/api/user/lights/1") == "http://10.0.0.2/api/***/lights/1"

    def test_authenticated_root(self):
        assert redact_url("http://10.0.0.2/api/user/") == "http://10.0.0.2/api/***/"

    def test_unauthenticated_urls_unchanged(self):
        assert redact_url("http://10.0.0.2/api/config") == "http://10.0.0.2/api/config"
        assert redact_url("http://10.0.0.2/api/") == "http://10.0.0.2/api/"
