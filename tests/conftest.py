"""Pytest configuration and fixtures for the bridge client tests."""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from hue_bridge.bridge import HueBridge
from hue_bridge.hue_client import HttpResult, HueHttpClient

BRIDGE_IP = "192.168.1.64"
USERNAME = "test_username"


def ok(body: Any) -> HttpResult:
    """A 200 response carrying ``body`` encoded as JSON."""
    return HttpResult(status_code=200, body=json.dumps(body))


def error(error_type: int, description: str, address: str = "/") -> HttpResult:
    return ok([{"error": {"type": error_type, "address": address, "description": description}}])


@pytest.fixture
def mock_http():
    """HueHttpClient stand-in; tests set the return value per call."""
    http = MagicMock(spec=HueHttpClient)
    http.get.return_value = ok([])
    http.put.return_value = ok([])
    http.post.return_value = ok([])
    http.delete.return_value = ok([])
    return http


@pytest.fixture
def bridge(mock_http):
    """Bridge session already linked as USERNAME."""
    return HueBridge(BRIDGE_IP, USERNAME, http=mock_http)


@pytest.fixture
def anonymous_bridge(mock_http):
    """Bridge session without a username."""
    return HueBridge(BRIDGE_IP, http=mock_http)


@pytest.fixture
def mock_lights_response():
    """Mock response for listing all lights."""
    return {
        "1": {"name": "Living Room Light"},
        "2": {"name": "Kitchen Light"},
        "11": {"name": "Hallway"},
    }


@pytest.fixture
def mock_light_response():
    """Mock response for a single light."""
    return {
        "name": "Living Room Light",
        "type": "Extended color light",
        "modelid": "LCT001",
        "swversion": "66009461",
        "state": {
            "on": True,
            "bri": 200,
            "hue": 50000,
            "sat": 120,
            "xy": [0.3, 0.4],
            "ct": 366,
            "alert": "none",
            "effect": "none",
            "colormode": "ct",
            "reachable": True,
        },
        "pointsymbol": {"1": "none", "2": "none"},
    }


@pytest.fixture
def mock_groups_response():
    """Mock response for listing all groups."""
    return {
        "1": {"name": "Kitchen"},
        "2": {"name": "Bedroom"},
    }


@pytest.fixture
def mock_group_response():
    """Mock response for a single group."""
    return {
        "name": "Kitchen",
        "lights": ["10", "12", "13"],
        "type": "LightGroup",
        "action": {"on": True, "bri": 254, "ct": 300, "colormode": "ct"},
    }


@pytest.fixture
def mock_bridge_config():
    """Mock anonymous bridge configuration response."""
    return {
        "name": "Test Bridge",
        "swversion": "01012917",
        "apiversion": "1.3.0",
        "mac": "00:17:88:01:02:03",
    }


@pytest.fixture
def mock_authenticated_config(mock_bridge_config):
    """Mock bridge configuration response for a whitelisted user."""
    return {
        **mock_bridge_config,
        "ipaddress": "192.168.1.64",
        "netmask": "255.255.255.0",
        "gateway": "192.168.1.1",
        "dhcp": True,
        "proxyaddress": "none",
        "proxyport": 0,
        "UTC": "2014-07-17T09:27:35",
        "linkbutton": False,
        "portalservices": True,
        "swupdate": {"updatestate": 0, "text": ""},
        "whitelist": {
            USERNAME: {
                "name": "test app",
                "create date": "2014-04-08T08:55:10",
                "last use date": "2014-07-17T07:21:38",
            }
        },
    }
