"""Shared fixtures for Plejd tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from custom_components.plejd.models import SiteDetails, SiteSnapshot
from custom_components.plejd.registry import PlejdDeviceRegistry

CRYPTO_KEY = "abcdef0123456789abcdef0123456789"


def make_site_details() -> dict[str, Any]:
    """Return a raw ``getSiteById`` result covering every resolver branch.

    * DIM1: DIM-02 dimmer addressed through ``deviceAddress``
    * REL2: REL-02 relay with a dimmable output setting on output 1
    * WPH3: WPH-01 wall switch, split into two inputs
    * LED4: LED-10 with a NonDimmable output (list-form ``outputAddress``)
    """
    return {
        "site": {"siteId": "site-1", "title": "Home"},
        "plejdMesh": {"cryptoKey": CRYPTO_KEY},
        "devices": [
            {
                "deviceId": "DIM1",
                "objectId": "obj-dim1",
                "title": "Kitchen",
                "roomId": "room-k",
            },
            {
                "deviceId": "REL2",
                "objectId": "obj-rel2",
                "title": "Hall",
                "roomId": "room-h",
            },
            {
                "deviceId": "WPH3",
                "objectId": "obj-wph3",
                "title": "Entrance",
                "roomId": "room-h",
            },
            {
                "deviceId": "LED4",
                "objectId": "obj-led4",
                "title": "Bedroom strip",
                "roomId": "room-b",
            },
        ],
        "plejdDevices": [
            {"deviceId": "DIM1", "hardwareId": 2, "firmware": {"version": "1.4.2"}},
            {"deviceId": "REL2", "hardwareId": "18", "firmware": {"version": "2.0.1"}},
            {"deviceId": "WPH3", "hardwareId": 6, "firmware": {"version": "1.0.0"}},
            {"deviceId": "LED4", "hardwareId": 5, "firmware": {"version": "3.1.0"}},
        ],
        "outputSettings": [
            {"deviceParseId": "obj-rel2", "output": 1, "dimCurve": "linear"},
            {"deviceParseId": "obj-led4", "output": 0, "dimCurve": "NonDimmable"},
        ],
        "deviceAddress": {"DIM1": 11, "REL2": 20, "WPH3": 30, "LED4": 40},
        "outputAddress": {"REL2": {"0": 21, "1": 22}, "LED4": [41]},
        "inputAddress": {"WPH3": {"0": 31, "1": 32}},
        "roomAddress": {
            "room-k": 101,
            "room-h": 102,
            "room-b": 103,
            "room-e": 104,
        },
        "sceneIndex": {"S1": 201, "S2": 202, "S3": 203},
        "rooms": [
            {"roomId": "room-k", "title": "Kitchen room"},
            {"roomId": "room-h", "title": "Hallway"},
            {"roomId": "room-b", "title": "Bedroom"},
            {"roomId": "room-e", "title": "Empty room"},
        ],
        "scenes": [
            {
                "sceneId": "S1",
                "objectId": "obj-s1",
                "title": "Evening",
                "hiddenFromSceneList": False,
            },
            {
                "sceneId": "S2",
                "objectId": "obj-s2",
                "title": "Hidden",
                "hiddenFromSceneList": True,
            },
            {
                "sceneId": "S3",
                "objectId": "obj-s3",
                "title": "Morning",
                "hiddenFromSceneList": False,
            },
        ],
    }


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
def site_details_payload() -> dict[str, Any]:
    """Return a fresh raw site details payload."""
    return make_site_details()


@pytest.fixture
def site_details(site_details_payload) -> SiteDetails:
    """Return the typed view of the sample site."""
    return SiteDetails.from_api(site_details_payload)


@pytest.fixture
def snapshot(site_details_payload) -> SiteSnapshot:
    """Return a sample SiteSnapshot."""
    return SiteSnapshot(
        site_id="site-1",
        session_token="token-abc",
        site_details=site_details_payload,
        captured_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def registry() -> PlejdDeviceRegistry:
    return PlejdDeviceRegistry()


@pytest.fixture
def mock_api(snapshot) -> AsyncMock:
    """Return a fully-mocked PlejdApi."""
    api = AsyncMock()
    api.fetch_snapshot = AsyncMock(return_value=snapshot)
    api.login = AsyncMock(return_value="token-abc")
    api.find_site = AsyncMock(return_value="site-1")
    api.close = AsyncMock()
    return api


@pytest.fixture
def mock_cache() -> MagicMock:
    """Return a SnapshotCache stand-in with no cached copy."""
    cache = MagicMock()
    cache.load = MagicMock(return_value=None)
    cache.save = MagicMock()
    return cache
