"""Tests for the cached API response store."""

from __future__ import annotations

from datetime import datetime, timezone
import json
from unittest.mock import patch

import pytest

from custom_components.plejd.cache import SnapshotCache


def _write(path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


class TestLoad:
    """Test SnapshotCache.load."""

    def test_missing_file(self, tmp_path):
        assert SnapshotCache(tmp_path / "nope.json").load() is None

    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{not json", encoding="utf-8")
        assert SnapshotCache(path).load() is None

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "cache.json"
        _write(path, ["siteId"])
        assert SnapshotCache(path).load() is None

    def test_valid(self, tmp_path, site_details_payload):
        path = tmp_path / "cache.json"
        _write(
            path,
            {
                "siteId": "site-1",
                "siteDetails": site_details_payload,
                "sessionToken": "token-abc",
                "dtCache": "2024-05-01T12:30:00.000Z",
            },
        )

        snapshot = SnapshotCache(path).load()

        assert snapshot is not None
        assert snapshot.site_id == "site-1"
        assert snapshot.session_token == "token-abc"
        assert snapshot.site_details == site_details_payload
        assert snapshot.captured_at == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "missing", ["siteId", "siteDetails", "sessionToken", "dtCache"]
    )
    def test_missing_field(self, tmp_path, site_details_payload, missing):
        payload = {
            "siteId": "site-1",
            "siteDetails": site_details_payload,
            "sessionToken": "token-abc",
            "dtCache": "2024-05-01T12:30:00+00:00",
        }
        del payload[missing]
        path = tmp_path / "cache.json"
        _write(path, payload)

        assert SnapshotCache(path).load() is None

    @pytest.mark.parametrize(
        ("field", "value"),
        [("siteId", ""), ("sessionToken", ""), ("siteDetails", {}), ("dtCache", "yesterday")],
    )
    def test_empty_or_bad_field(self, tmp_path, site_details_payload, field, value):
        payload = {
            "siteId": "site-1",
            "siteDetails": site_details_payload,
            "sessionToken": "token-abc",
            "dtCache": "2024-05-01T12:30:00+00:00",
        }
        payload[field] = value
        path = tmp_path / "cache.json"
        _write(path, payload)

        assert SnapshotCache(path).load() is None


class TestSave:
    """Test SnapshotCache.save."""

    def test_round_trip(self, tmp_path, snapshot):
        cache = SnapshotCache(tmp_path / "cache.json")
        cache.save(snapshot)
        loaded = cache.load()

        assert loaded.site_id == snapshot.site_id
        assert loaded.site_details == snapshot.site_details
        assert loaded.session_token == snapshot.session_token
        assert loaded.captured_at == snapshot.captured_at

    def test_file_format(self, tmp_path, snapshot):
        path = tmp_path / "cache.json"
        SnapshotCache(path).save(snapshot)

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert set(raw) == {"siteId", "siteDetails", "sessionToken", "dtCache"}
        assert raw["dtCache"] == "2024-05-01T12:30:00+00:00"

    def test_creates_parent_dirs(self, tmp_path, snapshot):
        path = tmp_path / ".plejd" / "cache.json"
        SnapshotCache(path).save(snapshot)
        assert path.exists()

    def test_overwrites_whole_file(self, tmp_path, snapshot):
        path = tmp_path / "cache.json"
        path.write_text("x" * 100_000, encoding="utf-8")
        SnapshotCache(path).save(snapshot)

        assert json.loads(path.read_text(encoding="utf-8"))["siteId"] == "site-1"
        assert [p.name for p in tmp_path.iterdir()] == ["cache.json"]

    def test_failure_is_swallowed(self, tmp_path, snapshot):
        cache = SnapshotCache(tmp_path / "cache.json")
        with patch(
            "custom_components.plejd.cache.os.replace",
            side_effect=OSError("disk full"),
        ):
            cache.save(snapshot)

        assert not (tmp_path / "cache.json").exists()
        assert list(tmp_path.iterdir()) == []

    def test_unserialisable_details_swallowed(self, tmp_path, snapshot):
        bad = type(snapshot)(
            site_id="site-1",
            session_token="token-abc",
            site_details={"when": object()},
            captured_at=snapshot.captured_at,
        )
        SnapshotCache(tmp_path / "cache.json").save(bad)
        assert SnapshotCache(tmp_path / "cache.json").load() is None
