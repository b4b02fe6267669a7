"""Data models for Plejd sites and resolved devices."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .exceptions import PlejdConfigurationError

if TYPE_CHECKING:
    from .api import PlejdApi
    from .registry import PlejdDeviceRegistry


def _index_map(raw: Any) -> dict[int, int]:
    """Normalise a per-output/per-input address table to ``{index: address}``.

    The cloud sends these either as a JSON list or as an object keyed by the
    stringified index (``{"0": 11, "1": 12}``).
    """
    if isinstance(raw, Mapping):
        return {int(idx): int(addr) for idx, addr in raw.items()}
    if isinstance(raw, (list, tuple)):
        return {idx: int(addr) for idx, addr in enumerate(raw)}
    return {}


def _address_map(raw: Any) -> dict[str, int]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): int(addr) for key, addr in raw.items()}


@dataclass(frozen=True, slots=True)
class SiteSnapshot:
    """Last successful site fetch, as returned by the API or the cache."""

    site_id: str
    session_token: str
    site_details: dict[str, Any]
    captured_at: datetime


@dataclass(frozen=True, slots=True)
class Device:
    """Logical device as configured in the Plejd app."""

    device_id: str
    object_id: str
    title: str
    room_id: str | None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Device:
        return cls(
            device_id=raw["deviceId"],
            object_id=raw.get("objectId", ""),
            title=raw.get("title", ""),
            room_id=raw.get("roomId"),
        )


@dataclass(frozen=True, slots=True)
class PlejdDevice:
    """Physical hardware behind a logical device."""

    device_id: str
    hardware_id: int | str
    firmware_version: str | None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> PlejdDevice:
        firmware = raw.get("firmware") or {}
        return cls(
            device_id=raw["deviceId"],
            hardware_id=raw.get("hardwareId"),
            firmware_version=firmware.get("version"),
        )


@dataclass(frozen=True, slots=True)
class OutputSetting:
    """Per-output configuration of a multi-output device."""

    device_parse_id: str
    output: int
    dim_curve: str | None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> OutputSetting:
        return cls(
            device_parse_id=raw.get("deviceParseId", ""),
            output=int(raw.get("output", 0)),
            dim_curve=raw.get("dimCurve"),
        )


@dataclass(frozen=True, slots=True)
class Room:
    room_id: str
    title: str

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Room:
        return cls(room_id=raw["roomId"], title=raw.get("title", ""))


@dataclass(frozen=True, slots=True)
class Scene:
    scene_id: str
    object_id: str
    title: str
    hidden_from_scene_list: bool

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Scene:
        return cls(
            scene_id=raw["sceneId"],
            object_id=raw.get("objectId", ""),
            title=raw.get("title", ""),
            hidden_from_scene_list=bool(raw.get("hiddenFromSceneList", False)),
        )


@dataclass(frozen=True, slots=True)
class SiteDetails:
    """Typed view over the raw ``getSiteById`` payload.

    Address tables map a ``deviceId``/``roomId``/``sceneId`` to numeric mesh
    addresses; ``output_address`` and ``input_address`` hold one address per
    output/input index.
    """

    devices: tuple[Device, ...] = ()
    plejd_devices: tuple[PlejdDevice, ...] = ()
    output_settings: tuple[OutputSetting, ...] = ()
    device_address: dict[str, int] = field(default_factory=dict)
    output_address: dict[str, dict[int, int]] = field(default_factory=dict)
    input_address: dict[str, dict[int, int]] = field(default_factory=dict)
    room_address: dict[str, int] = field(default_factory=dict)
    scene_index: dict[str, int] = field(default_factory=dict)
    rooms: tuple[Room, ...] = ()
    scenes: tuple[Scene, ...] = ()
    crypto_key: str | None = None
    site_title: str | None = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> SiteDetails:
        """Build the typed view; missing sections become empty tables."""
        try:
            return cls._parse(raw)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise PlejdConfigurationError(
                f"Malformed site details: {type(exc).__name__}: {exc}"
            ) from exc

    @classmethod
    def _parse(cls, raw: Mapping[str, Any]) -> SiteDetails:
        mesh = raw.get("plejdMesh") or {}
        site = raw.get("site") or {}
        return cls(
            devices=tuple(Device.from_api(d) for d in raw.get("devices") or ()),
            plejd_devices=tuple(
                PlejdDevice.from_api(d) for d in raw.get("plejdDevices") or ()
            ),
            output_settings=tuple(
                OutputSetting.from_api(s) for s in raw.get("outputSettings") or ()
            ),
            device_address=_address_map(raw.get("deviceAddress")),
            output_address={
                str(key): _index_map(value)
                for key, value in (raw.get("outputAddress") or {}).items()
            },
            input_address={
                str(key): _index_map(value)
                for key, value in (raw.get("inputAddress") or {}).items()
            },
            room_address=_address_map(raw.get("roomAddress")),
            scene_index=_address_map(raw.get("sceneIndex")),
            rooms=tuple(Room.from_api(r) for r in raw.get("rooms") or ()),
            scenes=tuple(Scene.from_api(s) for s in raw.get("scenes") or ()),
            crypto_key=mesh.get("cryptoKey") or None,
            site_title=site.get("title"),
        )

    def plejd_device(self, device_id: str) -> PlejdDevice | None:
        return next(
            (d for d in self.plejd_devices if d.device_id == device_id), None
        )

    def output_setting(self, object_id: str) -> OutputSetting | None:
        return next(
            (s for s in self.output_settings if s.device_parse_id == object_id),
            None,
        )


@dataclass(frozen=True, slots=True)
class HardwareType:
    """Device archetype for a numeric hardware id."""

    name: str
    type: str
    dimmable: bool


@dataclass(frozen=True, slots=True)
class ResolvedDevice:
    """Locally addressable light / switch / sensor / room / scene."""

    id: int
    name: str
    type: str
    type_name: str
    dimmable: bool
    room_id: str | None = None
    version: str | None = None
    serial_number: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedInventory:
    devices: tuple[ResolvedDevice, ...]
    rooms: tuple[ResolvedDevice, ...]
    scenes: tuple[ResolvedDevice, ...]


@dataclass(frozen=True, slots=True)
class PlejdSiteData:
    """Runtime data stored per config entry."""

    api: PlejdApi
    registry: PlejdDeviceRegistry
    snapshot: SiteSnapshot
    site_details: SiteDetails
    inventory: ResolvedInventory
