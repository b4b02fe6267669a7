"""In-memory registry of resolved Plejd devices, rooms and scenes."""

from __future__ import annotations

import logging
from typing import Any

from .models import ResolvedDevice

_LOGGER = logging.getLogger(__name__)


class PlejdDeviceRegistry:
    """Address-keyed store fed by the site resolver."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _LOGGER
        self._site: dict[str, Any] | None = None
        self._crypto_key: str | None = None

        self._devices: dict[int, ResolvedDevice] = {}
        self._device_ids_by_room: dict[str, list[int]] = {}
        self._room_devices: dict[int, ResolvedDevice] = {}
        self._scenes: dict[int, ResolvedDevice] = {}

    # ------------------------------------------------------------------
    #  Mutation
    # ------------------------------------------------------------------

    def set_site(self, site_details: dict[str, Any]) -> None:
        self._site = site_details

    def set_crypto_key(self, crypto_key: str | None) -> None:
        self._crypto_key = crypto_key

    def clear_devices(self) -> None:
        """Forget every device, room and scene."""
        self._devices = {}
        self._device_ids_by_room = {}
        self._room_devices = {}
        self._scenes = {}

    def add_device(self, device: ResolvedDevice) -> None:
        if device.id in self._devices:
            self._logger.warning(
                "Device address %s registered twice, replacing %s with %s",
                device.id,
                self._devices[device.id].name,
                device.name,
            )
        self._devices[device.id] = device

        if device.room_id is not None:
            room = self._device_ids_by_room.setdefault(device.room_id, [])
            if device.id not in room:
                room.append(device.id)

        self._logger.debug(
            "Added device %s (%s, %s) at address %s",
            device.name,
            device.type_name,
            "dimmable" if device.dimmable else "on/off",
            device.id,
        )

    def add_room_device(self, device: ResolvedDevice) -> None:
        self._room_devices[device.id] = device
        self._logger.debug("Added room %s at address %s", device.name, device.id)

    def add_scene(self, device: ResolvedDevice) -> None:
        self._scenes[device.id] = device
        self._logger.debug("Added scene %s at address %s", device.name, device.id)

    # ------------------------------------------------------------------
    #  Getters
    # ------------------------------------------------------------------

    @property
    def site(self) -> dict[str, Any] | None:
        return self._site

    @property
    def crypto_key(self) -> str | None:
        return self._crypto_key

    def devices_in_room(self, room_id: str) -> list[int]:
        """Return addresses of the devices registered for *room_id*."""
        return list(self._device_ids_by_room.get(room_id, ()))

    def get_device(self, device_id: int) -> ResolvedDevice | None:
        return self._devices.get(device_id)

    def get_devices(self) -> dict[int, ResolvedDevice]:
        return self._devices

    def get_room_devices(self) -> dict[int, ResolvedDevice]:
        return self._room_devices

    def get_scenes(self) -> dict[int, ResolvedDevice]:
        return self._scenes
