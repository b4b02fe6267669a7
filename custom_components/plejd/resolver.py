"""Resolve Plejd site details into addressable devices, rooms and scenes."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Protocol

from .const import (
    DEVICE_TYPE_LIGHT,
    DEVICE_TYPE_SWITCH,
    DIM_CURVE_NON_DIMMABLE,
    SCENE_VERSION,
    TYPE_NAME_ROOM,
    TYPE_NAME_SCENE,
    TYPE_NAME_WPH01,
    WPH01_BUTTON_SUFFIXES,
)
from .exceptions import PlejdConfigurationError
from .hardware import get_hardware_type
from .models import (
    Device,
    HardwareType,
    ResolvedDevice,
    ResolvedInventory,
    Room,
    SiteDetails,
)

_LOGGER = logging.getLogger(__name__)


class DeviceRegistry(Protocol):
    """What the resolver needs from the device registry."""

    def clear_devices(self) -> None: ...

    def add_device(self, device: ResolvedDevice) -> None: ...

    def add_room_device(self, device: ResolvedDevice) -> None: ...

    def add_scene(self, device: ResolvedDevice) -> None: ...

    def devices_in_room(self, room_id: str) -> list[int]: ...

    def get_device(self, device_id: int) -> ResolvedDevice | None: ...


def resolve_site(
    site_details: SiteDetails,
    registry: DeviceRegistry,
    *,
    include_rooms_as_lights: bool = False,
    hardware_lookup: Callable[[int | str], HardwareType] = get_hardware_type,
    logger: logging.Logger | None = None,
) -> ResolvedInventory:
    """Resolve every device, room and scene and register them.

    Everything is resolved before the registry is touched, so a lookup
    failure leaves the registry exactly as it was.
    """
    log = logger or _LOGGER
    log.info("Getting devices from site details response...")

    devices: list[ResolvedDevice] = []
    for device in site_details.devices:
        devices.extend(_resolve_device(site_details, device, hardware_lookup))

    room_addresses: list[tuple[Room, int]] = []
    if include_rooms_as_lights:
        room_addresses = [
            (room, _room_address(site_details, room)) for room in site_details.rooms
        ]

    scenes = _resolve_scenes(site_details)

    registry.clear_devices()
    for resolved in devices:
        registry.add_device(resolved)

    rooms: list[ResolvedDevice] = []
    if include_rooms_as_lights:
        log.debug("include_rooms_as_lights is set, adding rooms too")
        for room, address in room_addresses:
            room_device = ResolvedDevice(
                id=address,
                name=room.title,
                type=DEVICE_TYPE_LIGHT,
                type_name=TYPE_NAME_ROOM,
                dimmable=_room_dimmable(registry, room.room_id),
            )
            registry.add_room_device(room_device)
            rooms.append(room_device)

    for scene in scenes:
        registry.add_scene(scene)

    log.info(
        "Resolved %s devices, %s rooms and %s scenes",
        len(devices),
        len(rooms),
        len(scenes),
    )
    return ResolvedInventory(
        devices=tuple(devices), rooms=tuple(rooms), scenes=tuple(scenes)
    )


def _resolve_device(
    site_details: SiteDetails,
    device: Device,
    hardware_lookup: Callable[[int | str], HardwareType],
) -> list[ResolvedDevice]:
    device_id = device.device_id

    plejd_device = site_details.plejd_device(device_id)
    if plejd_device is None:
        raise PlejdConfigurationError(
            f"Device {device.title} ({device_id}) has no hardware entry"
        )
    hardware_type = hardware_lookup(plejd_device.hardware_id)

    settings = site_details.output_setting(device.object_id)
    if settings is not None:
        address = site_details.output_address.get(device_id, {}).get(settings.output)
        dimmable = settings.dim_curve != DIM_CURVE_NON_DIMMABLE
    else:
        address = site_details.device_address.get(device_id)
        dimmable = hardware_type.dimmable

    def build(mesh_address: int, name: str) -> ResolvedDevice:
        return ResolvedDevice(
            id=mesh_address,
            name=name,
            type=hardware_type.type,
            type_name=hardware_type.name,
            dimmable=dimmable,
            room_id=device.room_id,
            version=plejd_device.firmware_version,
            serial_number=device_id,
        )

    if hardware_type.name != TYPE_NAME_WPH01:
        if address is None:
            raise PlejdConfigurationError(
                f"Device {device.title} ({device_id}) has no mesh address"
            )
        return [build(address, device.title)]

    # One record per button, addressed by its input; the device address is unused
    inputs = site_details.input_address.get(device_id, {})
    buttons = []
    for index, suffix in enumerate(WPH01_BUTTON_SUFFIXES):
        if index not in inputs:
            raise PlejdConfigurationError(
                f"Device {device.title} ({device_id}) is missing input {index}"
            )
        buttons.append(build(inputs[index], f"{device.title} {suffix}"))
    return buttons


def _room_address(site_details: SiteDetails, room: Room) -> int:
    address = site_details.room_address.get(room.room_id)
    if address is None:
        raise PlejdConfigurationError(
            f"Room {room.title} ({room.room_id}) has no mesh address"
        )
    return address


def _room_dimmable(registry: DeviceRegistry, room_id: str) -> bool:
    for device_id in registry.devices_in_room(room_id):
        device = registry.get_device(device_id)
        if device is not None and device.dimmable:
            return True
    return False


def _resolve_scenes(site_details: SiteDetails) -> list[ResolvedDevice]:
    scenes = []
    for scene in site_details.scenes:
        if scene.hidden_from_scene_list:
            continue
        address = site_details.scene_index.get(scene.scene_id)
        if address is None:
            raise PlejdConfigurationError(
                f"Scene {scene.title} ({scene.scene_id}) has no scene index"
            )
        scenes.append(
            ResolvedDevice(
                id=address,
                name=scene.title,
                type=DEVICE_TYPE_SWITCH,
                type_name=TYPE_NAME_SCENE,
                dimmable=False,
                version=SCENE_VERSION,
                serial_number=scene.object_id,
            )
        )
    return scenes
