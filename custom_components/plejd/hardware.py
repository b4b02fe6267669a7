"""Plejd hardware id to device archetype table."""

from __future__ import annotations

from .const import (
    DEVICE_TYPE_LIGHT,
    DEVICE_TYPE_SENSOR,
    DEVICE_TYPE_SWITCH,
    TYPE_NAME_UNKNOWN,
    TYPE_NAME_WPH01,
)
from .exceptions import PlejdUnknownHardwareError
from .models import HardwareType

_DIM_01 = HardwareType("DIM-01", DEVICE_TYPE_LIGHT, True)
_REL_01 = HardwareType("REL-01", DEVICE_TYPE_LIGHT, False)
# Revisions seen in the field but never classified; treated as on/off lights.
_UNKNOWN = HardwareType(TYPE_NAME_UNKNOWN, DEVICE_TYPE_LIGHT, False)

HARDWARE_TYPES: dict[int, HardwareType] = {
    1: _DIM_01,
    2: HardwareType("DIM-02", DEVICE_TYPE_LIGHT, True),
    3: HardwareType("CTR-01", DEVICE_TYPE_LIGHT, False),
    4: HardwareType("GWY-01", DEVICE_TYPE_SENSOR, False),
    5: HardwareType("LED-10", DEVICE_TYPE_LIGHT, True),
    6: HardwareType(TYPE_NAME_WPH01, DEVICE_TYPE_SWITCH, False),
    7: _REL_01,
    8: _UNKNOWN,
    9: _UNKNOWN,
    10: _UNKNOWN,
    11: _DIM_01,
    12: _UNKNOWN,
    13: HardwareType("Generic", DEVICE_TYPE_LIGHT, False),
    14: _UNKNOWN,
    15: _UNKNOWN,
    16: _UNKNOWN,
    17: _REL_01,
    18: HardwareType("REL-02", DEVICE_TYPE_LIGHT, False),
    19: _UNKNOWN,
    20: HardwareType("SPR-01", DEVICE_TYPE_SWITCH, False),
}


def get_hardware_type(hardware_id: int | str) -> HardwareType:
    """Return the archetype for *hardware_id* (int or numeric string).

    Unmapped ids raise instead of defaulting so a new hardware revision has
    to be added here explicitly.
    """
    try:
        key = int(hardware_id)
    except (TypeError, ValueError) as exc:
        raise PlejdUnknownHardwareError(hardware_id) from exc

    hardware_type = HARDWARE_TYPES.get(key)
    if hardware_type is None:
        raise PlejdUnknownHardwareError(hardware_id)
    return hardware_type
