"""Support for Plejd sites via the Plejd cloud."""

from __future__ import annotations

import logging

from homeassistant import config_entries, core
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.config_validation import config_entry_only_config_schema

from .api import PlejdApi
from .cache import SnapshotCache
from .const import (
    CACHE_DIR,
    CACHE_FILENAME,
    CONF_INCLUDE_ROOMS_AS_LIGHTS,
    CONF_PREFER_CACHED_API_RESPONSE,
    CONF_SITE,
    DOMAIN,
    MANUFACTURER,
)
from .exceptions import (
    PlejdAuthenticationError,
    PlejdConnectionError,
    PlejdError,
    PlejdThrottledError,
    PlejdUnknownHardwareError,
)
from .loader import SiteLoader
from .models import PlejdSiteData, SiteDetails
from .registry import PlejdDeviceRegistry
from .resolver import resolve_site

CONFIG_SCHEMA = config_entry_only_config_schema(DOMAIN)

_LOGGER = logging.getLogger(__name__)


async def async_setup(hass: core.HomeAssistant, config: dict) -> bool:
    """Set up the Plejd component."""
    return True


async def async_setup_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Set up a Plejd site from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    api = PlejdApi(
        username=entry.data[CONF_USERNAME],
        password=entry.data[CONF_PASSWORD],
        site=entry.data[CONF_SITE],
    )

    try:
        site_data = await async_load_site(hass, entry, api)
    except PlejdError as exc:
        await api.close()
        _log_setup_error(entry.data[CONF_SITE], exc)
        return False

    hass.data[DOMAIN][entry.entry_id] = site_data

    device_registry = dr.async_get(hass)
    device_registry.async_get_or_create(
        config_entry_id=entry.entry_id,
        identifiers={(DOMAIN, site_data.snapshot.site_id)},
        manufacturer=MANUFACTURER,
        name=site_data.site_details.site_title or entry.title,
        model="Site",
    )

    return True


async def async_load_site(
    hass: core.HomeAssistant,
    entry: config_entries.ConfigEntry,
    api: PlejdApi,
) -> PlejdSiteData:
    """Acquire the site snapshot and resolve it into a device registry."""
    cache = SnapshotCache(hass.config.path(CACHE_DIR, CACHE_FILENAME))
    loader = SiteLoader(
        api, cache, async_add_executor_job=hass.async_add_executor_job
    )
    snapshot = await loader.acquire_snapshot(
        entry.data.get(CONF_PREFER_CACHED_API_RESPONSE, False)
    )

    registry = PlejdDeviceRegistry()
    registry.set_site(snapshot.site_details)
    site_details = SiteDetails.from_api(snapshot.site_details)
    registry.set_crypto_key(site_details.crypto_key)

    inventory = resolve_site(
        site_details,
        registry,
        include_rooms_as_lights=entry.data.get(CONF_INCLUDE_ROOMS_AS_LIGHTS, False),
    )
    return PlejdSiteData(
        api=api,
        registry=registry,
        snapshot=snapshot,
        site_details=site_details,
        inventory=inventory,
    )


def _log_setup_error(site: str, exc: PlejdError) -> None:
    if isinstance(exc, PlejdThrottledError):
        _LOGGER.error(
            "Plejd refused the login for %s, probably throttling. "
            "Wait a while before reloading the integration",
            site,
        )
    elif isinstance(exc, PlejdAuthenticationError):
        _LOGGER.error(
            "Authentication error: check the Plejd username and password"
        )
    elif isinstance(exc, PlejdConnectionError):
        _LOGGER.error("Connection error: cannot reach the Plejd cloud (%s)", exc)
    elif isinstance(exc, PlejdUnknownHardwareError):
        _LOGGER.error(
            "Site %s contains hardware id %s which is not supported yet",
            site,
            exc.hardware_id,
        )
    else:
        _LOGGER.error("Unable to set up Plejd site %s: %s", site, exc)


async def async_unload_entry(
    hass: core.HomeAssistant,
    config_entry: config_entries.ConfigEntry,
) -> bool:
    """Unload a config entry."""
    site_data: PlejdSiteData | None = hass.data[DOMAIN].pop(
        config_entry.entry_id, None
    )
    if site_data is not None:
        await site_data.api.close()

    return True
