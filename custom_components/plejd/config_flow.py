"""Config flow to configure the Plejd component."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME

from .api import PlejdApi
from .const import (
    CONF_INCLUDE_ROOMS_AS_LIGHTS,
    CONF_PREFER_CACHED_API_RESPONSE,
    CONF_SITE,
    DOMAIN,
)
from .exceptions import (
    PlejdAuthenticationError,
    PlejdError,
    PlejdSiteNotFoundError,
    PlejdThrottledError,
)

_LOGGER = logging.getLogger(__name__)

SITE_SETTINGS = {
    vol.Required(CONF_SITE): vol.All(str, vol.Length(min=1)),
    vol.Required(CONF_USERNAME): str,
    vol.Required(CONF_PASSWORD): str,
    vol.Optional(CONF_PREFER_CACHED_API_RESPONSE, default=False): bool,
    vol.Optional(CONF_INCLUDE_ROOMS_AS_LIGHTS, default=False): bool,
}


class PlejdFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a Plejd config flow."""

    VERSION = 1
    CONNECTION_CLASS = config_entries.CONN_CLASS_CLOUD_POLL

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Handle a flow initialized by the user to configure a site."""
        errors: dict[str, str] = {}

        if user_input is not None:
            api = PlejdApi(
                username=user_input[CONF_USERNAME],
                password=user_input[CONF_PASSWORD],
                site=user_input[CONF_SITE],
            )
            try:
                session_token = await api.login()
                site_id = await api.find_site(session_token)
                await self.async_set_unique_id(site_id)
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=user_input[CONF_SITE],
                    data=user_input,
                )
            except PlejdThrottledError:
                errors["base"] = "throttled"
            except PlejdAuthenticationError:
                errors["base"] = "auth_error"
            except PlejdSiteNotFoundError:
                errors["base"] = "site_not_found"
            except PlejdError:
                _LOGGER.exception("Unexpected error validating Plejd site")
                errors["base"] = "connect_error"
            finally:
                await api.close()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(SITE_SETTINGS),
            errors=errors,
        )
