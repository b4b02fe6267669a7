"""Constants for the Plejd integration and site inventory library."""

from __future__ import annotations

# ── Home Assistant integration ──────────────────────────────────────
DOMAIN = "plejd"
MANUFACTURER = "Plejd"

# ── Configuration keys ──────────────────────────────────────────────
CONF_SITE = "site"
CONF_PREFER_CACHED_API_RESPONSE = "prefer_cached_api_response"
CONF_INCLUDE_ROOMS_AS_LIGHTS = "include_rooms_as_lights"

# ── Plejd cloud (Parse server) ──────────────────────────────────────
API_APP_ID = "zHtVqXt8k4yFyk2QGmgp48D9xZr2G94xWYnF4dak"
API_BASE_URL = "https://cloud.plejd.com/parse/"
API_LOGIN_URL = "login"
API_SITE_LIST_URL = "functions/getSiteList"
API_SITE_DETAILS_URL = "functions/getSiteById"

HEADER_APP_ID = "X-Parse-Application-Id"
HEADER_SESSION_TOKEN = "X-Parse-Session-Token"

# Login status codes worth telling the operator about
HTTP_STATUS_INVALID_CREDENTIALS = 400
HTTP_STATUS_THROTTLED = 403

# ── Cached API response ────────────────────────────────────────────
CACHE_DIR = ".plejd"
CACHE_FILENAME = "cachedApiResponse.json"

# ── Device categories (values match HA platform names) ─────────────
DEVICE_TYPE_LIGHT = "light"
DEVICE_TYPE_SENSOR = "sensor"
DEVICE_TYPE_SWITCH = "switch"

# ── Archetype labels with special handling ─────────────────────────
TYPE_NAME_WPH01 = "WPH-01"
TYPE_NAME_UNKNOWN = "-unknown-"
TYPE_NAME_ROOM = "Room"
TYPE_NAME_SCENE = "Scene"

SCENE_VERSION = "1.0"

# Output dim curve marking a relay-style (on/off only) output
DIM_CURVE_NON_DIMMABLE = "NonDimmable"

# Suffixes for the two inputs of a WPH-01 wall switch
WPH01_BUTTON_SUFFIXES: tuple[str, str] = ("left", "right")
