"""Plejd cloud API client: login, site lookup and site details."""

from __future__ import annotations

import asyncio
import dataclasses
from datetime import datetime, timezone
import json
import logging
from typing import Any

import aiohttp
from aiohttp import client_exceptions

from .const import (
    API_APP_ID,
    API_BASE_URL,
    API_LOGIN_URL,
    API_SITE_DETAILS_URL,
    API_SITE_LIST_URL,
    HEADER_APP_ID,
    HEADER_SESSION_TOKEN,
    HTTP_STATUS_INVALID_CREDENTIALS,
    HTTP_STATUS_THROTTLED,
)
from .exceptions import (
    PlejdAuthenticationError,
    PlejdCommandError,
    PlejdConnectionError,
    PlejdError,
    PlejdMissingCryptoKeyError,
    PlejdSiteDetailsEmptyError,
    PlejdSiteNotFoundError,
    PlejdThrottledError,
)
from .models import SiteSnapshot

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class _FetchState:
    """What the fetch sequence has produced so far."""

    session_token: str | None = None
    site_id: str | None = None
    site_details: dict[str, Any] | None = None


class PlejdApi:
    """Async client for the Plejd cloud (Parse server)."""

    def __init__(
        self,
        username: str,
        password: str,
        site: str,
        *,
        session: aiohttp.ClientSession | None = None,
        request_timeout: float | None = None,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._username = username
        self._password = password
        self._site = site
        self._request_timeout = request_timeout
        self._debug = debug
        self._logger = logger or _LOGGER

        self._session = session
        self._close_session = False

    @property
    def site(self) -> str:
        return self._site

    # ------------------------------------------------------------------
    #  Fetch sequence
    # ------------------------------------------------------------------

    async def fetch_snapshot(self) -> SiteSnapshot:
        """Log in, find the configured site and fetch its details."""
        state = await self._authenticate(_FetchState())
        state = await self._select_site(state)
        state = await self._load_site_details(state)

        return SiteSnapshot(
            site_id=state.site_id,
            session_token=state.session_token,
            site_details=state.site_details,
            captured_at=datetime.now(timezone.utc),
        )

    async def _authenticate(self, state: _FetchState) -> _FetchState:
        return dataclasses.replace(state, session_token=await self.login())

    async def _select_site(self, state: _FetchState) -> _FetchState:
        return dataclasses.replace(
            state, site_id=await self.find_site(state.session_token)
        )

    async def _load_site_details(self, state: _FetchState) -> _FetchState:
        return dataclasses.replace(
            state,
            site_details=await self.get_site_details(
                state.session_token, state.site_id
            ),
        )

    # ------------------------------------------------------------------
    #  Endpoints
    # ------------------------------------------------------------------

    async def login(self) -> str:
        """Log in and return the session token."""
        self._logger.info("Logging into %s", self._site)

        try:
            response = await self._post(
                API_LOGIN_URL,
                {"username": self._username, "password": self._password},
            )
        except PlejdCommandError as exc:
            if exc.status == HTTP_STATUS_INVALID_CREDENTIALS:
                self._logger.error(
                    "Server returned status 400, probably invalid credentials, "
                    "please verify"
                )
                raise PlejdAuthenticationError(
                    "Plejd rejected the username or password"
                ) from exc
            if exc.status == HTTP_STATUS_THROTTLED:
                self._logger.error(
                    "Server returned status 403, forbidden. Plejd does this "
                    "sometimes despite correct credentials, possibly throttling "
                    "logins. Waiting a long time often fixes this"
                )
                raise PlejdThrottledError(
                    "Plejd refused the login (throttled)"
                ) from exc
            self._logger.error("Unable to retrieve session token: %s", exc)
            raise

        token = response.get("sessionToken") if isinstance(response, dict) else None
        if not token:
            self._logger.error("No session token received")
            raise PlejdAuthenticationError("No session token received")

        self._logger.info("Got session token response")
        return token

    async def find_site(self, session_token: str) -> str:
        """Return the id of the site whose title matches the configured one."""
        self._logger.info("Get all Plejd sites for account...")

        sites = [
            self._site_record(entry)
            for entry in self._result(
                await self._post(API_SITE_LIST_URL, session_token=session_token)
            )
        ]
        self._logger.info(
            "Got site list response with %s: %s",
            len(sites),
            ", ".join(str(s.get("title")) for s in sites),
        )

        site = next((s for s in sites if s.get("title") == self._site), None)
        if site is None:
            self._logger.error("Failed to find a site named %s", self._site)
            raise PlejdSiteNotFoundError(
                f"Failed to find a site named {self._site}"
            )

        site_id = site.get("siteId")
        if not site_id:
            raise PlejdCommandError(f"Site {self._site} has no siteId")

        self._logger.info("Site found matching configuration name %s", self._site)
        return site_id

    async def get_site_details(
        self, session_token: str, site_id: str
    ) -> dict[str, Any]:
        """Fetch the full site record for *site_id*."""
        self._logger.info("Get site details for %s...", site_id)

        result = self._result(
            await self._post(
                API_SITE_DETAILS_URL,
                {"siteId": site_id},
                session_token=session_token,
            )
        )
        if not result:
            self._logger.error("No site with ID %s was found", site_id)
            raise PlejdSiteDetailsEmptyError(f"No site with ID {site_id} was found")

        site_details = result[0]
        if not isinstance(site_details, dict):
            raise PlejdCommandError(f"Site details for {site_id} is not an object")

        mesh = site_details.get("plejdMesh")
        if not (isinstance(mesh, dict) and mesh.get("cryptoKey")):
            self._logger.error("No crypto key set for site %s", site_id)
            raise PlejdMissingCryptoKeyError(f"No crypto key set for site {site_id}")

        self._logger.info("Site details for site id %s found", site_id)
        return site_details

    @staticmethod
    def _result(response: Any) -> list[dict[str, Any]]:
        """Unwrap the ``result`` list of a Parse cloud function response."""
        result = response.get("result") if isinstance(response, dict) else None
        if not isinstance(result, list):
            raise PlejdCommandError("Plejd response did not contain a result list")
        return result

    @staticmethod
    def _site_record(entry: Any) -> dict[str, Any]:
        """Return the inner ``site`` object of a site list entry."""
        site = entry.get("site") if isinstance(entry, dict) else None
        if not isinstance(site, dict):
            raise PlejdCommandError("Plejd site list entry has no site object")
        return site

    # ------------------------------------------------------------------
    #  HTTP transport
    # ------------------------------------------------------------------

    async def _post(
        self,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        session_token: str | None = None,
    ) -> Any:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._close_session = True

        url = f"{API_BASE_URL}{path}"
        headers = {
            HEADER_APP_ID: API_APP_ID,
            "Content-Type": "application/json",
        }
        if session_token:
            headers[HEADER_SESSION_TOKEN] = session_token

        self._logger.debug("Sending POST to %s", url)
        if self._debug and body:
            logged = dict(body)
            if "password" in logged:
                logged["password"] = "***"
            self._logger.debug("Plejd request:\n%s", json.dumps(logged))

        try:
            async with asyncio.timeout(self._request_timeout):
                async with self._session.post(
                    url, json=body or {}, headers=headers
                ) as resp:
                    if resp.status >= 400:
                        raise PlejdCommandError(
                            f"POST {path} returned HTTP {resp.status}",
                            status=resp.status,
                        )
                    result = await resp.json(content_type=None)

            if self._debug:
                self._logger.debug(
                    "Plejd response:\n%s", json.dumps(result, indent=2)
                )
            return result

        except TimeoutError as exc:
            self._logger.error("Timeout talking to Plejd cloud: %s", exc)
            raise PlejdConnectionError("Timeout communicating with Plejd cloud") from exc
        except client_exceptions.ClientConnectionError as exc:
            raise PlejdConnectionError(f"Cannot reach Plejd cloud: {exc}") from exc
        except PlejdError:
            raise
        except Exception as exc:
            self._logger.error("Unexpected error: %s / %s", type(exc).__name__, exc)
            raise PlejdCommandError(
                "Unknown error communicating with Plejd cloud"
            ) from exc

    # ------------------------------------------------------------------
    #  Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._session and self._close_session:
            await self._session.close()
            self._session = None
            self._close_session = False

    async def __aenter__(self) -> PlejdApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
