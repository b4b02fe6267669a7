"""On-disk cache of the last successful Plejd site fetch."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from .exceptions import PlejdCachePersistError, PlejdCacheUnreadableError
from .models import SiteSnapshot

_LOGGER = logging.getLogger(__name__)


class SnapshotCache:
    """Single JSON file holding ``siteId``, ``siteDetails``, ``sessionToken``
    and ``dtCache``.

    Both operations are blocking; run them in an executor from async code.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._path = Path(path)
        self._logger = logger or _LOGGER

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SiteSnapshot | None:
        """Return the cached snapshot, or None when absent or unusable."""
        self._logger.info("Getting cached api response from %s", self._path)
        try:
            return self._read()
        except PlejdCacheUnreadableError as exc:
            self._logger.warning(
                "No cached api response could be read. "
                "This is normal on the first run: %s",
                exc,
            )
            return None

    def save(self, snapshot: SiteSnapshot) -> None:
        """Replace the cache file with *snapshot*; failures are only logged."""
        self._logger.info("Saving cached copy to %s", self._path)
        try:
            self._write(snapshot)
        except PlejdCachePersistError as exc:
            self._logger.error("Failed to save cache of api response: %s", exc)

    # ------------------------------------------------------------------

    def _read(self) -> SiteSnapshot:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PlejdCacheUnreadableError(str(exc)) from exc

        if not isinstance(raw, dict):
            raise PlejdCacheUnreadableError("cache is not a JSON object")

        site_id = raw.get("siteId")
        site_details = raw.get("siteDetails")
        session_token = raw.get("sessionToken")
        if not (site_id and site_details and session_token):
            raise PlejdCacheUnreadableError(
                "cache lacks siteId, siteDetails or sessionToken"
            )
        if not isinstance(site_details, dict):
            raise PlejdCacheUnreadableError("siteDetails is not a JSON object")

        try:
            captured_at = datetime.fromisoformat(raw["dtCache"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PlejdCacheUnreadableError("cache lacks a valid dtCache") from exc

        return SiteSnapshot(
            site_id=site_id,
            session_token=session_token,
            site_details=site_details,
            captured_at=captured_at,
        )

    def _write(self, snapshot: SiteSnapshot) -> None:
        payload: dict[str, Any] = {
            "siteId": snapshot.site_id,
            "siteDetails": snapshot.site_details,
            "sessionToken": snapshot.session_token,
            "dtCache": snapshot.captured_at.astimezone(timezone.utc).isoformat(),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(payload, tmp)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise PlejdCachePersistError(str(exc)) from exc
