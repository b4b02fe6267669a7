"""Exceptions for Plejd cloud communication and site resolution."""

from __future__ import annotations


class PlejdError(Exception):
    """Base Plejd exception."""


class PlejdAuthenticationError(PlejdError):
    """Plejd login failed (bad credentials or no session token)."""


class PlejdThrottledError(PlejdAuthenticationError):
    """Plejd refused the login with 403, usually login throttling."""


class PlejdConnectionError(PlejdError):
    """Plejd cloud unreachable or timed out."""


class PlejdCommandError(PlejdError):
    """Plejd cloud rejected a request or returned garbage."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PlejdSiteNotFoundError(PlejdError):
    """No site on the account matches the configured title."""


class PlejdSiteDetailsEmptyError(PlejdError):
    """Site detail lookup returned no site."""


class PlejdMissingCryptoKeyError(PlejdError):
    """Site details carry no mesh crypto key."""


class PlejdUnknownHardwareError(PlejdError):
    """Hardware id is not in the hardware type table."""

    def __init__(self, hardware_id: object) -> None:
        super().__init__(f"Unknown device type with id {hardware_id}")
        self.hardware_id = hardware_id


class PlejdConfigurationError(PlejdError):
    """Site details reference an address that is not in its lookup table."""


class PlejdCacheUnreadableError(PlejdError):
    """Cached API response missing, corrupt or incomplete."""


class PlejdCachePersistError(PlejdError):
    """Cached API response could not be written."""
