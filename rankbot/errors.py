"""
rankbot/errors.py
Exception hierarchy for the ranking bot.

Platform failures are classified once, inside the API client, into the
GroupApiError subclasses below. Everything else in the bot matches on type
instead of inspecting messages or status codes.
"""

from typing import Optional


class RankBotError(Exception):
    """Base class for every error the bot raises on purpose."""


class ConfigError(RankBotError):
    """The config file is missing, unreadable, malformed or inconsistent."""


class RoleNotFound(RankBotError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Role {name} not found")


class EndpointExceededRetryLimit(RankBotError):
    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f"{endpoint} endpoint exceeded retry limit")


class MalformedResponse(RankBotError):
    """The platform answered, but not in the shape we rely on."""


# ── Platform errors ───────────────────────────────────────────────────────────

class GroupApiError(RankBotError):
    """Any failed call against the group platform (the "Other" kind)."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class RateLimited(GroupApiError):
    def __init__(self, message: str = "Too many requests", status: Optional[int] = 429):
        super().__init__(message, status)


class InvalidCredential(GroupApiError):
    def __init__(self, message: str = "Invalid .ROBLOSECURITY cookie",
                 status: Optional[int] = 401):
        super().__init__(message, status)


class UnknownErrorCode(GroupApiError):
    """Platform error body carrying a numeric code we have no dedicated type for."""

    def __init__(self, code: int, message: str = "", status: Optional[int] = None):
        self.code = code
        text = f"Roblox error code {code}"
        if message:
            text += f": {message}"
        super().__init__(text, status)


class RoleAlreadyHeld(UnknownErrorCode):
    """The member already has the role being set (Roblox error code 26)."""
