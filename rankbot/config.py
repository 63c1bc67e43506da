"""
rankbot/config.py
Run configuration for the ranking bot.

The JSON config file names the group, the roles to scan, which account
creation years map onto which role, and the fallback role. The
.ROBLOSECURITY cookie may live in the file or in the ROBLOSECURITY
environment variable (a .env file in the working directory is loaded).
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

from rankbot.errors import ConfigError

load_dotenv(find_dotenv(usecwd=True))

ENV_ROBLOSECURITY = "ROBLOSECURITY"

# camelCase is the documented spelling; snake_case is accepted as well.
_KEY_ALIASES = {
    "groupId": "group_id",
    "scannedRoles": "scanned_roles",
    "roleYearPairs": "role_year_pairs",
    "wildcardRole": "wildcard_role",
    "roblosecurity": "roblosecurity",
}


class Secret:
    """
    Holds a credential without ever printing it.

    repr/str/format all show a placeholder, and pickling or copying is
    refused, so the value can only leave through reveal().
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "Secret('**********')"

    __str__ = __repr__

    def __format__(self, format_spec: str) -> str:
        return repr(self)

    def __eq__(self, other) -> bool:
        return isinstance(other, Secret) and other._value == self._value

    def __hash__(self) -> int:
        return hash((Secret, self._value))

    def __bool__(self) -> bool:
        return bool(self._value)

    def __reduce__(self):
        raise TypeError("Secret values cannot be serialized")

    def __copy__(self):
        raise TypeError("Secret values cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Secret values cannot be copied")


@dataclass(frozen=True)
class Config:
    group_id: int
    roblosecurity: Secret
    scanned_roles: tuple[str, ...]
    role_year_pairs: Mapping[str, tuple[int, ...]]
    wildcard_role: str

    def referenced_roles(self) -> list[str]:
        """Every role name the run needs, scanned first, wildcard last, no repeats."""
        names = [*self.scanned_roles, *self.role_year_pairs.keys(), self.wildcard_role]
        return list(dict.fromkeys(names))

    @classmethod
    def from_dict(cls, raw: Any) -> "Config":
        if not isinstance(raw, dict):
            raise ConfigError("Config must be a JSON object")

        data = {}
        for key, value in raw.items():
            canonical = _KEY_ALIASES.get(key, key)
            if canonical in data:
                raise ConfigError(f"Config key '{canonical}' given more than once")
            data[canonical] = value

        for required in ("group_id", "scanned_roles", "role_year_pairs", "wildcard_role"):
            if required not in data:
                raise ConfigError(f"Config is missing required key '{required}'")

        group_id = data["group_id"]
        if not _is_int(group_id) or group_id <= 0:
            raise ConfigError("groupId must be a positive integer")

        scanned = data["scanned_roles"]
        if not isinstance(scanned, list) or not all(isinstance(r, str) for r in scanned):
            raise ConfigError("scannedRoles must be an array of role names")
        if not scanned:
            raise ConfigError("scannedRoles must name at least one role")

        wildcard = data["wildcard_role"]
        if not isinstance(wildcard, str) or not wildcard:
            raise ConfigError("wildcardRole must be a non-empty role name")

        return cls(
            group_id=group_id,
            roblosecurity=_resolve_cookie(data.get("roblosecurity")),
            scanned_roles=tuple(scanned),
            role_year_pairs=_parse_role_year_pairs(data["role_year_pairs"]),
            wildcard_role=wildcard,
        )


def load_config(path: Union[str, Path]) -> Config:
    """Read and validate a JSON config file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    return Config.from_dict(raw)


# ── Internal ───────────────────────────────────────────────────────────────────

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _resolve_cookie(value: Optional[Any]) -> Secret:
    if value is not None and not isinstance(value, str):
        raise ConfigError("roblosecurity must be a string")
    if not value:
        value = os.environ.get(ENV_ROBLOSECURITY, "")
    if not value:
        raise ConfigError(
            "No .ROBLOSECURITY cookie configured.\n"
            f"Set 'roblosecurity' in the config file or export {ENV_ROBLOSECURITY}=..."
        )
    return Secret(value)


def _parse_role_year_pairs(raw: Any) -> Mapping[str, tuple[int, ...]]:
    if not isinstance(raw, dict):
        raise ConfigError("roleYearPairs must be an object of role name -> [years]")

    pairs = {}
    claimed = {}  # year -> role that first listed it
    for role, years in raw.items():
        if not isinstance(years, list) or not all(_is_int(y) for y in years):
            raise ConfigError(f"roleYearPairs['{role}'] must be an array of integer years")
        for year in years:
            owner = claimed.setdefault(year, role)
            if owner != role:
                raise ConfigError(
                    f"Year {year} is mapped to both '{owner}' and '{role}' in roleYearPairs"
                )
        pairs[role] = tuple(years)

    return MappingProxyType(pairs)
