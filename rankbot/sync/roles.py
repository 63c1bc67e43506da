"""
rankbot/sync/roles.py
Role lookups built once per run: name -> role id (RoleDirectory) and
creation year -> role name (YearRoleIndex). Both are read-only afterwards.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from rankbot.clients.base import GroupAPI
from rankbot.errors import RoleNotFound


class RoleDirectory:
    def __init__(self, ids_by_name: Mapping[str, int]):
        self._ids = MappingProxyType(dict(ids_by_name))

    @classmethod
    def resolve(cls, api: GroupAPI, group_id: int, names: Iterable[str]) -> "RoleDirectory":
        """
        List the group's roles once and resolve every name by exact match.
        Raises RoleNotFound for the first name the group doesn't have.
        """
        group_roles = api.group_roles(group_id)

        ids = {}
        for name in names:
            match = next((r for r in group_roles if r.name == name), None)
            if match is None:
                raise RoleNotFound(name)
            ids[name] = match.id
        return cls(ids)

    def id_of(self, name: str) -> int:
        try:
            return self._ids[name]
        except KeyError:
            raise RoleNotFound(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class YearRoleIndex:
    """role -> years, inverted. A year listed under several roles goes to the last one."""

    def __init__(self, roles_by_year: Mapping[int, str]):
        self._roles = MappingProxyType(dict(roles_by_year))

    @classmethod
    def from_pairs(cls, role_year_pairs: Mapping[str, Iterable[int]]) -> "YearRoleIndex":
        roles_by_year = {}
        for role, years in role_year_pairs.items():
            for year in years:
                roles_by_year[year] = role
        return cls(roles_by_year)

    def role_for(self, year: int) -> Optional[str]:
        return self._roles.get(year)

    def __len__(self) -> int:
        return len(self._roles)
