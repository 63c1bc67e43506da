"""Shared test fixtures and helpers."""

from __future__ import annotations

from collections import deque

import pytest

from rankbot.clients.base import GroupRole, MemberPage, UserDetails
from rankbot.config import Config


class FakeGroupAPI:
    """
    In-memory GroupAPI.

    Responses can be scripted per call: queue exceptions (or values) in
    ``user_details_script`` / ``set_role_script`` and they are consumed
    before falling back to the default behaviour.
    """

    def __init__(self, roles=None, members=None, created=None):
        self.roles = roles or []
        self.members = members or {}        # role_id -> list[MemberPage]
        self.created = created or {}        # user_id -> "YYYY-..." timestamp
        self.user_details_script = deque()
        self.set_role_script = deque()
        self.calls = []
        self.holdings = {}                  # (group_id, user_id) -> role_id

    def group_roles(self, group_id):
        self.calls.append(("group_roles", group_id))
        return list(self.roles)

    def group_role_members(self, group_id, role_id, limit, cursor=None):
        self.calls.append(("group_role_members", role_id, cursor))
        pages = self.members.get(role_id, [])
        index = 0 if cursor is None else int(cursor)
        if index >= len(pages):
            return MemberPage([], None)
        return pages[index]

    def user_details(self, user_id):
        self.calls.append(("user_details", user_id))
        if self.user_details_script:
            scripted = self.user_details_script.popleft()
            if isinstance(scripted, Exception):
                raise scripted
        return UserDetails(id=user_id, name=f"user{user_id}", display_name=f"User {user_id}",
                           created=self.created.get(user_id, "2015-06-01T00:00:00Z"))

    def set_group_member_role(self, user_id, group_id, role_id):
        self.calls.append(("set_group_member_role", user_id, role_id))
        if self.set_role_script:
            scripted = self.set_role_script.popleft()
            if isinstance(scripted, Exception):
                raise scripted
        self.holdings[(group_id, user_id)] = role_id

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)


def make_config(
    *,
    group_id: int = 42,
    scanned_roles=("Member",),
    role_year_pairs=None,
    wildcard_role: str = "Member",
    roblosecurity: str = "_|WARNING:-DO-NOT-SHARE-THIS.|_abc",
) -> Config:
    """Build a validated Config for tests."""
    if role_year_pairs is None:
        role_year_pairs = {"Vintage": [2006, 2007], "Modern": [2020]}
    return Config.from_dict({
        "groupId": group_id,
        "roblosecurity": roblosecurity,
        "scannedRoles": list(scanned_roles),
        "roleYearPairs": role_year_pairs,
        "wildcardRole": wildcard_role,
    })


GROUP_ROLES = [
    GroupRole(id=1, name="Guest", rank=0),
    GroupRole(id=10, name="Member", rank=1),
    GroupRole(id=20, name="Vintage", rank=50),
    GroupRole(id=30, name="Modern", rank=60),
    GroupRole(id=255, name="Owner", rank=255),
]


@pytest.fixture
def sleeps():
    """A list that records every requested sleep instead of sleeping."""
    return []


@pytest.fixture
def fake_api():
    return FakeGroupAPI(roles=GROUP_ROLES)
