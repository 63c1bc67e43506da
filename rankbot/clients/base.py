"""
rankbot/clients/base.py
The group-platform capability the sync engine consumes, and the records it returns.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol


@dataclass(frozen=True)
class GroupRole:
    id: int
    name: str
    rank: int = 0            # 0-255 ordering within the group, informational only


@dataclass(frozen=True)
class MemberPage:
    user_ids: list[int] = field(default_factory=list)
    next_cursor: Optional[str] = None    # None = no further page


@dataclass(frozen=True)
class UserDetails:
    id: int
    name: str
    display_name: str
    created: str             # ISO-8601, e.g. "2006-02-27T21:06:40.3Z"


class GroupAPI(Protocol):
    """
    Everything the sync engine needs from the platform.

    Implementations raise rankbot.errors.GroupApiError subclasses, already
    classified (RateLimited, InvalidCredential, RoleAlreadyHeld,
    UnknownErrorCode), so callers never look at raw HTTP responses.
    """

    def group_roles(self, group_id: int) -> list[GroupRole]: ...

    def group_role_members(self, group_id: int, role_id: int, limit: int,
                           cursor: Optional[str] = None) -> MemberPage: ...

    def user_details(self, user_id: int) -> UserDetails: ...

    def set_group_member_role(self, user_id: int, group_id: int, role_id: int) -> None: ...
