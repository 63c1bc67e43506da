"""
rankbot/sync/assigner.py
Idempotent "give this member that role" call.
"""

from rankbot.clients.base import GroupAPI
from rankbot.errors import (
    GroupApiError,
    InvalidCredential,
    MalformedResponse,
    RateLimited,
    RoleAlreadyHeld,
)
from rankbot.utils.retry import RetryOutcome, RetryPolicy

SET_GROUP_MEMBER_ROLE_ENDPOINT = "Set group member role"


def classify_set_role_error(error: Exception) -> RetryOutcome:
    if isinstance(error, InvalidCredential):
        return RetryOutcome.FATAL
    if isinstance(error, RoleAlreadyHeld):
        return RetryOutcome.RESOLVED
    if isinstance(error, RateLimited):
        return RetryOutcome.COOLDOWN
    if isinstance(error, (GroupApiError, MalformedResponse)):
        return RetryOutcome.RETRY
    return RetryOutcome.FATAL


class RoleAssigner:
    """
    Ensures a member holds a role. A member who already has it counts as
    success, so running the bot twice over the same group is harmless.
    """

    def __init__(self, api: GroupAPI, policy: RetryPolicy):
        self.api = api
        self.policy = policy

    def assign(self, group_id: int, user_id: int, role_id: int) -> None:
        self.policy.run(
            lambda: self.api.set_group_member_role(user_id, group_id, role_id),
            classify_set_role_error,
        )
