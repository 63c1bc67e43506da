"""
rankbot/sync/classifier.py
Looks up the year a member's account was created.
"""

from rankbot.clients.base import GroupAPI
from rankbot.errors import GroupApiError, MalformedResponse, RateLimited
from rankbot.utils.retry import RetryOutcome, RetryPolicy

ACCOUNT_AGE_ENDPOINT = "Account age"


def classify_user_details_error(error: Exception) -> RetryOutcome:
    """Every platform failure is retried; rate limiting waits out the cooldown first."""
    if isinstance(error, RateLimited):
        return RetryOutcome.COOLDOWN
    # InvalidCredential included: any failed lookup here is retried, whatever its kind.
    if isinstance(error, (GroupApiError, MalformedResponse)):
        return RetryOutcome.RETRY
    return RetryOutcome.FATAL


def parse_creation_year(created: str) -> int:
    """Year from a timestamp such as "2006-02-27T21:06:40.3Z"."""
    head = created[:4]
    if len(head) != 4 or not head.isdigit():
        raise MalformedResponse(f"Unexpected account creation timestamp: {created!r}")
    return int(head)


class AgeClassifier:
    def __init__(self, api: GroupAPI, policy: RetryPolicy):
        self.api = api
        self.policy = policy

    def year_created(self, user_id: int) -> int:
        details = self.policy.run(
            lambda: self.api.user_details(user_id),
            classify_user_details_error,
        )
        return parse_creation_year(details.created)
