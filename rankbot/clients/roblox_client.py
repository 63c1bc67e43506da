"""
rankbot/clients/roblox_client.py
Roblox web API client (groups + users endpoints) over a requests.Session.

Authentication is the .ROBLOSECURITY cookie. Mutating requests also need an
x-csrf-token header; Roblox hands one out on the first 403, after which the
request is sent again. Every failure is classified here into the
rankbot.errors.GroupApiError family.
"""

from typing import Optional

import requests
from rich.console import Console

from rankbot.clients.base import GroupRole, MemberPage, UserDetails
from rankbot.config import Secret
from rankbot.errors import (
    GroupApiError,
    InvalidCredential,
    MalformedResponse,
    RateLimited,
    RoleAlreadyHeld,
    UnknownErrorCode,
)

console = Console()

GROUPS_API = "https://groups.roblox.com/v1"
USERS_API = "https://users.roblox.com/v1"

# Page sizes the member listing endpoint accepts.
VALID_PAGE_LIMITS = (10, 25, 50, 100)

# Returned by the set-role endpoint when the member already holds the role.
USER_ALREADY_HAS_ROLE_ERROR_CODE = 26

CSRF_HEADER = "x-csrf-token"


class RobloxClient:
    """Roblox groups/users API, implementing rankbot.clients.base.GroupAPI."""

    def __init__(self, roblosecurity: Secret, timeout: float = 10.0,
                 session: Optional[requests.Session] = None, verbose: bool = False):
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "classics-ranking-bot/1.0",
            "Accept": "application/json",
        })
        self.session.cookies.set(".ROBLOSECURITY", roblosecurity.reveal(), domain=".roblox.com")
        self.timeout = timeout
        self.verbose = verbose
        self.requests_made = 0
        self._csrf_token: Optional[str] = None

    # ── Endpoints ─────────────────────────────────────────────────────────────

    def group_roles(self, group_id: int) -> list[GroupRole]:
        data = self._request("GET", f"{GROUPS_API}/groups/{group_id}/roles")
        try:
            return [
                GroupRole(id=int(r["id"]), name=r["name"], rank=int(r.get("rank", 0)))
                for r in data["roles"]
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Unexpected group roles payload: {e!r}") from e

    def group_role_members(self, group_id: int, role_id: int, limit: int,
                           cursor: Optional[str] = None) -> MemberPage:
        if limit not in VALID_PAGE_LIMITS:
            raise ValueError(f"limit must be one of {VALID_PAGE_LIMITS}, got {limit}")

        params = {"limit": limit, "sortOrder": "Desc"}
        if cursor:
            params["cursor"] = cursor

        data = self._request(
            "GET", f"{GROUPS_API}/groups/{group_id}/roles/{role_id}/users", params=params
        )
        try:
            user_ids = [int(m["userId"]) for m in data["data"]]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Unexpected role members payload: {e!r}") from e
        return MemberPage(user_ids=user_ids, next_cursor=data.get("nextPageCursor") or None)

    def user_details(self, user_id: int) -> UserDetails:
        data = self._request("GET", f"{USERS_API}/users/{user_id}")
        try:
            created = data["created"]
            if not isinstance(created, str):
                raise TypeError(f"created is {type(created).__name__}, expected str")
            return UserDetails(
                id=int(data["id"]),
                name=data.get("name", ""),
                display_name=data.get("displayName", ""),
                created=created,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Unexpected user details payload: {e!r}") from e

    def set_group_member_role(self, user_id: int, group_id: int, role_id: int) -> None:
        self._request(
            "PATCH", f"{GROUPS_API}/groups/{group_id}/users/{user_id}",
            json={"roleId": role_id}, read_body=False,
        )

    # ── Internal ───────────────────────────────────────────────────────────────

    def _request(self, method: str, url: str, read_body: bool = True, **kwargs) -> dict:
        resp = self._send(method, url, **kwargs)

        # First mutating call (or an expired token): pick up the token and resend once.
        if resp.status_code == 403 and CSRF_HEADER in resp.headers:
            self._csrf_token = resp.headers[CSRF_HEADER]
            if self.verbose:
                console.print("[dim]  Refreshed CSRF token[/dim]")
            resp = self._send(method, url, **kwargs)

        if resp.ok:
            if not read_body or not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError as e:
                raise MalformedResponse(f"Non-JSON response from {url}") from e

        raise self._classify(resp)

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        headers = {}
        if self._csrf_token:
            headers[CSRF_HEADER] = self._csrf_token
        self.requests_made += 1
        try:
            return self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise GroupApiError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _classify(resp: requests.Response) -> GroupApiError:
        status = resp.status_code
        if status == 429:
            return RateLimited(status=status)
        if status == 401:
            return InvalidCredential(status=status)

        code, message = _first_error(resp)
        if code == USER_ALREADY_HAS_ROLE_ERROR_CODE:
            return RoleAlreadyHeld(code, message, status=status)
        if code is not None:
            return UnknownErrorCode(code, message, status=status)
        return GroupApiError(f"HTTP {status} from {resp.url}", status=status)


def _first_error(resp: requests.Response) -> tuple[Optional[int], str]:
    """Pull (code, message) out of a Roblox {"errors": [...]} body, if there is one."""
    try:
        errors = resp.json().get("errors") or []
        first = errors[0]
        return int(first["code"]), str(first.get("message", ""))
    except (ValueError, AttributeError, IndexError, KeyError, TypeError):
        return None, ""
