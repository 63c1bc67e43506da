"""
rankbot/sync/pager.py
Cursor-driven enumeration of the members holding one role.
"""

from typing import Iterator

from rich.console import Console

from rankbot.clients.base import GroupAPI

console = Console()

PAGE_LIMIT = 100  # platform maximum


class MemberPager:
    """
    Lazily walks a role's member list, one page per API call.

    Stops on an empty page even if the platform still handed back a cursor,
    and stops after a non-empty page that came without one. Every call to
    pages() starts over from the first page.
    """

    def __init__(self, api: GroupAPI, group_id: int, role_id: int,
                 limit: int = PAGE_LIMIT, verbose: bool = False):
        self.api = api
        self.group_id = group_id
        self.role_id = role_id
        self.limit = limit
        self.verbose = verbose

    def pages(self) -> Iterator[list[int]]:
        cursor = None
        page_number = 0
        while True:
            page = self.api.group_role_members(self.group_id, self.role_id, self.limit, cursor)
            if not page.user_ids:
                return

            page_number += 1
            if self.verbose:
                console.print(
                    f"[dim]  Role {self.role_id}: page {page_number} "
                    f"({len(page.user_ids)} members)[/dim]"
                )
            yield page.user_ids

            if page.next_cursor is None:
                return
            cursor = page.next_cursor

    def __iter__(self) -> Iterator[int]:
        for user_ids in self.pages():
            yield from user_ids
