"""
rankbot/reporters/terminal_reporter.py
Rich-powered terminal output: per-assignment progress lines, the end-of-run
summary table and fatal error panels.
"""

from collections import Counter
from dataclasses import dataclass, field

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from rankbot.utils.retry import RetryStats


@dataclass
class SyncStats:
    """What one run did, for the summary table."""
    assigned_by_role: Counter = field(default_factory=Counter)
    wildcard_assignments: int = 0
    members_seen: int = 0
    retry: RetryStats = field(default_factory=RetryStats)

    @property
    def total_assigned(self) -> int:
        return sum(self.assigned_by_role.values())


class TerminalReporter:
    def __init__(self, console: Console):
        self.console = console

    def scanning(self, role: str, role_id: int):
        self.console.print(
            f"\n[bold cyan]▶ Scanning role[/bold cyan] [bold]{escape(role)}[/bold] "
            f"[dim](id {role_id})[/dim]"
        )

    def assigned(self, role: str, user_id: int, year: int):
        # Plain, greppable line; no markup so it reads the same when redirected.
        self.console.print(
            f"Assigned role {role} to user {user_id} (account age: {year})",
            markup=False, highlight=False, soft_wrap=True,
        )

    def render_summary(self, stats: SyncStats, wildcard_role: str):
        table = Table(
            title="Rank sync summary",
            box=box.SIMPLE_HEAVY,
            show_footer=True,
        )
        table.add_column("Role", footer="Total")
        table.add_column("Assigned", justify="right", footer=str(stats.total_assigned))

        for role, count in stats.assigned_by_role.most_common():
            label = escape(role)
            if role == wildcard_role:
                label += " [dim](wildcard)[/dim]"
            table.add_row(label, str(count))

        self.console.print()
        self.console.print(table)

        r = stats.retry
        self.console.print(
            f"[dim]  Members processed: {stats.members_seen}  |  "
            f"Wildcard fallbacks: {stats.wildcard_assignments}[/dim]"
        )
        self.console.print(
            f"[dim]  Retries: {r.retries}  |  "
            f"Cooldown waits: {r.cooldown_waits} ({r.total_wait_seconds:.0f}s)[/dim]"
        )
        self.console.print("\n[bold green]✓[/bold green] Rank sync complete")

    def render_error(self, title: str, error: BaseException):
        self.console.print(Panel(
            f"[red]{escape(str(error))}[/red]",
            title=f"[bold red]✗ {title}[/bold red]",
            border_style="red",
            expand=False,
        ))
