#!/usr/bin/env python3
"""
Classics Ranking Bot - ranks Roblox group members by account creation year.
Usage: python -m rankbot.main <config_file> [--verbose]
"""

import argparse
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from rankbot.clients.roblox_client import RobloxClient
from rankbot.config import Config, load_config
from rankbot.errors import ConfigError, RankBotError
from rankbot.reporters.terminal_reporter import SyncStats, TerminalReporter
from rankbot.sync.assigner import SET_GROUP_MEMBER_ROLE_ENDPOINT, RoleAssigner
from rankbot.sync.classifier import ACCOUNT_AGE_ENDPOINT, AgeClassifier
from rankbot.sync.orchestrator import Orchestrator
from rankbot.utils.retry import RetryPolicy

console = Console()


def print_banner():
    banner = Text()
    banner.append("  C L A S S I C S   R A N K I N G   B O T\n", style="bold cyan")
    banner.append("  ranks group members by account creation year", style="dim white")
    console.print(Panel(banner, border_style="cyan", padding=(0, 2), expand=False))


def parse_args(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(
        prog="classics-ranking-bot",
        description="Assign Roblox group ranks based on each member's account creation year",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  classics-ranking-bot config.json
  classics-ranking-bot config.json --verbose
        """
    )
    parser.add_argument("config_file",
                        help="Path to the JSON config file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show pages fetched, retries and cooldown waits")
    parser.add_argument("--no-banner", action="store_true",
                        help="Skip the start-up banner")
    return parser.parse_args(argv)


def run_sync(config: Config, api, verbose: bool = False, sleep=None) -> SyncStats:
    """Wire the sync engine together against `api` and run it once."""
    stats = SyncStats()
    policy_kwargs = {"stats": stats.retry, "verbose": verbose}
    if sleep is not None:
        policy_kwargs["sleep"] = sleep

    reporter = TerminalReporter(console)
    orchestrator = Orchestrator(
        config,
        api,
        classifier=AgeClassifier(api, RetryPolicy(ACCOUNT_AGE_ENDPOINT, **policy_kwargs)),
        assigner=RoleAssigner(api, RetryPolicy(SET_GROUP_MEMBER_ROLE_ENDPOINT, **policy_kwargs)),
        reporter=reporter,
        verbose=verbose,
    )
    orchestrator.run(stats)
    reporter.render_summary(stats, config.wildcard_role)
    return stats


def main(argv: Optional[list[str]] = None):
    args = parse_args(argv)
    if not args.no_banner:
        print_banner()

    reporter = TerminalReporter(console)

    try:
        config = load_config(args.config_file)
    except ConfigError as e:
        reporter.render_error("Configuration error", e)
        sys.exit(1)

    console.print(
        f"[bold green]✓[/bold green] Loaded config for group [bold]{config.group_id}[/bold]: "
        f"{len(config.scanned_roles)} role(s) to scan, "
        f"{len(config.role_year_pairs)} year mapping(s), wildcard [cyan]{escape(config.wildcard_role)}[/cyan]"
    )

    client = RobloxClient(config.roblosecurity, verbose=args.verbose)
    try:
        run_sync(config, client, verbose=args.verbose)
    except RankBotError as e:
        reporter.render_error("Rank sync aborted", e)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Interrupted, the next run starts from the first scanned role[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
