"""
rankbot/sync/orchestrator.py
End-to-end rank sync: resolve roles, then walk every scanned role's members
and give each one the role matching their account creation year.

Strictly sequential. Any error stops the run; nothing is skipped.
"""

from typing import Optional

from rankbot.clients.base import GroupAPI
from rankbot.config import Config
from rankbot.reporters.terminal_reporter import SyncStats, TerminalReporter
from rankbot.sync.assigner import RoleAssigner
from rankbot.sync.classifier import AgeClassifier
from rankbot.sync.pager import PAGE_LIMIT, MemberPager
from rankbot.sync.roles import RoleDirectory, YearRoleIndex


class Orchestrator:
    def __init__(self, config: Config, api: GroupAPI, classifier: AgeClassifier,
                 assigner: RoleAssigner, reporter: TerminalReporter,
                 page_limit: int = PAGE_LIMIT, verbose: bool = False):
        self.config = config
        self.api = api
        self.classifier = classifier
        self.assigner = assigner
        self.reporter = reporter
        self.page_limit = page_limit
        self.verbose = verbose

    def run(self, stats: Optional[SyncStats] = None) -> SyncStats:
        stats = stats if stats is not None else SyncStats()
        cfg = self.config

        # Fails before any member is touched if a role name is wrong.
        directory = RoleDirectory.resolve(self.api, cfg.group_id, cfg.referenced_roles())
        year_roles = YearRoleIndex.from_pairs(cfg.role_year_pairs)

        for role_to_scan in cfg.scanned_roles:
            role_to_scan_id = directory.id_of(role_to_scan)
            self.reporter.scanning(role_to_scan, role_to_scan_id)

            pager = MemberPager(self.api, cfg.group_id, role_to_scan_id,
                                limit=self.page_limit, verbose=self.verbose)
            for member_id in pager:
                stats.members_seen += 1
                year = self.classifier.year_created(member_id)

                role = year_roles.role_for(year)
                if role is None:
                    role = cfg.wildcard_role
                    stats.wildcard_assignments += 1

                self.assigner.assign(cfg.group_id, member_id, directory.id_of(role))
                stats.assigned_by_role[role] += 1
                self.reporter.assigned(role, member_id, year)

        return stats
