#!/usr/bin/env python3
"""Main orchestrator for moving repositories into the target organization."""

from __future__ import annotations

from typing import Iterator, List, Optional, Set

from config import Config
from exceptions import (AuthenticationError, ConfigurationError,
                        TargetOrgNotFoundError)
from github_client import GitHubClient
from logging_utils import Logger
from models import (ListingResult, MigrationContext, MigrationReport,
                    RepositoryRef, StepResult)
from report import Reporter
from repository_lister import RepositoryLister
from scheduler import Scheduler
from setup_validator import SetupValidator
from transfer_executor import TransferExecutor, skipped_outcome
from utils import Throttle

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_MISSING_ARGUMENTS = 2
EXIT_GITHUB_ERROR = 31
EXIT_TRANSFER_ABORTED = 32
EXIT_AUTH_ERROR = 40
EXIT_INTERRUPTED = 130


class MigrationOrchestrator:
    def __init__(
        self,
        cfg: Config,
        client: Optional[GitHubClient] = None,
        throttle: Optional[Throttle] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.cfg = cfg
        self.client = client or GitHubClient(cfg.github)
        self.validator = SetupValidator(self.client)
        self.lister = RepositoryLister(self.client)
        self.scheduler = Scheduler(
            TransferExecutor(self.client),
            throttle or Throttle(cfg.transfer.delay_s),
        )
        self.reporter = reporter or Reporter(cfg.transfer.report_dir)
        self.context = MigrationContext(
            config=cfg, report=MigrationReport(dry_run=cfg.transfer.dry_run)
        )

    def run(self) -> int:
        """Validate, transfer everything and write the report. Returns exit code.

        The report is persisted whatever the outcome, including aborts and
        interrupts.
        """
        mode = "DRY RUN" if self.cfg.transfer.dry_run else "LIVE"
        Logger.info(
            f"github repository migration ({mode}) -> {self.cfg.transfer.target_org}"
        )

        exit_code = EXIT_EXECUTION_ERROR
        try:
            exit_code = self._execute(self.context)
        finally:
            exit_code = self._finalize(exit_code)
        return exit_code

    def _finalize(self, exit_code: int) -> int:
        try:
            self.reporter.finalize(self.context.report)
        except OSError as e:
            Logger.error(f"failed to write migration report: {e}")
            if exit_code == EXIT_SUCCESS:
                return EXIT_EXECUTION_ERROR
        return exit_code

    def _execute(self, ctx: MigrationContext) -> int:
        try:
            transfer_cfg = ctx.config.transfer
            if not transfer_cfg.repos_file and not transfer_cfg.source_orgs:
                raise ConfigurationError(
                    "no source organizations specified and no repos file given"
                )

            self.validator.validate(transfer_cfg)

            if self._migrate(ctx) is StepResult.ABORT:
                ctx.report.aborted = True
                Logger.error("stop-on-failure: aborting remaining transfers")
                return EXIT_TRANSFER_ABORTED

            Logger.info("mission accomplished")
            return EXIT_SUCCESS
        except ConfigurationError as e:
            Logger.error(f"configuration error: {e}")
            return EXIT_MISSING_ARGUMENTS
        except AuthenticationError as e:
            Logger.error(f"authentication failed: {e}")
            return EXIT_AUTH_ERROR
        except TargetOrgNotFoundError as e:
            Logger.error(f"target organization check failed: {e}")
            return EXIT_GITHUB_ERROR
        except KeyboardInterrupt:
            ctx.report.aborted = True
            Logger.error("interrupted: remaining transfers abandoned")
            return EXIT_INTERRUPTED
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def _listings(self) -> Iterator[ListingResult]:
        """Yield one listing per source, lazily, in configured order."""
        transfer_cfg = self.cfg.transfer
        if transfer_cfg.repos_file:
            Logger.info(f"migrating from file: {transfer_cfg.repos_file}")
            yield self.lister.load_file(transfer_cfg.repos_file)
            return

        Logger.info(
            f"migrating from organizations: {', '.join(transfer_cfg.source_orgs)}"
        )
        listed: Set[str] = set()
        for org in transfer_cfg.source_orgs:
            if org.lower() in listed:
                Logger.warn(f"organization listed more than once, ignoring: {org}")
                continue
            listed.add(org.lower())
            Logger.info(f"processing organization: {org}")
            yield self.lister.list(org)

    def _migrate(self, ctx: MigrationContext) -> StepResult:
        transfer_cfg = ctx.config.transfer
        # one outcome per repository across all sources
        used: Set[str] = set()
        for listing in self._listings():
            if not listing.ok:
                # A source that cannot be listed is skipped; the others still run.
                Logger.error(
                    f"error listing repositories for {listing.source}: {listing.error}"
                )
                continue

            for name in listing.unresolved:
                if name.lower() in used:
                    continue
                used.add(name.lower())
                ctx.report.record(
                    skipped_outcome(
                        name,
                        f"{transfer_cfg.target_org}/{name}",
                        transfer_cfg,
                        "could not determine source organization",
                    )
                )

            repos = self._unique(listing.repos, used)
            if self.scheduler.run(repos, ctx) is StepResult.ABORT:
                return StepResult.ABORT
        return StepResult.CONTINUE

    @staticmethod
    def _unique(repos: List[RepositoryRef], used: Set[str]) -> List[RepositoryRef]:
        unique: List[RepositoryRef] = []
        for repo in repos:
            key = repo.full_name.lower()
            if key in used:
                Logger.warn(f"duplicate repository ignored: {repo.full_name}")
                continue
            used.add(key)
            unique.append(repo)
        return unique
