#!/usr/bin/env python3
"""Sequential scheduling of transfers with a fixed throttle and fail-fast."""

from __future__ import annotations

from typing import Iterable

from models import (MigrationContext, RepositoryRef, StepResult,
                    TransferStatus)
from transfer_executor import TransferExecutor
from utils import Throttle


class Scheduler:
    """Runs one transfer per step and tells the driver whether to go on."""

    def __init__(self, executor: TransferExecutor, throttle: Throttle) -> None:
        self.executor = executor
        self.throttle = throttle

    def step(self, repo: RepositoryRef, ctx: MigrationContext) -> StepResult:
        cfg = ctx.config.transfer
        outcome = self.executor.transfer(repo, cfg)
        ctx.report.record(outcome)

        if (
            cfg.stop_on_failure
            and not cfg.dry_run
            and outcome.status is TransferStatus.FAILED
        ):
            return StepResult.ABORT

        self.throttle.wait()
        return StepResult.CONTINUE

    def run(self, repos: Iterable[RepositoryRef], ctx: MigrationContext) -> StepResult:
        """Step through repos in order, stopping at the first ABORT."""
        for repo in repos:
            if self.step(repo, ctx) is StepResult.ABORT:
                return StepResult.ABORT
        return StepResult.CONTINUE
