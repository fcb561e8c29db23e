#!/usr/bin/env python3
"""Persisting and printing the migration report."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Callable, Optional

from logging_utils import Logger
from models import MigrationReport

REPORT_PREFIX = "migration-log"


class Reporter:
    """Writes the report once as timestamped JSON and prints a summary."""

    def __init__(
        self,
        report_dir: str,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.report_dir = report_dir
        self._clock = clock

    def report_path(self, now: datetime) -> str:
        name = f"{REPORT_PREFIX}-{now.strftime('%Y%m%d-%H%M%S-%f')}.json"
        return os.path.join(self.report_dir, name)

    def finalize(self, report: MigrationReport) -> str:
        """Persist report and print the summary. Returns the report path.

        A second call on the same report returns the existing path without
        writing again.
        """
        if report.finalized_path is not None:
            return report.finalized_path

        now = self._clock()
        path = self.report_path(now)
        os.makedirs(self.report_dir, exist_ok=True)
        # "x": never overwrite the log of another run
        with open(path, "x", encoding="utf-8") as fh:
            json.dump(report.to_dict(now.isoformat()), fh, indent=2)
        report.finalized_path = path

        self._print_summary(report, path)
        return path

    @staticmethod
    def _print_summary(report: MigrationReport, path: str) -> None:
        Logger.info("MIGRATION SUMMARY")
        Logger.info(f"total repositories: {report.total}")
        Logger.success(f"successful: {len(report.successful)}")
        if report.failed:
            Logger.error(f"failed: {len(report.failed)}")
        else:
            Logger.info(f"failed: {len(report.failed)}")
        Logger.info(f"skipped: {len(report.skipped)}")
        Logger.info(f"success rate: {format_rate(report.success_rate)}")
        if report.aborted:
            Logger.warn("run aborted after a failed transfer (stop-on-failure)")
        Logger.info(f"detailed log saved to: {path}")

        if report.dry_run:
            Logger.warn(
                "this was a DRY RUN - no actual transfers were performed; "
                "re-run with --execute to transfer"
            )


def format_rate(rate: Optional[float]) -> str:
    if rate is None:
        return "n/a"
    return f"{rate:.1f}%"
