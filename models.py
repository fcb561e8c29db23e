#!/usr/bin/env python3
"""Data model for repository transfer runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from config import Config


class TransferStatus(Enum):
    """Outcome bucket of a single transfer attempt."""
    SUCCESSFUL = "successful"
    FAILED = "failed"
    SKIPPED = "skipped"


class PermissionStatus(Enum):
    """Result of the best-effort role check in the target organization.

    UNKNOWN is treated like GRANTED: the run proceeds with a warning.
    """
    GRANTED = "granted"
    DENIED = "denied"
    UNKNOWN = "unknown"


class StepResult(Enum):
    """What the driver does after a scheduler step."""
    CONTINUE = "continue"
    ABORT = "abort"


@dataclass(frozen=True)
class RepositoryRef:
    """A repository to move, identified by its current owner and name."""
    name: str
    source_org: str

    @property
    def full_name(self) -> str:
        return f"{self.source_org}/{self.name}"


@dataclass(frozen=True)
class TransferOutcome:
    """Recorded result of one transfer attempt."""
    status: TransferStatus
    repo: str
    target: str
    timestamp: str
    dry_run: bool
    detail: str = ""
    error: Optional[str] = None
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "repo": self.repo,
            "target": self.target,
            "timestamp": self.timestamp,
            "dryRun": self.dry_run,
            "detail": self.detail,
        }
        if self.status is TransferStatus.FAILED:
            data["error"] = self.error
            data["status"] = self.status_code
        elif self.status_code is not None:
            data["response"] = self.status_code
        return data


@dataclass
class ListingResult:
    """Repositories discovered for one source, or the reason discovery failed."""
    source: str
    repos: List[RepositoryRef] = field(default_factory=list)
    error: Optional[str] = None
    # file entries whose owner could not be determined
    unresolved: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MigrationReport:
    """Accumulates outcomes for a run. Summary fields are always derived."""
    dry_run: bool
    successful: List[TransferOutcome] = field(default_factory=list)
    failed: List[TransferOutcome] = field(default_factory=list)
    skipped: List[TransferOutcome] = field(default_factory=list)
    aborted: bool = False
    finalized_path: Optional[str] = None

    def record(self, outcome: TransferOutcome) -> None:
        if outcome.status is TransferStatus.SUCCESSFUL:
            self.successful.append(outcome)
        elif outcome.status is TransferStatus.FAILED:
            self.failed.append(outcome)
        else:
            self.skipped.append(outcome)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed) + len(self.skipped)

    @property
    def success_rate(self) -> Optional[float]:
        """Percentage of successful attempts among successes and failures.

        None when nothing was attempted (all skipped or empty run).
        """
        attempted = len(self.successful) + len(self.failed)
        if attempted == 0:
            return None
        return len(self.successful) / attempted * 100

    def summary(self, timestamp: str) -> Dict[str, Any]:
        return {
            "total": self.total,
            "successful": len(self.successful),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
            "successRate": self.success_rate,
            "timestamp": timestamp,
            "dryRun": self.dry_run,
            "aborted": self.aborted,
        }

    def to_dict(self, timestamp: str) -> Dict[str, Any]:
        return {
            "successful": [o.to_dict() for o in self.successful],
            "failed": [o.to_dict() for o in self.failed],
            "skipped": [o.to_dict() for o in self.skipped],
            "summary": self.summary(timestamp),
        }


@dataclass
class MigrationContext:
    """Run-wide state passed explicitly to the scheduler and reporter."""
    config: Config
    report: MigrationReport
