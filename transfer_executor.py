#!/usr/bin/env python3
"""Execution (or simulation) of a single repository ownership transfer."""

from __future__ import annotations

from config import TransferConfig
from exceptions import TransferRequestError
from github_client import GitHubClient
from logging_utils import Logger
from models import RepositoryRef, TransferOutcome, TransferStatus
from utils import utc_timestamp


class TransferExecutor:
    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def transfer(self, repo: RepositoryRef, config: TransferConfig) -> TransferOutcome:
        """Transfer repo to config.target_org and classify the result.

        In dry-run mode no request is ever sent; the outcome is a simulated
        success. Request failures are returned as FAILED outcomes, not raised.
        """
        target = f"{config.target_org}/{repo.name}"
        prefix = "[DRY RUN] " if config.dry_run else ""

        if repo.source_org.lower() == config.target_org.lower():
            Logger.warn(f"{prefix}skipping {repo.full_name}: already in {config.target_org}")
            return skipped_outcome(
                repo.full_name, target, config, "already owned by target organization"
            )

        Logger.info(f"{prefix}transferring: {repo.full_name} -> {target}")

        if config.dry_run:
            Logger.success(f"[DRY RUN] would transfer {repo.full_name}")
            return TransferOutcome(
                status=TransferStatus.SUCCESSFUL,
                repo=repo.full_name,
                target=target,
                timestamp=utc_timestamp(),
                dry_run=True,
                detail="simulated",
            )

        try:
            status_code = self.client.transfer_repo(
                repo.source_org, repo.name, config.target_org
            )
        except TransferRequestError as e:
            Logger.error(f"failed to transfer {repo.full_name}: {e}")
            return TransferOutcome(
                status=TransferStatus.FAILED,
                repo=repo.full_name,
                target=target,
                timestamp=utc_timestamp(),
                dry_run=False,
                detail="transfer request rejected",
                error=str(e),
                status_code=e.status_code,
            )

        Logger.success(f"successfully transferred: {repo.full_name}")
        return TransferOutcome(
            status=TransferStatus.SUCCESSFUL,
            repo=repo.full_name,
            target=target,
            timestamp=utc_timestamp(),
            dry_run=False,
            detail="transfer accepted",
            status_code=status_code,
        )


def skipped_outcome(
    repo: str, target: str, config: TransferConfig, reason: str
) -> TransferOutcome:
    return TransferOutcome(
        status=TransferStatus.SKIPPED,
        repo=repo,
        target=target,
        timestamp=utc_timestamp(),
        dry_run=config.dry_run,
        detail=reason,
    )
