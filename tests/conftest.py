"""Shared fixtures for gh-org-transfer tests."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from config import Config, GitHubConfig, TransferConfig
from github_client import GitHubClient
from report import Reporter

FIXED_NOW = datetime(2026, 3, 1, 12, 30, 45, tzinfo=timezone.utc)


def make_config(tmp_path, **transfer_overrides) -> Config:
    transfer = dict(
        target_org='T',
        source_orgs=['A'],
        dry_run=True,
        stop_on_failure=True,
        delay_s=0.0,
        repos_file=None,
        report_dir=str(tmp_path / 'reports'),
    )
    transfer.update(transfer_overrides)
    return Config(
        github=GitHubConfig(api_url='https://api.github.com', token='gh-token'),
        transfer=TransferConfig(**transfer),
    )


@pytest.fixture
def client() -> MagicMock:
    """A GitHubClient double that authenticates as an admin of the target org."""
    mock = MagicMock(spec=GitHubClient)
    mock.get_authenticated_login.return_value = 'octocat'
    mock.get_membership.return_value = (200, {'state': 'active', 'role': 'admin'})
    mock.transfer_repo.return_value = 202
    return mock


@pytest.fixture
def reporter(tmp_path) -> Reporter:
    return Reporter(str(tmp_path / 'reports'), clock=lambda: FIXED_NOW)
