#!/usr/bin/env python3
"""Configuration dataclasses for gh-org-transfer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_DELAY_S = 1.0


@dataclass
class GitHubConfig:
    """GitHub API connection configuration."""
    api_url: str
    token: str


@dataclass
class TransferConfig:
    """Transfer run configuration."""
    target_org: str
    source_orgs: List[str] = field(default_factory=list)
    dry_run: bool = True
    stop_on_failure: bool = True
    delay_s: float = DEFAULT_DELAY_S
    repos_file: Optional[str] = None
    report_dir: str = "."

    def __post_init__(self) -> None:
        if not self.target_org or not self.target_org.strip():
            raise ConfigurationError("target organization is required (TARGET_ORG)")
        self.source_orgs = list(self.source_orgs)


@dataclass
class Config:
    """Main configuration for a gh-org-transfer run."""
    github: GitHubConfig
    transfer: TransferConfig
