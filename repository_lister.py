#!/usr/bin/env python3
"""Discovery of repositories to transfer, from an organization or a file."""

from __future__ import annotations

import json
from typing import Any

import github
import requests

from exceptions import TransferToolError
from github_client import GitHubClient
from logging_utils import Logger
from models import ListingResult, RepositoryRef
from security import SecurityValidator
from utils import extract_owner


class RepositoryLister:
    """Lists repositories without raising: failures come back in the result."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def list(self, org: str) -> ListingResult:
        Logger.info(f"listing repositories from organization: {org}")
        try:
            names = self.client.list_org_repos(org)
        except (github.GithubException, requests.RequestException,
                TransferToolError) as e:
            return ListingResult(source=org, error=str(e))

        repos = [RepositoryRef(name=name, source_org=org) for name in names]
        Logger.success(f"found {len(repos)} repositories in {org}")
        return ListingResult(source=org, repos=repos)

    def load_file(self, path: str) -> ListingResult:
        """Read [{name, url, sshUrl}, ...] records and resolve each owner."""
        try:
            with open(path, "r", encoding="utf-8") as fh:
                entries = json.load(fh)
        except (OSError, ValueError) as e:
            return ListingResult(source=path, error=f"cannot read {path}: {e}")

        if not isinstance(entries, list):
            return ListingResult(
                source=path, error=f"{path} must contain a JSON array of repositories"
            )

        Logger.info(f"loaded {len(entries)} repositories from {path}")
        result = ListingResult(source=path)
        for entry in entries:
            self._add_entry(result, entry)
        return result

    @staticmethod
    def _add_entry(result: ListingResult, entry: Any) -> None:
        if not isinstance(entry, dict):
            Logger.warn(f"ignoring malformed entry: {entry!r}")
            result.unresolved.append(str(entry))
            return

        name = str(entry.get("name") or "")
        owner = extract_owner(entry.get("url")) or extract_owner(entry.get("sshUrl"))
        if not owner:
            Logger.warn(f"could not determine organization for {name or entry!r}")
            result.unresolved.append(name or str(entry))
            return

        try:
            name = SecurityValidator.validate_repo_name(name)
            owner = SecurityValidator.validate_org_name(owner)
        except ValueError as e:
            Logger.warn(f"ignoring entry {name!r}: {e}")
            result.unresolved.append(name or str(entry))
            return

        result.repos.append(RepositoryRef(name=name, source_org=owner))
