#!/usr/bin/env python3
"""Export of source organization members to a flat JSON file."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List

import github
import requests

from exceptions import TransferToolError
from github_client import GitHubClient
from logging_utils import Logger


def export_members(
    client: GitHubClient, orgs: Iterable[str], output_path: str
) -> List[Dict[str, Any]]:
    """Collect members of every org and write them to output_path.

    An org that cannot be listed is reported and left out of the file.
    """
    users: List[Dict[str, Any]] = []
    for org in orgs:
        try:
            members = client.list_org_members(org)
        except (github.GithubException, requests.RequestException,
                TransferToolError) as e:
            Logger.warn(f"could not list members of {org}: {e}")
            continue

        Logger.info(f"found {len(members)} members in {org}")
        for member in members:
            users.append({**member, "organization": org})

    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(users, fh, indent=2)
    Logger.success(f"exported {len(users)} users to {output_path}")
    return users
