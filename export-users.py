#!/usr/bin/env python3
"""
export-users - Write the members of the source organizations to users.json.

Useful for inviting people to the target organization before or after a
gh-org-transfer run.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_export_arguments
from github_client import GitHubClient
from logging_utils import Logger
from user_export import export_members

EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1


def main() -> NoReturn:
    github_cfg, orgs, output = parse_export_arguments()
    client = GitHubClient(github_cfg)
    try:
        export_members(client, orgs, output)
    except OSError as e:
        Logger.error(f"failed to write {output}: {e}")
        sys.exit(EXIT_EXECUTION_ERROR)
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
