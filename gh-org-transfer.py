#!/usr/bin/env python3
"""
gh-org-transfer - Move every repository of one or more GitHub organizations
into a single target organization.

Repositories are listed per source organization (or read from a JSON file)
and transferred one at a time through the GitHub transfer API. Runs are
dry by default; pass --execute to perform the transfers. A JSON report of
every outcome is written at the end of each run.

Webhooks, branch protection and team access are not migrated.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from migration_orchestrator import MigrationOrchestrator


def main() -> NoReturn:
    cfg = parse_arguments()
    orchestrator = MigrationOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
