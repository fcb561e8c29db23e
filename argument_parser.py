#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from config import (DEFAULT_API_URL, DEFAULT_DELAY_S, Config, GitHubConfig,
                    TransferConfig)
from exceptions import ConfigurationError
from logging_utils import Logger
from security import SecurityValidator

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_MISSING_ARGUMENTS = 2

MAX_DELAY_S = 60.0
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Transfer all repositories of one or more GitHub organizations "
            "to a target organization (dry-run unless --execute is given)"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment (read from .env if present):
  GITHUB_TOKEN     token with admin rights on source and target orgs
  TARGET_ORG       destination organization (required)
  SOURCE_ORGS      comma-separated source organizations
  GITHUB_API_URL   API base URL for GitHub Enterprise
  STOP_ON_FAILURE  stop at the first failed live transfer (default: true)

Examples:
  %(prog)s
  %(prog)s --execute
  %(prog)s --source-orgs team-a,team-b --execute --continue-on-failure
  %(prog)s --repos-file test-repos.json --execute
        """,
    )
    return parser


def _add_github_arguments(parser: argparse.ArgumentParser) -> None:
    """Add GitHub connection arguments to parser."""
    parser.add_argument(
        "--gh-api",
        dest="gh_api_url",
        help=f"Base URL of the GitHub API (or GITHUB_API_URL, default: {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--gh-token",
        dest="gh_token",
        help="GitHub API token (or set GITHUB_TOKEN env var)",
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path of the .env file to load (default: nearest .env)",
    )


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add repository source arguments to parser."""
    parser.add_argument(
        "--source-orgs",
        dest="source_orgs",
        help="Comma-separated source organizations (overrides SOURCE_ORGS)",
    )
    parser.add_argument(
        "--repos-file",
        dest="repos_file",
        help="JSON file of {name, url, sshUrl} records to transfer instead "
        "of listing the source organizations",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add behavior arguments to parser."""
    parser.add_argument(
        "--execute",
        action="store_true",
        dest="execute",
        help="Perform the transfers (default is a dry run)",
    )
    failure = parser.add_mutually_exclusive_group()
    failure.add_argument(
        "--stop-on-failure",
        action="store_const",
        const=True,
        dest="stop_on_failure",
        help="Abort the run at the first failed transfer (default)",
    )
    failure.add_argument(
        "--continue-on-failure",
        action="store_const",
        const=False,
        dest="stop_on_failure",
        help="Record failed transfers and keep going",
    )
    parser.add_argument(
        "--delay",
        dest="delay_s",
        type=float,
        default=DEFAULT_DELAY_S,
        help=f"Seconds to wait between transfers (default: {DEFAULT_DELAY_S})",
    )
    parser.add_argument(
        "--report-dir",
        dest="report_dir",
        default=".",
        help="Directory for the migration-log JSON report (default: .)",
    )


def _load_environment(env_file: Optional[str]) -> None:
    """Load .env without overriding variables already set."""
    path = env_file or find_dotenv(usecwd=True)
    if env_file and not os.path.isfile(env_file):
        Logger.error(f"env file not found: {env_file}")
        sys.exit(EXIT_MISSING_ARGUMENTS)
    if path:
        load_dotenv(path, override=False)
        Logger.debug(f"loaded environment from {path}")


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {raw!r}")


def _get_and_validate_token(args) -> str:
    token = args.gh_token or os.getenv("GITHUB_TOKEN")
    if not token:
        Logger.error(
            "error: github token not provided (use --gh-token or GITHUB_TOKEN)"
        )
        sys.exit(EXIT_AUTH_ERROR)
    return token


def _build_transfer_config(args) -> TransferConfig:
    """Validate parsed arguments and environment into a TransferConfig."""
    try:
        target_org = os.getenv("TARGET_ORG", "").strip()
        if not target_org:
            raise ConfigurationError(
                "TARGET_ORG environment variable is required; set it in your .env file"
            )
        target_org = SecurityValidator.validate_org_name(target_org)

        raw_sources = (
            args.source_orgs if args.source_orgs is not None else os.getenv("SOURCE_ORGS")
        )
        source_orgs = SecurityValidator.validate_org_list(raw_sources)

        repos_file = None
        if args.repos_file:
            repos_file = SecurityValidator.validate_file_path(args.repos_file)
        if not source_orgs and not repos_file:
            raise ConfigurationError(
                "no source organizations specified (SOURCE_ORGS or --source-orgs) "
                "and no --repos-file given"
            )

        stop_on_failure = args.stop_on_failure
        if stop_on_failure is None:
            stop_on_failure = _parse_bool(os.getenv("STOP_ON_FAILURE"), True)

        if args.delay_s < 0 or args.delay_s > MAX_DELAY_S:
            raise ValueError(f"delay must be between 0 and {MAX_DELAY_S:.0f} seconds")

        report_dir = SecurityValidator.validate_file_path(args.report_dir)

        transfer = TransferConfig(
            target_org=target_org,
            source_orgs=source_orgs,
            dry_run=not args.execute,
            stop_on_failure=stop_on_failure,
            delay_s=float(args.delay_s),
            repos_file=repos_file,
            report_dir=report_dir,
        )
    except (ValueError, ConfigurationError) as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        Logger.error(f"configuration error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)

    Logger.security_event(
        "CONFIG_VALIDATION", "successfully validated all configuration inputs"
    )
    return transfer


def _build_github_config(args, token: str) -> GitHubConfig:
    raw_url = args.gh_api_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL
    try:
        api_url = SecurityValidator.validate_url(raw_url, ["https", "http"])
    except ValueError as e:
        Logger.error(f"configuration error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)
    return GitHubConfig(api_url=api_url, token=token)


def parse_arguments(argv: Optional[List[str]] = None) -> Config:
    """Parse command line arguments and environment into a Config."""
    parser = _create_argument_parser()
    _add_github_arguments(parser)
    _add_source_arguments(parser)
    _add_behavior_arguments(parser)

    args = parser.parse_args(argv)
    _load_environment(args.env_file)

    token = _get_and_validate_token(args)
    transfer = _build_transfer_config(args)
    github_cfg = _build_github_config(args, token)

    if transfer.dry_run:
        Logger.warn("dry run: no repositories will be transferred (use --execute)")

    return Config(github=github_cfg, transfer=transfer)


def parse_export_arguments(argv: Optional[List[str]] = None) -> Tuple[GitHubConfig, List[str], str]:
    """Parse arguments of the member export utility.

    Returns (github config, source organizations, output path).
    """
    parser = argparse.ArgumentParser(
        description="Export members of the source organizations to a JSON file",
    )
    _add_github_arguments(parser)
    parser.add_argument(
        "--source-orgs",
        dest="source_orgs",
        help="Comma-separated organizations (overrides SOURCE_ORGS)",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        default="users.json",
        help="Output file (default: users.json)",
    )

    args = parser.parse_args(argv)
    _load_environment(args.env_file)

    token = _get_and_validate_token(args)
    raw_sources = (
        args.source_orgs if args.source_orgs is not None else os.getenv("SOURCE_ORGS")
    )
    try:
        source_orgs = SecurityValidator.validate_org_list(raw_sources)
        output = SecurityValidator.validate_file_path(args.output)
    except ValueError as e:
        Logger.error(f"configuration error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)
    if not source_orgs:
        Logger.error("no source organizations specified (SOURCE_ORGS or --source-orgs)")
        sys.exit(EXIT_MISSING_ARGUMENTS)

    return _build_github_config(args, token), source_orgs, output
