#!/usr/bin/env python3
"""Input validation and log sanitization for gh-org-transfer."""

import os
import re
from typing import List, Optional, Set


class SecurityValidator:
    """Validation helpers for names, URLs and paths coming from env/CLI/files."""

    # GitHub limits
    MAX_ORG_NAME_LENGTH = 39
    MAX_REPO_NAME_LENGTH = 100
    MAX_URL_LENGTH = 2048
    MAX_PATH_LENGTH = 500

    SAFE_ORG_NAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
    SAFE_REPO_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    @staticmethod
    def _reject_control_chars(value: str, label: str) -> None:
        if "\x00" in value or any(ord(c) < 32 for c in value):
            raise ValueError(f"{label} contains null bytes or control characters")

    @classmethod
    def validate_org_name(cls, name: str) -> str:
        """Validate a GitHub organization login."""
        if not name or not isinstance(name, str):
            raise ValueError("Organization name must be a non-empty string")

        name = name.strip()
        if len(name) > cls.MAX_ORG_NAME_LENGTH:
            raise ValueError(
                f"Organization name '{name}' exceeds maximum length of "
                f"{cls.MAX_ORG_NAME_LENGTH}"
            )
        cls._reject_control_chars(name, "Organization name")
        if not cls.SAFE_ORG_NAME_PATTERN.match(name):
            raise ValueError(f"Organization name '{name}' contains invalid characters")
        return name

    @classmethod
    def validate_org_list(cls, raw: Optional[str]) -> List[str]:
        """Split a comma-separated organization list.

        Empty entries are dropped and repeated names (case-insensitive) are
        kept only once, in first-seen order.
        """
        if not raw:
            return []
        orgs: List[str] = []
        used: Set[str] = set()
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            org = cls.validate_org_name(part)
            if org.lower() in used:
                continue
            used.add(org.lower())
            orgs.append(org)
        return orgs

    @classmethod
    def validate_repo_name(cls, name: str) -> str:
        """Validate a repository name as read from an import file."""
        if not name or not isinstance(name, str):
            raise ValueError("Repository name must be a non-empty string")

        if len(name) > cls.MAX_REPO_NAME_LENGTH:
            raise ValueError(
                f"Repository name exceeds maximum length of {cls.MAX_REPO_NAME_LENGTH}"
            )

        # Path traversal; "foo..bar" is a valid repository name
        if name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError("Repository name contains invalid path characters")

        cls._reject_control_chars(name, "Repository name")
        if not cls.SAFE_REPO_NAME_PATTERN.match(name):
            raise ValueError(f"Repository name '{name}' contains invalid characters")
        return name

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate an API base URL."""
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        cls._reject_control_chars(url, "URL")

        if "://" not in url:
            raise ValueError("URL must include a scheme")

        scheme = url.split("://")[0].lower()
        if allowed_schemes and scheme not in allowed_schemes:
            raise ValueError(
                f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
            )
        return url.rstrip("/")

    @classmethod
    def validate_file_path(cls, path: str) -> str:
        """Validate a report directory or input file path."""
        if not path or not isinstance(path, str):
            raise ValueError("File path must be a non-empty string")

        if len(path) > cls.MAX_PATH_LENGTH:
            raise ValueError(
                f"File path exceeds maximum length of {cls.MAX_PATH_LENGTH}"
            )

        if "\x00" in path:
            raise ValueError("File path contains null bytes")

        return os.path.normpath(path)

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Redact credentials from a message before it is written out."""
        if not message:
            return message

        patterns = [
            (r"https://[^:/@]+:[^@]+@", "https://[REDACTED]@"),  # URLs with credentials
            (r"token[=:\s]+[^\s]+", "token=[REDACTED]"),
            (r"bearer\s+[^\s]+", "Bearer [REDACTED]"),
            (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),  # fine-grained PATs
            (r"ghp_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"gho_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"ghu_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"ghs_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"ghr_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        ]

        sanitized = message
        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
