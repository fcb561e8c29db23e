#!/usr/bin/env python3
"""Utility functions for gh-org-transfer."""

import re
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from logging_utils import Logger

# https://github.com/<owner>/<repo>, ssh://git@github.com/<owner>/<repo>
_HTTP_OWNER_PATTERN = re.compile(r"^(?:https?|ssh)://(?:[^@/]+@)?[^/]+/([^/]+)/[^/]+")
# git@github.com:<owner>/<repo>.git
_SCP_OWNER_PATTERN = re.compile(r"^[^@/\s]+@[^:/\s]+:([^/]+)/[^/]+")


class Throttle:
    """Fixed delay between consecutive remote operations."""

    def __init__(
        self, delay_s: float, sleep: Callable[[float], None] = time.sleep
    ) -> None:
        self.delay_s = delay_s
        self._sleep = sleep

    def wait(self, operation_type: str = "transfer") -> None:
        if self.delay_s <= 0:
            return
        Logger.debug(f"waiting {self.delay_s:.1f}s before next {operation_type}")
        self._sleep(self.delay_s)


def extract_owner(url: Optional[str]) -> Optional[str]:
    """Return the owner segment of a repository URL, or None if absent.

    Example: 'https://github.com/acme/widgets' -> 'acme'
             'git@github.com:acme/widgets.git' -> 'acme'
    """
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    for pattern in (_HTTP_OWNER_PATTERN, _SCP_OWNER_PATTERN):
        match = pattern.match(url)
        if match:
            return match.group(1)
    return None


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
