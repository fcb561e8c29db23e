#!/usr/bin/env python3
"""Exception types for gh-org-transfer."""

from __future__ import annotations

from typing import Optional


class TransferToolError(Exception):
    """Base exception for gh-org-transfer errors."""


class ConfigurationError(TransferToolError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(TransferToolError):
    """Raised when the GitHub token cannot authenticate."""


class OrganizationNotFoundError(TransferToolError):
    """Raised when an organization does not exist or is not visible."""


class TargetOrgNotFoundError(OrganizationNotFoundError):
    """Raised when the target organization of a run cannot be resolved."""


class TransferRequestError(TransferToolError):
    """Raised when the GitHub transfer request is rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
