#!/usr/bin/env python3
"""Preflight checks run before any repository is listed or transferred."""

from __future__ import annotations

from dataclasses import dataclass

import requests

from config import TransferConfig
from exceptions import OrganizationNotFoundError, TargetOrgNotFoundError
from github_client import GitHubClient
from logging_utils import Logger
from models import PermissionStatus


@dataclass
class ValidationResult:
    login: str
    permission: PermissionStatus


class SetupValidator:
    """Authenticate, resolve the target org and check the token's role in it.

    AuthenticationError and TargetOrgNotFoundError propagate to the caller.
    The role check never fails the run.
    """

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def validate(self, config: TransferConfig) -> ValidationResult:
        Logger.info("validating setup")

        login = self.client.get_authenticated_login()
        Logger.success(f"authenticated as: {login}")

        try:
            self.client.get_organization(config.target_org)
        except OrganizationNotFoundError as e:
            raise TargetOrgNotFoundError(str(e)) from e
        Logger.success(f"target organization exists: {config.target_org}")

        permission = self.check_permission(config.target_org)
        if permission is PermissionStatus.GRANTED:
            Logger.success("sufficient permissions for target organization")
        elif permission is PermissionStatus.DENIED:
            Logger.warn(
                "insufficient permissions for target organization; "
                "transfers will likely fail"
            )
        else:
            Logger.warn(
                "could not verify permissions for target organization; "
                "continuing anyway"
            )
        return ValidationResult(login=login, permission=permission)

    def check_permission(self, org_name: str) -> PermissionStatus:
        try:
            status_code, data = self.client.get_membership(org_name)
        except requests.RequestException as e:
            Logger.warn(f"could not check org membership (request error): {e}")
            return PermissionStatus.UNKNOWN

        if status_code == 200:
            return self._handle_membership_success(data)
        self._handle_membership_error(status_code)
        return PermissionStatus.UNKNOWN

    @staticmethod
    def _handle_membership_success(data: dict) -> PermissionStatus:
        state = data.get("state")  # active, pending
        role = data.get("role")  # admin, member, billing_manager
        Logger.info(f"org membership: state={state}, role={role}")

        if state != "active":
            Logger.warn("membership not active for target organization")
            return PermissionStatus.DENIED
        if role != "admin":
            Logger.warn(f"need admin/owner role in target organization, have: {role}")
            return PermissionStatus.DENIED
        return PermissionStatus.GRANTED

    @staticmethod
    def _handle_membership_error(status_code: int) -> None:
        if status_code == 401:
            Logger.warn(
                "membership check unauthorized (401): token not authorized "
                "to read org membership (missing scopes)."
            )
        elif status_code == 403:
            Logger.warn(
                "membership check forbidden (403): missing read:org scope, "
                "fine-grained token not granted to org, or SAML SSO not "
                "authorized."
            )
        elif status_code == 404:
            Logger.warn(
                "membership not found (404): token user is not a member of "
                "the org or the org is private and not visible"
            )
        else:
            Logger.warn(f"unexpected response checking membership: {status_code}")
