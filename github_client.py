#!/usr/bin/env python3
"""GitHub API wrapper for org lookups, repository listing and transfers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import github
import requests

if TYPE_CHECKING:
    from github.Organization import Organization

from config import DEFAULT_API_URL, GitHubConfig
from exceptions import (AuthenticationError, OrganizationNotFoundError,
                        TransferRequestError)
from logging_utils import Logger

REQUEST_TIMEOUT_S = 30


class GitHubClient:
    """Thin wrapper around PyGithub and the REST endpoints PyGithub lacks."""

    def __init__(self, config: GitHubConfig) -> None:
        self.config = config
        self.api: Optional[github.Github] = None
        self._orgs: Dict[str, "Organization"] = {}

    def connect(self) -> None:
        Logger.info(f"init github API: {self.config.api_url}")
        auth = github.Auth.Token(self.config.token)
        if self.config.api_url != DEFAULT_API_URL:
            self.api = github.Github(base_url=self.config.api_url, auth=auth)
        else:
            self.api = github.Github(auth=auth)

    def _require_api(self) -> github.Github:
        if self.api is None:
            self.connect()
        return self.api

    def _get_api_headers(self) -> dict:
        """Get standard API headers for GitHub requests."""
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def get_authenticated_login(self) -> str:
        """Return the login of the token owner."""
        api = self._require_api()
        try:
            return api.get_user().login
        except github.BadCredentialsException as e:
            raise AuthenticationError("invalid or expired token") from e
        except github.GithubException as e:
            raise AuthenticationError(f"github error ({e.status}): {e.data}") from e
        except requests.RequestException as e:
            raise AuthenticationError(f"failed to contact github api: {e}") from e

    def get_organization(self, org_name: str) -> "Organization":
        if org_name in self._orgs:
            return self._orgs[org_name]
        api = self._require_api()
        try:
            org = api.get_organization(org_name)
            Logger.debug(f"github org: {org.login}")
        except github.UnknownObjectException as e:
            raise OrganizationNotFoundError(
                f"organization '{org_name}' does not exist or is not visible "
                "to this token"
            ) from e
        except github.GithubException as e:
            raise OrganizationNotFoundError(
                f"organization '{org_name}' not accessible ({e.status})"
            ) from e
        self._orgs[org_name] = org
        return org

    def get_membership(self, org_name: str) -> Tuple[int, Dict[str, Any]]:
        """Return (status_code, body) of the token owner's membership in org."""
        url = f"{self.config.api_url}/user/memberships/orgs/{org_name}"
        response = requests.get(
            url, headers=self._get_api_headers(), timeout=REQUEST_TIMEOUT_S
        )
        body: Dict[str, Any] = {}
        if response.status_code == 200:
            body = response.json()
        return response.status_code, body

    def list_org_repos(self, org_name: str) -> List[str]:
        """Return names of all repositories in org (all visibility types).

        Pagination is handled by PyGithub's PaginatedList.
        """
        org = self.get_organization(org_name)
        return [repo.name for repo in org.get_repos(type="all")]

    def list_org_members(self, org_name: str) -> List[Dict[str, Any]]:
        org = self.get_organization(org_name)
        return [
            {
                "login": member.login,
                "id": member.id,
                "profile": member.html_url,
            }
            for member in org.get_members()
        ]

    def transfer_repo(self, owner: str, name: str, new_owner: str) -> int:
        """Request transfer of owner/name to new_owner. Returns the HTTP status."""
        url = f"{self.config.api_url}/repos/{owner}/{name}/transfer"
        try:
            response = requests.post(
                url,
                headers=self._get_api_headers(),
                json={"new_owner": new_owner},
                timeout=REQUEST_TIMEOUT_S,
            )
        except requests.RequestException as e:
            raise TransferRequestError(f"request error: {e}") from e

        if response.status_code >= 400:
            raise TransferRequestError(
                _error_message(response), status_code=response.status_code
            )
        return response.status_code


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {response.status_code}"
