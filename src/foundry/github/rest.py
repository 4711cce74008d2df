"""GitHub REST implementation of :class:`~foundry.github.base.GitHubAPI` using httpx."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from foundry.config import settings
from foundry.errors.exceptions import GitHubAPIError, GitHubConflictError, GitHubNotFoundError
from foundry.github.base import GitHubAPI

logger = logging.getLogger(__name__)


def _seg(value: str) -> str:
    """Percent-encode a single path segment."""
    return quote(value, safe="")


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` values so GitHub applies its own defaults."""
    return {key: value for key, value in payload.items() if value is not None}


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's human-readable error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase or f"HTTP {response.status_code}"

    if not isinstance(body, dict):
        return str(body)

    message = str(body.get("message") or response.reason_phrase or f"HTTP {response.status_code}")
    details = [
        err["message"] if isinstance(err, dict) and err.get("message") else str(err)
        for err in body.get("errors") or []
    ]
    if details:
        message = f"{message}: {'; '.join(details)}"
    return message


class GitHubRestClient(GitHubAPI):
    """Async GitHub REST client sharing one connection pool.

    Use as an async context manager, or call :meth:`aclose` when done.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version or settings.github_api_version,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            headers=headers,
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubRestClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body (``{}`` when empty)."""
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            logger.error("GitHub request %s %s failed: %s", method, path, exc)
            raise GitHubAPIError(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            if not response.content:
                return {}
            return response.json()

        message = _error_message(response)
        logger.debug("GitHub %s %s returned %s: %s", method, path, response.status_code, message)
        if response.status_code == 404:
            raise GitHubNotFoundError(message)
        if response.status_code == 409:
            raise GitHubConflictError(message)
        raise GitHubAPIError(message, status_code=response.status_code)

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def create_using_template(
        self,
        *,
        template_owner: str,
        template_repo: str,
        name: str,
        owner: str | None = None,
        description: str = "",
        private: bool = False,
        include_all_branches: bool = False,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/repos/{_seg(template_owner)}/{_seg(template_repo)}/generate",
            _compact({
                "owner": owner,
                "name": name,
                "description": description,
                "private": private,
                "include_all_branches": include_all_branches,
            }),
        )

    async def create_in_org(
        self,
        *,
        org: str,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
        gitignore_template: str | None = None,
        license_template: str | None = None,
        delete_branch_on_merge: bool | None = None,
        allow_squash_merge: bool | None = None,
        allow_rebase_merge: bool | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/orgs/{_seg(org)}/repos",
            _compact({
                "name": name,
                "description": description,
                "private": private,
                "auto_init": auto_init,
                "gitignore_template": gitignore_template,
                "license_template": license_template,
                "delete_branch_on_merge": delete_branch_on_merge,
                "allow_squash_merge": allow_squash_merge,
                "allow_rebase_merge": allow_rebase_merge,
            }),
        )

    async def create_for_authenticated_user(
        self,
        *,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
        gitignore_template: str | None = None,
        license_template: str | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/user/repos",
            _compact({
                "name": name,
                "description": description,
                "private": private,
                "auto_init": auto_init,
                "gitignore_template": gitignore_template,
                "license_template": license_template,
            }),
        )

    async def get_repository(self, *, owner: str, repo: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}")

    async def rename_branch(
        self, *, owner: str, repo: str, branch: str, new_name: str
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/repos/{_seg(owner)}/{_seg(repo)}/branches/{_seg(branch)}/rename",
            {"new_name": new_name},
        )

    # ------------------------------------------------------------------
    # Teams, users, topics
    # ------------------------------------------------------------------

    async def add_or_update_team_repo_permission(
        self, *, org: str, team_slug: str, owner: str, repo: str, permission: str
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/orgs/{_seg(org)}/teams/{_seg(team_slug)}/repos/{_seg(owner)}/{_seg(repo)}",
            {"permission": permission},
        )

    async def get_team_by_name(self, *, org: str, team_slug: str) -> dict[str, Any]:
        return await self._request("GET", f"/orgs/{_seg(org)}/teams/{_seg(team_slug)}")

    async def get_user_by_username(self, *, username: str) -> dict[str, Any]:
        return await self._request("GET", f"/users/{_seg(username)}")

    async def get_all_topics(self, *, owner: str, repo: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}/topics")

    async def replace_all_topics(
        self, *, owner: str, repo: str, names: list[str]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT", f"/repos/{_seg(owner)}/{_seg(repo)}/topics", {"names": names}
        )

    # ------------------------------------------------------------------
    # Environments and variables
    # ------------------------------------------------------------------

    async def create_or_update_environment(
        self,
        *,
        owner: str,
        repo: str,
        environment_name: str,
        wait_timer: int | None = None,
        reviewers: list[dict[str, Any]] | None = None,
        prevent_self_review: bool | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/repos/{_seg(owner)}/{_seg(repo)}/environments/{_seg(environment_name)}",
            _compact({
                "wait_timer": wait_timer,
                "reviewers": reviewers,
                "prevent_self_review": prevent_self_review,
            }),
        )

    def _variables_path(self, owner: str, repo: str, environment_name: str) -> str:
        return f"/repos/{_seg(owner)}/{_seg(repo)}/environments/{_seg(environment_name)}/variables"

    async def get_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str
    ) -> dict[str, Any]:
        return await self._request(
            "GET", f"{self._variables_path(owner, repo, environment_name)}/{_seg(variable_name)}"
        )

    async def create_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str, value: str
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            self._variables_path(owner, repo, environment_name),
            {"name": variable_name, "value": value},
        )

    async def update_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str, value: str
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"{self._variables_path(owner, repo, environment_name)}/{_seg(variable_name)}",
            {"name": variable_name, "value": value},
        )

    # ------------------------------------------------------------------
    # Secrets and rulesets
    # ------------------------------------------------------------------

    async def get_repo_public_key(self, *, owner: str, repo: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/repos/{_seg(owner)}/{_seg(repo)}/actions/secrets/public-key"
        )

    async def create_or_update_repo_secret(
        self, *, owner: str, repo: str, secret_name: str, encrypted_value: str, key_id: str
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/repos/{_seg(owner)}/{_seg(repo)}/actions/secrets/{_seg(secret_name)}",
            {"encrypted_value": encrypted_value, "key_id": key_id},
        )

    async def create_repo_ruleset(
        self, *, owner: str, repo: str, ruleset: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "POST", f"/repos/{_seg(owner)}/{_seg(repo)}/rulesets", ruleset
        )
