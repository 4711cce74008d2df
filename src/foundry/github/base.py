"""Abstract GitHub capability consumed by the repository services.

Every method returns the decoded JSON body of the GitHub response (``{}`` for
empty bodies) or raises :class:`~foundry.errors.exceptions.GitHubAPIError`.
Services depend only on this interface, so tests substitute an
``AsyncMock(spec=GitHubAPI)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class GitHubAPI(ABC):
    """The GitHub REST operations Foundry needs."""

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    @abstractmethod
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
        """Generate a repository from a template repository."""
        ...

    @abstractmethod
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
        """Create a repository inside an organization."""
        ...

    @abstractmethod
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
        """Create a repository owned by the token's user."""
        ...

    @abstractmethod
    async def get_repository(self, *, owner: str, repo: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def rename_branch(
        self, *, owner: str, repo: str, branch: str, new_name: str
    ) -> dict[str, Any]:
        ...

    # ------------------------------------------------------------------
    # Teams, users, topics
    # ------------------------------------------------------------------

    @abstractmethod
    async def add_or_update_team_repo_permission(
        self, *, org: str, team_slug: str, owner: str, repo: str, permission: str
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_team_by_name(self, *, org: str, team_slug: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_user_by_username(self, *, username: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_all_topics(self, *, owner: str, repo: str) -> dict[str, Any]:
        """Return ``{"names": [...]}``."""
        ...

    @abstractmethod
    async def replace_all_topics(
        self, *, owner: str, repo: str, names: list[str]
    ) -> dict[str, Any]:
        ...

    # ------------------------------------------------------------------
    # Environments and variables
    # ------------------------------------------------------------------

    @abstractmethod
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
        ...

    @abstractmethod
    async def get_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def create_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str, value: str
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def update_environment_variable(
        self, *, owner: str, repo: str, environment_name: str, variable_name: str, value: str
    ) -> dict[str, Any]:
        ...

    # ------------------------------------------------------------------
    # Secrets and rulesets
    # ------------------------------------------------------------------

    @abstractmethod
    async def get_repo_public_key(self, *, owner: str, repo: str) -> dict[str, Any]:
        """Return ``{"key_id": ..., "key": <base64>}``."""
        ...

    @abstractmethod
    async def create_or_update_repo_secret(
        self, *, owner: str, repo: str, secret_name: str, encrypted_value: str, key_id: str
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def create_repo_ruleset(
        self, *, owner: str, repo: str, ruleset: dict[str, Any]
    ) -> dict[str, Any]:
        ...
