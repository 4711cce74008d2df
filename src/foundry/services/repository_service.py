"""RepositoryService: creates the repository that productionalization targets."""

from __future__ import annotations

import logging
from typing import Any

from foundry.errors.exceptions import (
    InvalidTemplateError,
    MissingTemplateError,
    RepositoryCreationError,
)
from foundry.github.base import GitHubAPI
from foundry.models.repository import RepositoryInput, RepositoryResult

_module_logger = logging.getLogger(__name__)


def split_template(template: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its two parts.

    Raises:
        InvalidTemplateError: unless there are exactly two non-empty parts.
    """
    parts = template.split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise InvalidTemplateError(template)
    return parts[0].strip(), parts[1].strip()


class RepositoryService:
    """Creates repositories from a template or from scratch."""

    def __init__(self, client: GitHubAPI, logger: logging.Logger | None = None):
        self.client = client
        self.logger = logger or _module_logger

    async def create_repository(self, repo_input: RepositoryInput) -> RepositoryResult:
        """Create from template when one is given, otherwise create a new repository."""
        if repo_input.template:
            return await self.create_from_template(repo_input)
        return await self.create_new_repository(repo_input)

    async def create_from_template(self, repo_input: RepositoryInput) -> RepositoryResult:
        if not repo_input.template:
            raise MissingTemplateError()

        template_owner, template_repo = split_template(repo_input.template)
        self.logger.info("Creating repository from template: %s", repo_input.template)

        try:
            data = await self.client.create_using_template(
                template_owner=template_owner,
                template_repo=template_repo,
                owner=repo_input.organization or None,
                name=repo_input.name,
                description=repo_input.description,
                private=repo_input.private,
                include_all_branches=False,
            )
        except Exception as exc:
            raise RepositoryCreationError(
                f"Failed to create repository from template: {exc}"
            ) from exc

        await self._ensure_default_branch(data, repo_input.default_branch)
        return self._to_result(data)

    async def create_new_repository(self, repo_input: RepositoryInput) -> RepositoryResult:
        self.logger.info("Creating new repository")

        try:
            if repo_input.organization:
                data = await self.client.create_in_org(
                    org=repo_input.organization,
                    name=repo_input.name,
                    description=repo_input.description,
                    private=repo_input.private,
                    auto_init=repo_input.auto_init,
                    gitignore_template=repo_input.gitignore_template or None,
                    license_template=repo_input.license_template or None,
                    delete_branch_on_merge=True,
                    allow_squash_merge=True,
                    allow_rebase_merge=True,
                )
            else:
                data = await self.client.create_for_authenticated_user(
                    name=repo_input.name,
                    description=repo_input.description,
                    private=repo_input.private,
                    auto_init=repo_input.auto_init,
                    gitignore_template=repo_input.gitignore_template or None,
                    license_template=repo_input.license_template or None,
                )
        except Exception as exc:
            raise RepositoryCreationError(f"Failed to create repository: {exc}") from exc

        await self._ensure_default_branch(data, repo_input.default_branch)
        return self._to_result(data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _ensure_default_branch(self, data: dict[str, Any], desired: str | None) -> None:
        """Rename the default branch when it differs from *desired*."""
        if not desired or data.get("default_branch") == desired:
            return

        try:
            owner, _, repo = data["full_name"].partition("/")
            current = (await self.client.get_repository(owner=owner, repo=repo))["default_branch"]
            if current == desired:
                return
            self.logger.info("Renaming default branch %s -> %s", current, desired)
            await self.client.rename_branch(owner=owner, repo=repo, branch=current, new_name=desired)
        except Exception as exc:
            raise RepositoryCreationError(f"Failed to rename default branch: {exc}") from exc

    @staticmethod
    def _to_result(data: dict[str, Any]) -> RepositoryResult:
        try:
            return RepositoryResult(
                id=data["id"],
                full_name=data["full_name"],
                html_url=data["html_url"],
            )
        except KeyError as exc:
            raise RepositoryCreationError(
                f"GitHub response is missing repository field {exc}",
                details={"field": exc.args[0]},
            ) from exc
