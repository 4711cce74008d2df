"""ProductionalizationService: applies organizational policy to a new repository.

Stages run in a fixed order: team permissions, topics, environments,
environment variables, branch protection, secrets. Remote failures are caught
per item (or per stage, where the stage is a single call) and recorded in the
returned :class:`ProductionalizationResult`; they never abort later stages.
"""

from __future__ import annotations

import asyncio
import logging

from foundry.config import settings
from foundry.errors.exceptions import GitHubAPIError, GitHubConflictError
from foundry.github.base import GitHubAPI
from foundry.models.enums import ReviewerType
from foundry.models.productionalization import (
    EnvironmentConfig,
    EnvironmentCreationResult,
    EnvironmentReviewer,
    EnvironmentVariableResult,
    EnvironmentVariables,
    ProductionalizationConfig,
    ProductionalizationResult,
    RepositorySecret,
    SecretCreationResult,
    TeamPermissionConfig,
    TeamPermissionResult,
)
from foundry.services.branch_protection_presets import get_branch_protection_preset
from foundry.utils.case_converter import to_upper_snake_case
from foundry.utils.secret_encryption import encrypt_secret

_module_logger = logging.getLogger(__name__)


def _is_already_exists(exc: GitHubAPIError) -> bool:
    """True when GitHub rejected a create because the resource exists."""
    if isinstance(exc, GitHubConflictError):
        return True
    return exc.status_code == 422 and "already exists" in exc.message.lower()


class ProductionalizationService:
    """Runs every productionalization stage against one repository."""

    def __init__(
        self,
        client: GitHubAPI,
        logger: logging.Logger | None = None,
        *,
        secret_creation_delay: float | None = None,
        default_branch_protection_target: str | None = None,
    ):
        self.client = client
        self.logger = logger or _module_logger
        self.secret_creation_delay = (
            settings.secret_creation_delay
            if secret_creation_delay is None
            else secret_creation_delay
        )
        self.default_branch_protection_target = (
            default_branch_protection_target or settings.default_branch_protection_target
        )

    async def productionalize_repository(
        self,
        owner: str,
        repo: str,
        config: ProductionalizationConfig,
    ) -> ProductionalizationResult:
        """Apply *config* to ``owner/repo``.

        Returns:
            A fully populated result. Stages whose config field is absent
            keep their empty defaults.
        """
        result = ProductionalizationResult()

        if config.team_permissions:
            await self._apply_team_permissions(owner, repo, config.team_permissions, result)

        if config.topics:
            await self._apply_topics(owner, repo, config.topics, result)

        if config.environments:
            await self._create_environments(owner, repo, config.environments, result)

        if config.environment_variables:
            await self._create_environment_variables(
                owner, repo, config.environment_variables, result
            )

        if config.branch_protection_preset:
            await self._apply_branch_protection(owner, repo, config, result)

        if config.secrets:
            await self._create_secrets(owner, repo, config.secrets, result)

        return result

    # ------------------------------------------------------------------
    # Team permissions
    # ------------------------------------------------------------------

    async def _apply_team_permissions(
        self,
        owner: str,
        repo: str,
        teams: list[TeamPermissionConfig],
        result: ProductionalizationResult,
    ) -> None:
        self.logger.info("Applying permissions for %d team(s)", len(teams))

        for team in teams:
            try:
                await self.client.add_or_update_team_repo_permission(
                    org=owner,
                    team_slug=team.team_slug,
                    owner=owner,
                    repo=repo,
                    permission=team.permission.value,
                )
                result.team_permissions.append(
                    TeamPermissionResult(team_slug=team.team_slug, success=True)
                )
                self.logger.info("Granted %s to team %s", team.permission.value, team.team_slug)
            except Exception as exc:
                self.logger.warning("Failed to set permission for team %s: %s", team.team_slug, exc)
                result.team_permissions.append(
                    TeamPermissionResult(team_slug=team.team_slug, success=False, error=str(exc))
                )

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def _apply_topics(
        self,
        owner: str,
        repo: str,
        topics: list[str],
        result: ProductionalizationResult,
    ) -> None:
        try:
            existing = (await self.client.get_all_topics(owner=owner, repo=repo)).get("names") or []
            merged = list(dict.fromkeys([*existing, *topics]))
            await self.client.replace_all_topics(owner=owner, repo=repo, names=merged)
            result.topics_added = True
            self.logger.info("Repository topics set to: %s", ", ".join(merged))
        except Exception as exc:
            self.logger.warning("Failed to update repository topics: %s", exc)
            result.topics_added = False
            result.topics_error = str(exc)

    # ------------------------------------------------------------------
    # Environments
    # ------------------------------------------------------------------

    async def _resolve_reviewer(self, owner: str, reviewer: EnvironmentReviewer) -> dict:
        """Resolve a reviewer slug to ``{"type", "id"}``."""
        if reviewer.type == ReviewerType.TEAM:
            data = await self.client.get_team_by_name(org=owner, team_slug=reviewer.slug)
        else:
            data = await self.client.get_user_by_username(username=reviewer.slug)
        return {"type": reviewer.type.value, "id": data["id"]}

    async def _create_environments(
        self,
        owner: str,
        repo: str,
        environments: list[EnvironmentConfig],
        result: ProductionalizationResult,
    ) -> None:
        self.logger.info("Creating %d environment(s)", len(environments))

        for env in environments:
            try:
                reviewers = None
                if env.reviewers is not None:
                    reviewers = [await self._resolve_reviewer(owner, r) for r in env.reviewers]

                await self.client.create_or_update_environment(
                    owner=owner,
                    repo=repo,
                    environment_name=env.name,
                    wait_timer=env.wait_timer,
                    reviewers=reviewers,
                    prevent_self_review=env.prevent_self_review,
                )
                result.environments_created.append(env.name)
                self.logger.info("Environment %s created", env.name)
            except Exception as exc:
                self.logger.warning("Failed to create environment %s: %s", env.name, exc)
                result.environment_errors.append(
                    EnvironmentCreationResult(environment=env.name, error=str(exc))
                )

    # ------------------------------------------------------------------
    # Environment variables
    # ------------------------------------------------------------------

    async def _upsert_variable(
        self, owner: str, repo: str, environment_name: str, name: str, value: str
    ) -> None:
        try:
            await self.client.create_environment_variable(
                owner=owner,
                repo=repo,
                environment_name=environment_name,
                variable_name=name,
                value=value,
            )
        except GitHubAPIError as exc:
            if not _is_already_exists(exc):
                raise
            self.logger.debug("Variable %s exists in %s, updating", name, environment_name)
            await self.client.update_environment_variable(
                owner=owner,
                repo=repo,
                environment_name=environment_name,
                variable_name=name,
                value=value,
            )

    async def _create_environment_variables(
        self,
        owner: str,
        repo: str,
        blocks: list[EnvironmentVariables],
        result: ProductionalizationResult,
    ) -> None:
        # Unknown environment names are still sent; GitHub decides whether they exist.
        failed_environments = {err.environment for err in result.environment_errors}

        for block in blocks:
            env_name = block.environment_name

            if env_name in failed_environments:
                self.logger.warning(
                    "Skipping %d variable(s) for environment %s: environment was not created",
                    len(block.variables),
                    env_name,
                )
                for variable in block.variables:
                    result.variable_errors.append(
                        EnvironmentVariableResult(
                            environment=env_name,
                            variable=to_upper_snake_case(variable.name),
                            error=f"Environment {env_name} was not created",
                        )
                    )
                continue

            for variable in block.variables:
                name = to_upper_snake_case(variable.name)
                try:
                    await self._upsert_variable(owner, repo, env_name, name, variable.value)
                    result.variables_created += 1
                except Exception as exc:
                    self.logger.warning(
                        "Failed to set variable %s in environment %s: %s", name, env_name, exc
                    )
                    result.variable_errors.append(
                        EnvironmentVariableResult(environment=env_name, variable=name, error=str(exc))
                    )

        self.logger.info("Environment variables created: %d", result.variables_created)

    # ------------------------------------------------------------------
    # Branch protection
    # ------------------------------------------------------------------

    async def _apply_branch_protection(
        self,
        owner: str,
        repo: str,
        config: ProductionalizationConfig,
        result: ProductionalizationResult,
    ) -> None:
        target = config.branch_protection_target_branch or self.default_branch_protection_target
        ruleset = get_branch_protection_preset(config.branch_protection_preset, target)

        try:
            await self.client.create_repo_ruleset(owner=owner, repo=repo, ruleset=ruleset)
            result.branch_protection_created = True
            self.logger.info(
                "Branch protection (%s) applied to %s",
                config.branch_protection_preset.value,
                target,
            )
        except Exception as exc:
            self.logger.warning("Failed to apply branch protection: %s", exc)
            result.branch_protection_created = False
            result.branch_protection_error = str(exc)

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def _create_secrets(
        self,
        owner: str,
        repo: str,
        secrets: list[RepositorySecret],
        result: ProductionalizationResult,
    ) -> None:
        try:
            key = await self.client.get_repo_public_key(owner=owner, repo=repo)
            key_id, public_key = key["key_id"], key["key"]
        except Exception as exc:
            # Nothing can be encrypted without the key; no per-secret errors are recorded.
            self.logger.error(
                "Failed to fetch repository public key, %d secret(s) not created: %s",
                len(secrets),
                exc,
            )
            return

        for index, secret in enumerate(secrets):
            if index and self.secret_creation_delay > 0:
                await asyncio.sleep(self.secret_creation_delay)
            try:
                encrypted_value = await encrypt_secret(public_key, secret.value)
                await self.client.create_or_update_repo_secret(
                    owner=owner,
                    repo=repo,
                    secret_name=secret.name,
                    encrypted_value=encrypted_value,
                    key_id=key_id,
                )
                result.secrets_created += 1
                self.logger.info("Secret %s created", secret.name)
            except Exception as exc:
                self.logger.warning("Failed to create secret %s: %s", secret.name, exc)
                result.secret_errors.append(SecretCreationResult(secret=secret.name, error=str(exc)))
