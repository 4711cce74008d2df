"""Top-level run: gather inputs, create the repository, productionalize it."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from foundry import action_io
from foundry.config import Settings, settings as default_settings
from foundry.constants import (
    DEFAULT_AUTO_INIT,
    DEFAULT_BRANCH,
    DEFAULT_BRANCH_PROTECTION_TARGET,
    DEFAULT_PRIVATE,
    DEFAULT_PRODUCTIONALIZE,
)
from foundry.errors.exceptions import FoundryError, InputValidationError
from foundry.github.base import GitHubAPI
from foundry.logging_config import bind_run_context, clear_run_context
from foundry.models.productionalization import ProductionalizationConfig, ProductionalizationResult
from foundry.models.repository import RepositoryInput
from foundry.services.productionalization_service import ProductionalizationService
from foundry.services.repository_service import RepositoryService
from foundry.utils.input_parser import (
    parse_branch_protection_preset,
    parse_environment_variables,
    parse_environments,
    parse_secrets,
    parse_team_permissions,
    parse_topics,
)

logger = logging.getLogger(__name__)

INPUT_NAMES = (
    "github-token",
    "repository-name",
    "repository-description",
    "repository-private",
    "repository-template",
    "organization",
    "auto-init",
    "gitignore-template",
    "license-template",
    "default-branch",
    "productionalize",
    "team-permissions",
    "repository-topics",
    "environments",
    "environment-variables",
    "branch-protection-preset",
    "branch-protection-target-branch",
    "repository-secrets",
)


def _require(get_input: Callable[[str], str], name: str) -> str:
    value = get_input(name)
    if not value:
        raise InputValidationError(f"Input required and not supplied: {name}")
    return value


def _bool_input(get_input: Callable[[str], str], name: str, default: bool) -> bool:
    value = get_input(name)
    return action_io.to_bool(value) if value else default


def gather_productionalization_config(get_input: Callable[[str], str]) -> ProductionalizationConfig:
    """Parse every productionalization input. Blank inputs leave their stage disabled."""
    config = ProductionalizationConfig()

    if raw := get_input("team-permissions"):
        config.team_permissions = parse_team_permissions(raw)
    if raw := get_input("repository-topics"):
        config.topics = parse_topics(raw)
    if raw := get_input("environments"):
        config.environments = parse_environments(raw)
    if raw := get_input("environment-variables"):
        config.environment_variables = parse_environment_variables(raw)
    if raw := get_input("branch-protection-preset"):
        config.branch_protection_preset = parse_branch_protection_preset(raw)
        config.branch_protection_target_branch = (
            get_input("branch-protection-target-branch") or DEFAULT_BRANCH_PROTECTION_TARGET
        )
    if raw := get_input("repository-secrets"):
        config.secrets = parse_secrets(raw)

    return config


def gather_input(get_input: Callable[[str], str] = action_io.get_input) -> RepositoryInput:
    """Build a :class:`RepositoryInput` from action inputs.

    Raises:
        FoundryError: when a required input is missing or an input is malformed.
    """
    repo_input = RepositoryInput(
        token=_require(get_input, "github-token"),
        name=_require(get_input, "repository-name"),
        description=get_input("repository-description"),
        private=_bool_input(get_input, "repository-private", DEFAULT_PRIVATE),
        template=get_input("repository-template") or None,
        organization=get_input("organization") or None,
        auto_init=_bool_input(get_input, "auto-init", DEFAULT_AUTO_INIT),
        gitignore_template=get_input("gitignore-template") or None,
        license_template=get_input("license-template") or None,
        default_branch=get_input("default-branch") or DEFAULT_BRANCH,
    )

    if _bool_input(get_input, "productionalize", DEFAULT_PRODUCTIONALIZE):
        repo_input.productionalize = True
        repo_input.productionalization_config = gather_productionalization_config(get_input)

    return repo_input


def _log_summary(result: ProductionalizationResult) -> None:
    succeeded = sum(1 for team in result.team_permissions if team.success)
    logger.info("Productionalization complete")
    logger.info("- Team permissions: %d/%d successful", succeeded, len(result.team_permissions))
    logger.info("- Topics added: %s", result.topics_added)
    logger.info("- Environments created: %d", len(result.environments_created))
    logger.info("- Variables created: %d", result.variables_created)
    logger.info("- Branch protection created: %s", result.branch_protection_created)
    logger.info("- Secrets created: %d", result.secrets_created)


async def run(
    repo_input: RepositoryInput,
    client: GitHubAPI,
    settings: Settings = default_settings,
) -> int:
    """Create and optionally productionalize a repository.

    Returns:
        Process exit code. Fatal errors (bad input, failed creation,
        unexpected exceptions) yield 1. Partial productionalization
        failures are reported in the ``productionalization-status`` output.
    """
    try:
        logger.info("Creating repository: %s", repo_input.name)
        repository = await RepositoryService(client).create_repository(repo_input)

        action_io.set_output("repository-url", repository.html_url)
        action_io.set_output("repository-name", repository.full_name)
        action_io.set_output("repository-id", str(repository.id))
        logger.info("Repository created successfully: %s", repository.html_url)

        if repo_input.productionalize and repo_input.productionalization_config:
            owner, repo = repository.owner_and_name
            bind_run_context(owner, repo)
            try:
                logger.info("Starting repository productionalization")
                service = ProductionalizationService(
                    client,
                    secret_creation_delay=settings.secret_creation_delay,
                    default_branch_protection_target=settings.default_branch_protection_target,
                )
                result = await service.productionalize_repository(
                    owner, repo, repo_input.productionalization_config
                )
            finally:
                clear_run_context()

            action_io.set_output("productionalization-status", json.dumps(result.to_output()))
            _log_summary(result)
    except FoundryError as exc:
        logger.error("Foundry run failed: %s", exc.message)
        action_io.set_failed(exc.message)
        return 1
    except Exception as exc:
        logger.exception("Unexpected error during Foundry run")
        action_io.set_failed(f"Unexpected error: {exc}")
        return 1

    return 0
