"""Parsing and validation of raw productionalization inputs.

Each parser takes the raw string received from the workflow configuration and
returns typed models. Blank input yields an empty result. Malformed input
raises a :class:`~foundry.errors.exceptions.FoundryError` subclass whose
message names the offending element.
"""

from __future__ import annotations

import json
from typing import Any

from foundry.errors.exceptions import InputParseError, InputShapeError, InputValidationError
from foundry.models.enums import BranchProtectionPreset, ReviewerType, TeamPermission
from foundry.models.productionalization import (
    MAX_WAIT_TIMER_MINUTES,
    EnvironmentConfig,
    EnvironmentReviewer,
    EnvironmentVariable,
    EnvironmentVariables,
    RepositorySecret,
    TeamPermissionConfig,
)

_PERMISSIONS = ", ".join(p.value for p in TeamPermission)
_PRESETS = ", ".join(p.value for p in BranchProtectionPreset)


def _decode_array(raw: str, section: str, label: str) -> list[Any]:
    """JSON-decode *raw* and require a list."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputParseError(section, str(exc)) from exc
    if not isinstance(data, list):
        raise InputShapeError(f"{label} must be an array", section)
    return data


def _valid_str(item: dict, field: str) -> str | None:
    value = item.get(field)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _require_object(item: Any, label: str, index: int) -> dict:
    if not isinstance(item, dict):
        raise InputValidationError(f"{label} at index {index} must be an object")
    return item


# ---------------------------------------------------------------------------
# Team permissions
# ---------------------------------------------------------------------------


def parse_team_permissions(raw: str) -> list[TeamPermissionConfig]:
    """Parse ``[{"teamSlug": ..., "permission": ...}]``."""
    if not raw or not raw.strip():
        return []

    data = _decode_array(raw, "team permissions", "Team permissions")
    result: list[TeamPermissionConfig] = []
    for index, item in enumerate(data):
        item = _require_object(item, "Team permission", index)

        team_slug = _valid_str(item, "teamSlug")
        if team_slug is None:
            raise InputValidationError(
                f"Team permission at index {index} missing valid teamSlug",
                details={"index": index, "field": "teamSlug"},
            )

        permission = _valid_str(item, "permission")
        if permission is None:
            raise InputValidationError(
                f"Team permission at index {index} missing valid permission",
                details={"index": index, "field": "permission"},
            )
        if permission not in TeamPermission.__members__.values():
            raise InputValidationError(
                f"Team permission {team_slug} has invalid permission: {permission}. "
                f"Must be one of: {_PERMISSIONS}",
                details={"team_slug": team_slug, "permission": permission},
            )

        result.append(TeamPermissionConfig(team_slug=team_slug, permission=TeamPermission(permission)))
    return result


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


def parse_topics(raw: str) -> list[str]:
    """Parse a comma-separated list or a JSON array of topic strings.

    Comma-separated entries are trimmed and blanks dropped; non-string JSON
    elements are dropped.
    """
    if not raw or not raw.strip():
        return []

    stripped = raw.strip()
    if stripped.startswith("["):
        data = _decode_array(stripped, "repository topics", "Repository topics")
        return [topic for topic in data if isinstance(topic, str)]

    return [topic.strip() for topic in stripped.split(",") if topic.strip()]


# ---------------------------------------------------------------------------
# Environments
# ---------------------------------------------------------------------------


def _parse_reviewers(raw_reviewers: Any, env_name: str) -> list[EnvironmentReviewer]:
    if not isinstance(raw_reviewers, list):
        raise InputValidationError(f"Environment {env_name} reviewers must be an array")

    reviewers: list[EnvironmentReviewer] = []
    for index, item in enumerate(raw_reviewers):
        if not isinstance(item, dict):
            raise InputValidationError(
                f"Reviewer at index {index} for environment {env_name} must be an object"
            )
        reviewer_type = item.get("type")
        if reviewer_type not in ReviewerType.__members__.values():
            raise InputValidationError(
                f"Reviewer at index {index} for environment {env_name} "
                f"has invalid type (must be 'User' or 'Team')",
                details={"environment": env_name, "index": index, "type": reviewer_type},
            )
        slug = _valid_str(item, "slug")
        if slug is None:
            raise InputValidationError(
                f"Reviewer at index {index} for environment {env_name} missing valid slug",
                details={"environment": env_name, "index": index, "field": "slug"},
            )
        reviewers.append(EnvironmentReviewer(type=ReviewerType(reviewer_type), slug=slug))
    return reviewers


def parse_environments(raw: str) -> list[EnvironmentConfig]:
    """Parse ``[{"name", "waitTimer"?, "reviewers"?, "preventSelfReview"?}]``."""
    if not raw or not raw.strip():
        return []

    data = _decode_array(raw, "environments", "Environments")
    result: list[EnvironmentConfig] = []
    seen: set[str] = set()
    for index, item in enumerate(data):
        item = _require_object(item, "Environment", index)

        name = _valid_str(item, "name")
        if name is None:
            raise InputValidationError(
                f"Environment at index {index} missing valid name",
                details={"index": index, "field": "name"},
            )
        if name in seen:
            raise InputValidationError(f"Environment {name} is defined more than once")
        seen.add(name)

        fields: dict[str, Any] = {"name": name}

        if "waitTimer" in item:
            wait_timer = item["waitTimer"]
            # JSON numbers like 30.0 are whole minutes
            if isinstance(wait_timer, float) and wait_timer.is_integer():
                wait_timer = int(wait_timer)
            # bool is an int subclass; reject it explicitly
            if (
                isinstance(wait_timer, bool)
                or not isinstance(wait_timer, int)
                or not 0 <= wait_timer <= MAX_WAIT_TIMER_MINUTES
            ):
                raise InputValidationError(
                    f"Environment {name} has invalid waitTimer "
                    f"(must be a non-negative number no greater than {MAX_WAIT_TIMER_MINUTES})",
                    details={"environment": name, "waitTimer": wait_timer},
                )
            fields["wait_timer"] = wait_timer

        if "reviewers" in item:
            fields["reviewers"] = _parse_reviewers(item["reviewers"], name)

        if "preventSelfReview" in item:
            prevent_self_review = item["preventSelfReview"]
            if not isinstance(prevent_self_review, bool):
                raise InputValidationError(
                    f"Environment {name} has invalid preventSelfReview (must be a boolean)"
                )
            fields["prevent_self_review"] = prevent_self_review

        result.append(EnvironmentConfig(**fields))
    return result


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


def parse_environment_variables(raw: str) -> list[EnvironmentVariables]:
    """Parse ``[{"environmentName", "variables": [{"name", "value"}]}]``."""
    if not raw or not raw.strip():
        return []

    data = _decode_array(raw, "environment variables", "Environment variables")
    result: list[EnvironmentVariables] = []
    for index, item in enumerate(data):
        item = _require_object(item, "Environment variables", index)

        env_name = _valid_str(item, "environmentName")
        if env_name is None:
            raise InputValidationError(
                f"Environment variables at index {index} missing valid environmentName",
                details={"index": index, "field": "environmentName"},
            )

        raw_variables = item.get("variables")
        if not isinstance(raw_variables, list) or not raw_variables:
            raise InputValidationError(
                f"Environment variables for {env_name} must contain a variables array "
                f"with at least one entry",
                details={"environment": env_name, "field": "variables"},
            )

        variables: list[EnvironmentVariable] = []
        for var_index, variable in enumerate(raw_variables):
            if not isinstance(variable, dict):
                raise InputValidationError(
                    f"Variable at index {var_index} for environment {env_name} must be an object"
                )
            var_name = _valid_str(variable, "name")
            if var_name is None:
                raise InputValidationError(
                    f"Variable at index {var_index} for environment {env_name} missing valid name",
                    details={"environment": env_name, "index": var_index, "field": "name"},
                )
            value = variable.get("value")
            if not isinstance(value, str):
                raise InputValidationError(
                    f"Variable {var_name} for environment {env_name} missing valid value",
                    details={"environment": env_name, "variable": var_name, "field": "value"},
                )
            variables.append(EnvironmentVariable(name=var_name, value=value))

        result.append(EnvironmentVariables(environment_name=env_name, variables=variables))
    return result


# ---------------------------------------------------------------------------
# Branch protection
# ---------------------------------------------------------------------------


def parse_branch_protection_preset(raw: str) -> BranchProtectionPreset | None:
    """Parse a preset name; blank input means no branch protection."""
    if not raw or not raw.strip():
        return None

    preset = raw.strip()
    if preset not in BranchProtectionPreset.__members__.values():
        raise InputValidationError(
            f"Invalid branch protection preset: {preset}. Must be one of: {_PRESETS}",
            details={"preset": preset},
        )
    return BranchProtectionPreset(preset)


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------


def parse_secrets(raw: str) -> list[RepositorySecret]:
    """Parse ``[{"name", "value"}]``. Error messages never include values."""
    if not raw or not raw.strip():
        return []

    data = _decode_array(raw, "repository secrets", "Repository secrets")
    result: list[RepositorySecret] = []
    for index, item in enumerate(data):
        item = _require_object(item, "Secret", index)

        name = _valid_str(item, "name")
        if name is None:
            raise InputValidationError(
                f"Secret at index {index} missing valid name",
                details={"index": index, "field": "name"},
            )
        value = item.get("value")
        if not isinstance(value, str) or not value:
            raise InputValidationError(
                f"Secret {name} missing valid value",
                details={"secret": name, "field": "value"},
            )
        result.append(RepositorySecret(name=name, value=value))
    return result
