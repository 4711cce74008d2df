"""Pydantic models for repository productionalization config and results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel

from foundry.models.enums import BranchProtectionPreset, ReviewerType, TeamPermission

MAX_WAIT_TIMER_MINUTES = 43200


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TeamPermissionConfig(BaseModel):
    """A team slug and the permission it should hold on the repository."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    team_slug: str = Field(..., min_length=1)
    permission: TeamPermission


class EnvironmentReviewer(BaseModel):
    """A user login or team slug, resolved to a numeric id at apply time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: ReviewerType
    slug: str = Field(..., min_length=1)


class EnvironmentConfig(BaseModel):
    """A deployment environment and its protection rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    wait_timer: int | None = Field(None, ge=0, le=MAX_WAIT_TIMER_MINUTES)
    reviewers: list[EnvironmentReviewer] | None = None
    prevent_self_review: bool | None = None


class EnvironmentVariable(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    value: str


class EnvironmentVariables(BaseModel):
    """Variables to set on one deployment environment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    environment_name: str = Field(..., min_length=1)
    variables: list[EnvironmentVariable] = Field(..., min_length=1)


class RepositorySecret(BaseModel):
    """An Actions secret. The value is masked in repr, str and dumps."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    value: SecretStr


class ProductionalizationConfig(BaseModel):
    """All productionalization settings. A ``None`` field skips its stage."""

    model_config = ConfigDict(extra="forbid")

    team_permissions: list[TeamPermissionConfig] | None = None
    topics: list[str] | None = None
    environments: list[EnvironmentConfig] | None = None
    environment_variables: list[EnvironmentVariables] | None = None
    branch_protection_preset: BranchProtectionPreset | None = None
    branch_protection_target_branch: str | None = None
    secrets: list[RepositorySecret] | None = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamPermissionResult(_ResultModel):
    team_slug: str
    success: bool
    error: str | None = None


class EnvironmentCreationResult(_ResultModel):
    environment: str
    success: bool = False
    error: str | None = None


class EnvironmentVariableResult(_ResultModel):
    environment: str
    variable: str
    success: bool = False
    error: str | None = None


class SecretCreationResult(_ResultModel):
    secret: str
    success: bool = False
    error: str | None = None


class ProductionalizationResult(_ResultModel):
    """Per-stage outcome of a productionalization run.

    Every field has an empty default, so a run with an empty config still
    yields a fully populated result.
    """

    team_permissions: list[TeamPermissionResult] = Field(default_factory=list)

    topics_added: bool = False
    topics_error: str | None = None

    environments_created: list[str] = Field(default_factory=list)
    environment_errors: list[EnvironmentCreationResult] = Field(default_factory=list)

    variables_created: int = 0
    variable_errors: list[EnvironmentVariableResult] = Field(default_factory=list)

    branch_protection_created: bool = False
    branch_protection_error: str | None = None

    secrets_created: int = 0
    secret_errors: list[SecretCreationResult] = Field(default_factory=list)

    def to_output(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset error messages."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
