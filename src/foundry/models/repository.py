"""Pydantic models for repository creation."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from foundry.constants import DEFAULT_AUTO_INIT, DEFAULT_PRIVATE
from foundry.models.productionalization import ProductionalizationConfig


class RepositoryInput(BaseModel):
    """Everything needed to create (and optionally productionalize) a repository."""

    model_config = ConfigDict(extra="forbid")

    token: SecretStr = SecretStr("")
    name: str = Field(..., min_length=1)
    description: str = ""
    private: bool = DEFAULT_PRIVATE
    template: str | None = None
    organization: str | None = None
    auto_init: bool = DEFAULT_AUTO_INIT
    gitignore_template: str | None = None
    license_template: str | None = None
    default_branch: str | None = None

    productionalize: bool = False
    productionalization_config: ProductionalizationConfig | None = None


class RepositoryResult(BaseModel):
    """Identity of a created repository."""

    id: int
    full_name: str
    html_url: str

    @property
    def owner_and_name(self) -> tuple[str, str]:
        owner, _, name = self.full_name.partition("/")
        return owner, name
