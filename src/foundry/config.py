"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings

from foundry.constants import DEFAULT_BRANCH_PROTECTION_TARGET, SECRET_CREATION_DELAY_SECONDS


class Settings(BaseSettings):
    # GitHub REST API
    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    request_timeout: float = 30.0

    # Logging
    log_level: str = "info"
    json_logs: bool = False

    # Rate-limit courtesy between secret uploads (seconds)
    secret_creation_delay: float = SECRET_CREATION_DELAY_SECONDS

    # Branch protection
    default_branch_protection_target: str = DEFAULT_BRANCH_PROTECTION_TARGET

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "FOUNDRY_",
    }

    @property
    def api_base_url(self) -> str:
        """Return the API URL without a trailing slash."""
        return self.github_api_url.rstrip("/")


settings = Settings()
