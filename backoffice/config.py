"""Back office configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class BackofficeSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///backoffice.db"
    echo_sql: bool = False
    app_title: str = "Hosting Back Office"
    log_level: str = "INFO"

    # Enhance control panel defaults. Values stored on the control panel row
    # win; these only fill gaps. The bare ENHANCE_* names are accepted too.
    enhance_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BACKOFFICE_ENHANCE_API_KEY", "ENHANCE_API_KEY"),
    )
    enhance_base_url: str = Field(
        default="https://api.enhance.com",
        validation_alias=AliasChoices("BACKOFFICE_ENHANCE_BASE_URL", "ENHANCE_BASE_URL"),
    )
    enhance_org_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BACKOFFICE_ENHANCE_ORG_ID", "ENHANCE_ORG_ID"),
    )

    # Remote calls: per-request HTTP timeout and whole-operation deadline.
    control_panel_timeout_seconds: float = 30.0
    sync_deadline_seconds: float = 90.0

    # Operator-triggered batch retry of records left in ERROR.
    sync_retry_batch_limit: int = 10

    model_config = {"env_prefix": "BACKOFFICE_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = BackofficeSettings()
