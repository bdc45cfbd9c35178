"""
Deployment inputs, read from INPUT_* environment variables the way CI runners
expose step inputs (INPUT_GIGALIXIR_APP, INPUT_MIGRATIONS, ...).
"""
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeployConfig(BaseSettings):
    """Everything the orchestration driver needs for one run."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Platform account
    gigalixir_username: str = Field(min_length=1, description="Gigalixir account email")
    gigalixir_password: SecretStr = Field(description="Gigalixir account password")
    gigalixir_app: str = Field(min_length=1, description="Target app identifier")

    # Deploy key, required when running migrations
    ssh_private_key: SecretStr = Field(default=SecretStr(""), description="Deploy key material")

    # Behaviour flags
    migrations: bool = Field(default=False, description="Run migrations after the rollout")
    migration_app_name: str = Field(default="", description="Scope migrations to this app name")
    app_subfolder: str = Field(default="", description="Push only this subfolder of the repo")
    hot_release: bool = Field(default=False, description="Ask the platform for a hot upgrade")

    # Driver knobs
    install_client: bool = Field(default=True, description="pip install the gigalixir CLI first")
    ssh_key_helper: str = Field(default="add-private-key", description="Command that installs the deploy key")

    @field_validator("migrations", "hot_release", "install_client", mode="before")
    @classmethod
    def _blank_is_default(cls, value, info):
        # Unset optional inputs arrive as empty strings
        if isinstance(value, str) and not value.strip():
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("gigalixir_username", "gigalixir_password", "gigalixir_app", mode="before")
    @classmethod
    def _not_blank(cls, value, info):
        # Unset required inputs also arrive as empty strings
        raw = value.get_secret_value() if isinstance(value, SecretStr) else value
        if isinstance(raw, str) and not raw.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return value

    @field_validator("gigalixir_username", "gigalixir_app", "migration_app_name", "app_subfolder", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _key_for_migrations(self):
        if self.migrations and not self.ssh_private_key.get_secret_value().strip():
            raise ValueError("ssh_private_key is required when migrations are enabled")
        return self

    def secrets(self):
        return [
            self.gigalixir_password.get_secret_value(),
            self.ssh_private_key.get_secret_value(),
        ]


def load_config(**overrides):
    """Build a DeployConfig from the environment, explicit values win"""
    return DeployConfig(**{k: v for k, v in overrides.items() if v is not None})
