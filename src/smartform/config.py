"""Configuration file loading and validation."""

import logging
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import (
    DEFAULT_SUBMIT_LABEL,
    ENV_NESTED_DELIMITER,
    ENV_PREFIX,
    WEB_HOST_DEFAULT,
    WEB_PORT_DEFAULT,
)
from .errors import ConfigException

logger = logging.getLogger(__name__)


class RenderConfig(BaseModel):
    """Presentation defaults shared by all renderers."""

    submit_label: str = Field(default=DEFAULT_SUBMIT_LABEL, min_length=1)
    humanize_labels: bool = True


class WebConfig(BaseModel):
    """Web service configuration."""

    host: str = Field(default=WEB_HOST_DEFAULT)
    port: int = Field(default=WEB_PORT_DEFAULT, ge=1, le=65535)
    reload: bool = Field(default=False)


class Settings(BaseSettings):
    """Application configuration."""

    log_file: str = Field(default="data/smartform.log")
    forms: List[str] = Field(default_factory=list)
    render: RenderConfig = Field(default_factory=RenderConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
    )

    @field_validator("forms", mode="before")
    @classmethod
    def coerce_single_form(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Settings":
        """Load configuration from specified path.

        Relative form declaration paths are resolved against the directory
        of the configuration file.
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Configuration file not found: {config_path}")

        class _Settings(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix=ENV_PREFIX,
                env_nested_delimiter=ENV_NESTED_DELIMITER,
            )

        try:
            settings = _Settings()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e
        except ValueError as e:
            raise ConfigException(f"Invalid configuration file {config_path}: {e}") from e

        base = path.resolve().parent
        settings.forms = [str(base / p) if not Path(p).is_absolute() else p for p in settings.forms]
        logger.debug(f"Loaded configuration from {config_path}")
        return settings
