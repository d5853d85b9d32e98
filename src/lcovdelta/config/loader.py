"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (LCOVDELTA__SECTION__KEY)
3. Repo config (.lcovdelta.yaml in the working directory)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lcovdelta.config.models import (
    GitHubConfig,
    LcovDeltaConfig,
    LoggingConfig,
    RenderConfig,
    ReportConfig,
)
from lcovdelta.core.errors import ConfigError

CONFIG_FILENAME = ".lcovdelta.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class LcovDeltaSettings(BaseSettings):
        """Root config. Env vars: LCOVDELTA__LOGGING__LEVEL, LCOVDELTA__REPORT__LCOV_FILE, etc."""

        model_config = SettingsConfigDict(
            env_prefix="LCOVDELTA__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        report: ReportConfig = ReportConfig()
        render: RenderConfig = RenderConfig()
        github: GitHubConfig = GitHubConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return LcovDeltaSettings


def load_config(
    working_directory: Path | None = None,
    *,
    config_file: Path | None = None,
    **kwargs: Any,
) -> LcovDeltaConfig:
    """Load config: defaults < .lcovdelta.yaml < env vars < kwargs.

    Args:
        working_directory: Directory holding .lcovdelta.yaml.
                           Defaults to current working directory.
        config_file: Explicit YAML file; must exist when given.
        **kwargs: Section overrides, e.g. ``render={"title": "Coverage"}``.
                  Sources are deep-merged, so a partial section only
                  overrides the keys it names.

    Returns:
        Fully resolved, frozen configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    working_directory = working_directory or Path.cwd()

    if config_file is not None:
        if not config_file.exists():
            raise ConfigError.file_not_found(str(config_file))
        yaml_config = _load_yaml(config_file)
    else:
        yaml_config = _load_yaml(working_directory / CONFIG_FILENAME)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    return LcovDeltaConfig.model_validate(settings.model_dump())
