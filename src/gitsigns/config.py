from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gitsigns.constants import (
    DEFAULT_DIFF_ALGORITHM,
    DEFAULT_GIT_EXECUTABLE,
    DiffAlgorithm,
)
from gitsigns.exceptions import ConfigError
from gitsigns.logging import get_logger

__all__ = [
    "GitSignsConfig",
    "get_project_config_path",
    "get_user_config_path",
    "load_config",
    "read_yaml_settings",
]

logger = get_logger(__name__)

_VERSION_SETTING = re.compile(r"^(auto|\d+\.\d+\.\d+)$")


def read_yaml_settings(path: Path) -> dict[str, Any]:
    """Read a YAML settings file into a mapping.

    A missing or empty file yields an empty mapping.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.is_file():
        return {}
    try:
        loaded = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if loaded is None:
        logger.warning("config_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping", value=loaded)
    return loaded


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one YAML file; absent keys are left unset."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path) -> None:
        super().__init__(settings_cls)
        self.path = path
        self._data = read_yaml_settings(path)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class GitSignsConfig(BaseSettings):
    """Settings for the git process core.

    Attributes:
        git_executable: Executable used for every git invocation.
        diff_algorithm: Value passed to ``git diff --diff-algorithm``.
        git_version: ``"auto"`` to detect with ``git --version``, or an
            explicit ``X.Y.Z`` literal.
        debug_mode: Report raw ``HEAD`` instead of an empty branch name for
            a detached HEAD.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITSIGNS_",
        extra="ignore",
    )

    git_executable: str = DEFAULT_GIT_EXECUTABLE
    diff_algorithm: DiffAlgorithm = DEFAULT_DIFF_ALGORITHM
    git_version: str = "auto"
    debug_mode: bool = False

    @field_validator("git_version")
    @classmethod
    def check_git_version(cls, v: str) -> str:
        if not _VERSION_SETTING.match(v):
            raise ValueError("git_version must be 'auto' or 'major.minor.patch'")
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
        """Order sources: init kwargs, GITSIGNS_* env, ./gitsigns.yaml, user file."""
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, get_project_config_path()),
            YamlSettingsSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Per-user settings file under ~/.config."""
    return Path.home() / ".config" / "gitsigns" / "config.yaml"


def get_project_config_path() -> Path:
    """Settings file in the current working directory."""
    return Path.cwd() / "gitsigns.yaml"


def load_config(config_path: Path | None = None) -> GitSignsConfig:
    """Build the effective settings.

    Precedence, highest first: ``config_path``, ``GITSIGNS_*`` environment
    variables, ./gitsigns.yaml, the user file, then field defaults.

    Args:
        config_path: Optional explicit YAML file (e.g. from ``--config``).

    Returns:
        The merged GitSignsConfig.

    Raises:
        ConfigError: If configuration is invalid or config_path is missing.
    """
    overrides: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}",
                field="config_file",
                value=str(config_path),
            )
        overrides = read_yaml_settings(config_path)

    try:
        return GitSignsConfig(**overrides)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
