"""Utilities for reading moldrun configuration from YAML."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from moldrun.errors import ConfigError
from moldrun.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = 'moldrun.config.yaml'
CONFIG_ENV_VAR = 'MOLDRUN_CONFIG'


class RunnerSettings(BaseModel):
    """Settings shared by the installer and the dispatcher."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    linker: str = 'mold'
    linker_args: tuple[str, ...] = ('-run',)
    build_tool: str = 'cargo'
    package: str = 'mold'
    max_attempts: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=5.0, ge=0)
    os_release_path: Path = Path('/etc/os-release')
    use_sudo: bool = True
    require_linker: bool = False


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    logger.debug('loading_config', config=str(config_path))
    try:
        with config_path.open() as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        msg = f'failed to parse YAML in {config_path}: {exc}'
        raise ConfigError(msg) from exc
    except OSError as exc:
        msg = f'cannot read configuration file {config_path}: {exc}'
        raise ConfigError(msg) from exc

    if not isinstance(data, dict):
        msg = f'configuration root must be a mapping in {config_path}'
        raise ConfigError(msg)

    # Settings may be nested under a top-level `moldrun` key
    section = data.get('moldrun', data)
    if not isinstance(section, dict):
        msg = f'"moldrun" section must be a mapping in {config_path}'
        raise ConfigError(msg)
    return section


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Pick the configuration file to load, if any.

    An explicit path or the environment variable must point at an existing
    file; the default file in the working directory is optional.
    """
    explicit = config_path
    if explicit is None and os.environ.get(CONFIG_ENV_VAR):
        explicit = Path(os.environ[CONFIG_ENV_VAR])

    if explicit is not None:
        if not explicit.exists():
            msg = f'configuration file not found: {explicit}'
            raise ConfigError(msg)
        return explicit

    default = Path.cwd() / DEFAULT_CONFIG_FILENAME
    return default if default.exists() else None


def load_settings(config_path: Path | None = None) -> RunnerSettings:
    """Load runner settings, falling back to defaults when no file is present."""
    path = resolve_config_path(config_path)
    if path is None:
        return RunnerSettings()

    raw = _load_yaml_config(path)
    try:
        settings = RunnerSettings.model_validate(raw)
    except ValidationError as exc:
        errors = '; '.join(
            f'{".".join(str(part) for part in err["loc"]) or "<root>"}: {err["msg"]}' for err in exc.errors()
        )
        msg = f'invalid configuration in {path}: {errors}'
        raise ConfigError(msg) from exc

    logger.info('loaded_config', config=str(path), _verbose_settings=settings.model_dump(mode='json'))
    return settings
