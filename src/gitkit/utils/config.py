"""Configuration management for git-kit."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError as SchemaError

from ..models.types import AppConfig, ConfigKey, ConfigKind
from ..templates import template_path
from .errors import ConfigurationError, NotFoundError, ValidationError
from .logger import Logger

APP_NAME = "git-kit"
CONFIG_FILE_NAME = ".git-kit.yml"
DB_FILE_NAME = "db"

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Runtime settings, built once per invocation and passed explicitly."""
    config_dir: Path = field(default_factory=lambda: Path(click.get_app_dir(APP_NAME)))
    interactive: bool = True
    verbose: bool = False
    debug: bool = False
    log_file: Optional[Path] = None

    @property
    def db_path(self) -> Path:
        return self.config_dir / DB_FILE_NAME

    @classmethod
    def from_env(cls) -> 'Settings':
        """Create settings from environment variables."""
        config_dir = os.getenv("GIT_KIT_CONFIG_DIR")
        log_file = os.getenv("GIT_KIT_LOG_FILE")

        settings = cls(
            interactive=(
                not _env_flag("GIT_KIT_NO_INTERACTIVE")
                and sys.stdin is not None and sys.stdin.isatty()
            ),
            debug=_env_flag("GIT_KIT_DEBUG"),
            log_file=Path(log_file) if log_file else None,
        )
        if config_dir:
            settings.config_dir = Path(config_dir).expanduser()

        return settings


def local_config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILE_NAME


def resolve_config_path(
    user_config: Optional[Path],
    repo_root: Optional[Path],
    store=None
) -> Tuple[ConfigKey, Path]:
    """
    Pick the config file in effect.

    Precedence: explicit ``--config`` path, the repository's own
    ``.git-kit.yml``, the active registered config, the bundled default.
    """
    if user_config is not None:
        Logger.info("⏳ Loading user config...")
        if not user_config.exists():
            raise ValidationError(
                f"Invalid config file path does not exist at '{user_config}'"
            )
        return ConfigKey(kind=ConfigKind.ONCE, name=ConfigKind.ONCE.value), user_config

    if repo_root is not None:
        local = local_config_path(repo_root)
        if local.exists():
            Logger.info("⏳ Loading local repo config...")
            return ConfigKey(kind=ConfigKind.LOCAL, name=ConfigKind.LOCAL.value), local

    if store is not None:
        try:
            active = store.get_configuration()
        except NotFoundError:
            active = None

        if active is not None and active.key.kind != ConfigKind.DEFAULT:
            if active.path.exists():
                Logger.info(f"⏳ Loading '{active.key}' config...")
                return active.key, active.path
            Logger.warning(
                f"Active config '{active.key}' is missing at '{active.path}', using default"
            )

    Logger.info("⏳ Loading global config...")
    return ConfigKey.default(), template_path()


def load_app_config(path: Path) -> AppConfig:
    """Parse a git-kit YAML config file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Failed to read config '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to load '{path}' please ensure yaml is valid: {e}"
        ) from e

    try:
        return AppConfig.model_validate(data)
    except SchemaError as e:
        raise ConfigurationError(f"Invalid config '{path}': {e}") from e
