"""Bundled commit template configuration files."""

from importlib import resources
from pathlib import Path

DEFAULT_TEMPLATES = "default.yml"
CONVENTIONAL_TEMPLATES = "conventional.yml"


def template_path(filename: str = DEFAULT_TEMPLATES) -> Path:
    """Absolute path to a bundled template configuration file."""
    return Path(str(resources.files("gitkit.templates") / filename))
