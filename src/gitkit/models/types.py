"""Core data models for git-kit."""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, Field, field_validator


def branch_key(branch: str, repo: str) -> str:
    """Composite primary key for a branch: ``{repo}-{branch}``."""
    return f"{repo.strip()}-{branch.strip()}"


def none_if_empty(value: Optional[str]) -> Optional[str]:
    """Trim a value and collapse blank strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class Branch(BaseModel):
    """
    A branch checked out through git-kit.

    Stores the ticket context (ticket number, scope and link) used to fill
    commit templates for every commit made on the branch.
    """

    name: str = Field(..., description="Composite key '{repo}-{branch}'")
    ticket: Optional[str] = Field(None, description="Issue ticket number")
    data: Optional[bytes] = None
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    link: Optional[str] = Field(None, description="Issue ticket link")
    scope: Optional[str] = Field(None, description="Section of the codebase")

    @field_validator('created')
    @classmethod
    def created_as_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def new(
        cls,
        branch: str,
        repo: str,
        ticket: Optional[str] = None,
        link: Optional[str] = None,
        scope: Optional[str] = None
    ) -> 'Branch':
        """Create a branch record keyed by repository and branch name."""
        return cls(
            name=branch_key(branch, repo),
            ticket=none_if_empty(ticket),
            link=none_if_empty(link),
            scope=none_if_empty(scope),
        )


class ConfigKind(str, Enum):
    DEFAULT = "default"
    USER = "user"
    LOCAL = "local"
    ONCE = "once"


class ConfigKey(BaseModel):
    """
    Identifies a template configuration file.

    ``default`` is the bundled config, ``local`` a repository's own
    ``.git-kit.yml``, ``once`` a path given on the command line and any other
    name a user registered config.
    """

    kind: ConfigKind
    name: str

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, value: Union[str, 'ConfigKey']) -> 'ConfigKey':
        if isinstance(value, ConfigKey):
            return value
        value = value.strip()
        lowered = value.lower()
        for kind in (ConfigKind.DEFAULT, ConfigKind.LOCAL, ConfigKind.ONCE):
            if lowered == kind.value:
                return cls(kind=kind, name=kind.value)
        return cls(kind=ConfigKind.USER, name=value)

    @classmethod
    def default(cls) -> 'ConfigKey':
        return cls(kind=ConfigKind.DEFAULT, name=ConfigKind.DEFAULT.value)

    @property
    def is_reserved(self) -> bool:
        return self.kind != ConfigKind.USER

    def __str__(self) -> str:
        return self.name


class ConfigStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class Config(BaseModel):
    """A registered template configuration file."""

    key: ConfigKey
    path: Path
    status: ConfigStatus = ConfigStatus.DISABLED

    @field_validator('key', mode='before')
    @classmethod
    def parse_key(cls, v):
        """Accept plain strings for the key."""
        if isinstance(v, str):
            return ConfigKey.parse(v)
        return v

    @property
    def is_active(self) -> bool:
        return self.status == ConfigStatus.ACTIVE


class TemplateConfig(BaseModel):
    """A single named commit template."""

    description: str = ""
    content: str


class CommitConfig(BaseModel):
    templates: Dict[str, TemplateConfig] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """Contents of a git-kit YAML configuration file."""

    commit: CommitConfig = Field(default_factory=CommitConfig)

    def template_names(self) -> List[str]:
        return sorted(self.commit.templates)

    def describe_templates(self) -> List[Tuple[str, str]]:
        """(name, description) for every template, sorted by name."""
        return [
            (name, self.commit.templates[name].description)
            for name in self.template_names()
        ]

    def get_template(self, name: str) -> Optional[TemplateConfig]:
        return self.commit.templates.get(name)


class CommitMsgStatus(str, Enum):
    """Whether the rendered commit message is final or still needs editing."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
