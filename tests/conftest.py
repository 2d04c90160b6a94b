"""Pytest configuration and fixtures."""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from gitkit.cli.prompt import Prompter, SelectItem
from gitkit.core.actions import Actions
from gitkit.git.integration import CheckoutStatus, Git
from gitkit.models.types import AppConfig, CommitMsgStatus
from gitkit.storage.sqlite import SqliteStore
from gitkit.utils.config import Settings
from gitkit.utils.errors import GitReadError, GitWriteError


class FakeGit(Git):
    """In-memory stand-in for the git subprocess facade."""

    def __init__(self, root: Path, repo: str = "git-kit", branch: str = "main"):
        self.root = root
        self.repo = repo
        self.branch = branch
        self.fail_checkout: Tuple[CheckoutStatus, ...] = ()
        self.fail_read = False
        self.checkouts: List[Tuple[str, CheckoutStatus]] = []
        self.commits: List[Tuple[str, CommitMsgStatus]] = []

    def root_directory(self) -> Path:
        if self.fail_read:
            raise GitReadError("not a git repository")
        return self.root

    def repository_name(self) -> str:
        if self.fail_read:
            raise GitReadError("not a git repository")
        return self.repo

    def branch_name(self) -> str:
        if self.fail_read:
            raise GitReadError("not a git repository")
        return self.branch

    def checkout(self, name: str, status: CheckoutStatus) -> None:
        if status in self.fail_checkout:
            raise GitWriteError(f"checkout {status.value} failed")
        self.checkouts.append((name, status))
        self.branch = name

    def template_file_path(self) -> Path:
        git_dir = self.root / ".git"
        git_dir.mkdir(exist_ok=True)
        return git_dir / "GIT_KIT_COMMIT_TEMPLATE"

    def commit_with_template(self, template: Path, status: CommitMsgStatus) -> None:
        self.commits.append((template.read_text(encoding='utf-8'), status))


class ScriptedPrompter(Prompter):
    """Answers prompts from a prepared list."""

    def __init__(self, answers: Optional[List[Optional[str]]] = None):
        self.answers = list(answers or [])
        self.questions: List[str] = []

    def select(self, question: str, options: List[SelectItem]) -> SelectItem:
        self.questions.append(question)
        answer = self.answers.pop(0)
        return next(option for option in options if option.name == answer)

    def text(self, question: str) -> Optional[str]:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else None


@pytest.fixture
def temp_repo():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def settings(temp_repo):
    """Settings pointing at a throwaway config directory."""
    return Settings(config_dir=temp_repo / "config", interactive=False)


@pytest.fixture
def store():
    """Migrated in-memory store."""
    store = SqliteStore.open(":memory:")
    yield store
    store.close()


@pytest.fixture
def git(temp_repo):
    repo_root = temp_repo / "repo"
    repo_root.mkdir()
    return FakeGit(repo_root)


@pytest.fixture
def sample_config():
    """Template config with a single template exercising every token."""
    return AppConfig.model_validate({
        "commit": {
            "templates": {
                "bug": {
                    "description": "Fix a bug",
                    "content": "[{ticket_num}] message: '{message}', scope: '{scope}', link: '{link}'",
                },
                "fix": {
                    "description": "Conventional fix",
                    "content": "fix({scope}): [{ticket_num}] {message}\n- done? [ ]",
                },
            }
        }
    })


@pytest.fixture
def actions(git, store, settings, sample_config):
    return Actions(git, store, settings, app_config=sample_config)


@pytest.fixture
def scripted_prompter():
    """Factory for prompters answering from a prepared list."""
    return ScriptedPrompter
