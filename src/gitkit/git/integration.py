"""Git integration for git-kit."""

import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Union

from ..models.types import CommitMsgStatus
from ..utils.errors import GitReadError, GitWriteError
from ..utils.logger import Logger

TEMPLATE_FILE_NAME = "GIT_KIT_COMMIT_TEMPLATE"


class CheckoutStatus(str, Enum):
    NEW = "new"
    EXISTING = "existing"


class Git(ABC):
    """Operations git-kit needs from the version control tool."""

    @abstractmethod
    def root_directory(self) -> Path:
        """Root directory of the current repository."""
        pass

    @abstractmethod
    def repository_name(self) -> str:
        """Name of the current repository."""
        pass

    @abstractmethod
    def branch_name(self) -> str:
        """Name of the currently checked out branch."""
        pass

    @abstractmethod
    def checkout(self, name: str, status: CheckoutStatus) -> None:
        """Create a new branch or checkout an existing one."""
        pass

    @abstractmethod
    def template_file_path(self) -> Path:
        """Where the rendered commit message is written before committing."""
        pass

    @abstractmethod
    def commit_with_template(self, template: Path, status: CommitMsgStatus) -> None:
        """Commit staged changes, opening the editor on the template file."""
        pass


class GitIntegration(Git):
    """Runs git as a subprocess."""

    def __init__(self, repo_path: Union[str, Path] = "."):
        self.repo_path = Path(repo_path).absolute()

    def _read(self, args: List[str]) -> str:
        """Run a git command and return its trimmed stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True
            )
        except (subprocess.CalledProcessError, OSError) as e:
            stderr = getattr(e, "stderr", None) or str(e)
            Logger.debug(f"git {' '.join(args)} failed: {stderr.strip()}")
            raise GitReadError(f"Failed to read 'git {' '.join(args)}': {stderr.strip()}") from e

        return result.stdout.strip()

    def _write(self, args: List[str], quiet: bool = False) -> None:
        """Run a git command attached to the terminal."""
        Logger.info(f"git {' '.join(args)}")
        try:
            subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                check=True,
                stderr=subprocess.DEVNULL if quiet else None
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise GitWriteError(f"Failed to run 'git {' '.join(args)}'") from e

    def root_directory(self) -> Path:
        root = Path(self._read(["rev-parse", "--show-toplevel"]))
        Logger.debug(f"git root directory '{root}'")
        return root

    def repository_name(self) -> str:
        name = self.root_directory().name.strip()
        if not name:
            raise GitReadError("Failed to get repository name")

        Logger.debug(f"git repository name '{name}'")
        return name

    def branch_name(self) -> str:
        branch = self._read(["branch", "--show-current"])
        if not branch:
            raise GitReadError("Failed to get current branch name (detached HEAD?)")

        Logger.debug(f"current git branch name '{branch}'")
        return branch

    def checkout(self, name: str, status: CheckoutStatus) -> None:
        Logger.info(f"checkout '{status.value}' branch '{name}'")

        if status == CheckoutStatus.NEW:
            self._write(["checkout", "-b", name], quiet=True)
        else:
            self._write(["checkout", name])

    def template_file_path(self) -> Path:
        git_dir = Path(self._read(["rev-parse", "--absolute-git-dir"]))
        return git_dir / TEMPLATE_FILE_NAME

    def commit_with_template(self, template: Path, status: CommitMsgStatus) -> None:
        # git aborts a --template commit whose message was left unchanged.
        if status == CommitMsgStatus.COMPLETED:
            self._write(["commit", "--file", str(template), "--edit"])
        else:
            self._write(["commit", "--template", str(template)])

