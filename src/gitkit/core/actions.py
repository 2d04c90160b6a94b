"""git-kit command implementations."""

from pathlib import Path
from typing import List, Optional, Tuple

from ..git.integration import CheckoutStatus, Git
from ..models.types import AppConfig, Branch, CommitMsgStatus, Config, ConfigKey, ConfigStatus
from ..storage.sqlite import Store
from ..utils.config import Settings, load_app_config, local_config_path, resolve_config_path
from ..utils.errors import GitError, GitReadError, GitWriteError, NotFoundError, ValidationError
from ..utils.logger import Logger
from .template import is_complete, merge, render_commit_message


class Actions:
    """Checkout, context, commit and config commands."""

    def __init__(
        self,
        git: Git,
        store: Store,
        settings: Optional[Settings] = None,
        user_config: Optional[Path] = None,
        app_config: Optional[AppConfig] = None
    ):
        self.git = git
        self.store = store
        self.settings = settings or Settings()
        self.user_config = user_config
        self._app_config = app_config
        self.config_key: Optional[ConfigKey] = None

        Logger.debug(f"git-kit using config dir {self.settings.config_dir}")

    @property
    def app_config(self) -> AppConfig:
        """Template config in effect, loaded on first use."""
        if self._app_config is None:
            try:
                repo_root = self.git.root_directory()
            except GitReadError:
                repo_root = None

            self.config_key, path = resolve_config_path(self.user_config, repo_root, self.store)
            Logger.debug(f"loading '{self.config_key}' config from {path}")
            self._app_config = load_app_config(path)

        return self._app_config

    def checkout(
        self,
        name: str,
        ticket: Optional[str] = None,
        scope: Optional[str] = None,
        link: Optional[str] = None
    ) -> Branch:
        """Create or switch to a branch and store its ticket context."""
        try:
            self.git.checkout(name, CheckoutStatus.NEW)
        except GitError as e:
            Logger.info(f"failed to create new branch: {e}")
            try:
                self.git.checkout(name, CheckoutStatus.EXISTING)
            except GitError as e:
                raise GitWriteError(f"Failed to checkout branch '{name}'") from e

        repo = self.git.repository_name()

        branch = Branch.new(name, repo, ticket=ticket, link=link, scope=scope)
        self.store.persist_branch(branch)

        return branch

    def context(
        self,
        ticket: Optional[str] = None,
        scope: Optional[str] = None,
        link: Optional[str] = None
    ) -> Branch:
        """Replace the ticket context stored for the current branch."""
        repo = self.git.repository_name()
        name = self.git.branch_name()

        branch = Branch.new(name, repo, ticket=ticket, link=link, scope=scope)

        stored = self.stored_branch(name, repo)
        if stored is not None:
            branch.created = stored.created
            branch.data = stored.data

        self.store.persist_branch(branch)
        return branch

    def commit_message(
        self,
        template: str,
        ticket: Optional[str] = None,
        message: Optional[str] = None,
        scope: Optional[str] = None,
        link: Optional[str] = None,
        branch: Optional[Branch] = None
    ) -> str:
        """Render a commit message, explicit values winning over stored ones."""
        Logger.info(f"generate commit message for '{template}'")

        return render_commit_message(
            template,
            ticket=merge(ticket, branch.ticket if branch else None),
            scope=merge(scope, branch.scope if branch else None),
            link=merge(link, branch.link if branch else None),
            message=message,
        )

    def commit(
        self,
        template: str,
        ticket: Optional[str] = None,
        message: Optional[str] = None,
        scope: Optional[str] = None,
        link: Optional[str] = None
    ) -> str:
        """Commit staged changes using a named template."""
        config = self.app_config.get_template(template)
        if config is None:
            names = ", ".join(self.app_config.template_names()) or "none"
            raise ValidationError(
                f"Invalid template '{template}' given, expected one of: {names}"
            )

        branch = self.stored_branch(self.git.branch_name(), self.git.repository_name())

        contents = self.commit_message(
            config.content, ticket=ticket, message=message, scope=scope, link=link,
            branch=branch,
        )

        template_file = self.git.template_file_path()
        try:
            template_file.write_text(contents, encoding='utf-8')
        except OSError as e:
            raise GitWriteError(f"Failed to write commit template '{template_file}': {e}") from e

        status = CommitMsgStatus.COMPLETED if is_complete(message) else CommitMsgStatus.INCOMPLETE
        self.git.commit_with_template(template_file, status)

        return contents

    def templates(self) -> List[Tuple[str, str]]:
        """(name, description) of every configured template."""
        return self.app_config.describe_templates()

    def stored_branch(self, name: str, repo: str) -> Optional[Branch]:
        """Stored context for a branch, None when nothing was recorded."""
        try:
            return self.store.get_branch(name, repo)
        except NotFoundError as e:
            Logger.debug(f"{e}, continuing without ticket context")
            return None

    def config_add(self, name: str, path: Path) -> Config:
        """Register a config file and make it active."""
        path = Path(path).expanduser()
        if not path.is_file():
            raise ValidationError(f"Invalid config file path does not exist at '{path}'")

        config = Config(key=ConfigKey.parse(name), path=path.resolve(), status=ConfigStatus.DISABLED)
        self.store.persist_config(config)

        return self.store.set_active_config(config.key)

    def config_set(self, name: str) -> Config:
        """Make a registered config the active one."""
        return self.store.set_active_config(name)

    def config_reset(self) -> Config:
        """Go back to the bundled default config."""
        return self.store.set_active_config(ConfigKey.default())

    def config_list(self) -> List[Config]:
        """Registered configs, active first."""
        configs = self.store.get_configurations()
        return sorted(configs, key=lambda c: (not c.is_active, str(c.key)))

    def local_config_in_use(self) -> bool:
        """Whether the repository's own config overrides the active one."""
        try:
            return local_config_path(self.git.root_directory()).exists()
        except GitReadError:
            return False
