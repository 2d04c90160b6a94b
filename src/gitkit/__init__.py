"""
git-kit - git cli containing templates & utilities
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Checkout branches with a ticket number as context and commit staged changes
with template messages that pick that context up.

Basic usage:
    $ git-kit checkout feature/login --ticket JIRA-12
    $ git-kit commit feature --message "add login form"

:license: MIT
"""

__version__ = "0.1.0"

from .core.actions import Actions
from .core.template import render_commit_message, replace_or_remove
from .models.types import Branch, Config, ConfigKey, ConfigStatus

__all__ = [
    "Actions",
    "Branch",
    "Config",
    "ConfigKey",
    "ConfigStatus",
    "render_commit_message",
    "replace_or_remove",
]
