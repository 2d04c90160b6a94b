"""Commit template placeholder substitution."""

import re
from typing import Optional

from ..models.types import none_if_empty
from ..utils.logger import Logger

TICKET = "ticket_num"
SCOPE = "scope"
LINK = "link"
MESSAGE = "message"

# Opening/closing pairs that are removed along with an empty token.
WRAPPERS = (("[", "]"), ("(", ")"), ("{", "}"))


def _wrapped_pattern(name: str) -> re.Pattern:
    token = re.escape("{" + name + "}")
    wrapped = "|".join(
        re.escape(left) + token + re.escape(right) for left, right in WRAPPERS
    )
    return re.compile(rf"(?:{wrapped})\s?")


def replace_or_remove(template: str, name: str, value: Optional[str]) -> str:
    """
    Substitute the ``{name}`` token in a template.

    When ``value`` is present the token is replaced and any wrapper is kept,
    so ``[{ticket_num}]`` becomes ``[ABC-1]``. When it is missing or blank the
    wrapped forms ``[{name}]``, ``({name})`` and ``{{name}}`` are removed with
    one trailing whitespace character, then any bare ``{name}`` is dropped.
    """
    token = "{" + name + "}"

    if value is not None and value.strip():
        return template.replace(token, value)

    template = _wrapped_pattern(name).sub("", template)
    return template.replace(token, "")


def render_commit_message(
    template: str,
    ticket: Optional[str] = None,
    scope: Optional[str] = None,
    link: Optional[str] = None,
    message: Optional[str] = None
) -> str:
    """Fill every known token of a commit template."""
    contents = replace_or_remove(template, TICKET, none_if_empty(ticket))
    contents = replace_or_remove(contents, SCOPE, none_if_empty(scope))
    contents = replace_or_remove(contents, LINK, none_if_empty(link))
    contents = replace_or_remove(contents, MESSAGE, message)

    return contents.strip()


def merge(explicit: Optional[str], stored: Optional[str]) -> Optional[str]:
    """Prefer an explicit value, falling back to the stored one."""
    return none_if_empty(explicit) or none_if_empty(stored)


def is_complete(message: Optional[str]) -> bool:
    """A commit message counts as complete when it has non-blank text."""
    complete = none_if_empty(message) is not None
    Logger.debug(f"commit message complete: {complete}")
    return complete
