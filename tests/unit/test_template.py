"""Unit tests for commit template substitution."""

import pytest
from gitkit.core.template import is_complete, merge, render_commit_message, replace_or_remove


@pytest.mark.parametrize("ticket", ["", "   ", None])
def test_empty_ticket_removes_square_brackets(ticket):
    """Test that a missing ticket drops its bracket wrapper."""
    actual = render_commit_message("[{ticket_num}] {message}", ticket=ticket, message="add x")
    assert actual == "add x"


def test_ticket_is_wrapped_when_present():
    actual = render_commit_message("[{ticket_num}] {message}", ticket="JIRA-1", message="add x")
    assert actual == "[JIRA-1] add x"


def test_plain_token_removed_without_wrapper():
    assert render_commit_message("{ticket_num} {message}", ticket="", message="add x") == "add x"


def test_empty_scope_removes_parentheses():
    actual = render_commit_message(
        "({scope}) [{ticket_num}] {message}", ticket="ABC-2", scope="", message="add x"
    )
    assert actual == "[ABC-2] add x"


def test_markdown_checklist_is_not_removed():
    """Test that unrelated empty brackets survive."""
    actual = render_commit_message(
        "fix({scope}): [{ticket_num}] {message}\n- done? [ ]",
        scope=None,
        ticket=None,
        message="add x",
    )
    assert actual == "fix: add x\n- done? [ ]"


def test_double_braces_wrapper():
    assert replace_or_remove("a {{link}} b", "link", None) == "a b"
    assert replace_or_remove("a {{link}} b", "link", "http://x") == "a {http://x} b"


def test_only_exact_token_name_matches():
    template = "[{ticket}] [{ticket_num}] {ticket_number}"
    assert replace_or_remove(template, "ticket_num", None) == "[{ticket}] {ticket_number}"


def test_regex_characters_in_value_are_literal():
    actual = replace_or_remove("[{ticket_num}] x", "ticket_num", r"\1 $a (b)")
    assert actual == r"[\1 $a (b)] x"


def test_message_replaced_with_empty_str():
    assert render_commit_message("{ticket_num} {message}", ticket="ABC-1") == "ABC-1"


def test_result_is_trimmed():
    actual = render_commit_message("\n  [{ticket_num}] {message}\n\n{link}\n", message="m")
    assert actual == "m"


def test_all_tokens_substituted():
    actual = render_commit_message(
        "[{ticket_num}] message: '{message}', scope: '{scope}', link: '{link}'",
        ticket="T-1", scope="api", link="http://t/1", message="hello",
    )
    assert actual == "[T-1] message: 'hello', scope: 'api', link: 'http://t/1'"


def test_merge_prefers_explicit_value():
    assert merge("JIRA-1", "JIRA-2") == "JIRA-1"
    assert merge("  JIRA-1 ", None) == "JIRA-1"


def test_merge_falls_back_to_stored_value():
    assert merge(None, " JIRA-2 ") == "JIRA-2"
    assert merge("   ", "JIRA-2") == "JIRA-2"
    assert merge("", "") is None
    assert merge(None, None) is None


def test_is_complete():
    assert is_complete("done")
    assert not is_complete("   ")
    assert not is_complete("")
    assert not is_complete(None)
