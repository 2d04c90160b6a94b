"""Tests for the click command line interface."""

import pytest
from click.testing import CliRunner

from gitkit.cli.main import cli
from gitkit.git.integration import CheckoutStatus
from gitkit.models.types import CommitMsgStatus
from gitkit.storage.migrations import DefaultConfigs, MigrationContext
from gitkit.storage.sqlite import SqliteStore
from gitkit.templates import CONVENTIONAL_TEMPLATES, DEFAULT_TEMPLATES, template_path


@pytest.fixture
def seeded_store():
    store = SqliteStore.open(":memory:", MigrationContext(default_configs=DefaultConfigs(
        default=template_path(DEFAULT_TEMPLATES),
        conventional=template_path(CONVENTIONAL_TEMPLATES),
    )))
    yield store
    store.close()


@pytest.fixture
def invoke(settings, seeded_store, git, scripted_prompter):
    """Run the CLI against the fake git and in-memory store."""
    runner = CliRunner()

    def run(args, answers=None):
        prompter = scripted_prompter(answers)
        result = runner.invoke(cli, args, obj={
            'settings': settings,
            'store': seeded_store,
            'git': git,
            'prompter': prompter,
        })
        result.prompter = prompter
        return result

    return run


def test_checkout(invoke, git, seeded_store):
    result = invoke(['checkout', 'feature/x', '-t', 'JIRA-9'])

    assert result.exit_code == 0
    assert "Switched to branch 'feature/x' [JIRA-9]" in result.output
    assert seeded_store.get_branch('feature/x', git.repo).ticket == 'JIRA-9'


def test_checkout_failure_exits(invoke, git):
    git.fail_checkout = (CheckoutStatus.NEW, CheckoutStatus.EXISTING)

    result = invoke(['checkout', 'nope'])

    assert result.exit_code == 1
    assert "Failed to checkout branch" in result.output


def test_checkout_prompts_when_interactive(invoke, git, seeded_store):
    result = invoke(['--interactive', 'checkout', 'feature/y'], answers=['JIRA-5', None, 'http://t/5'])

    assert result.exit_code == 0
    assert result.prompter.questions == ["Ticket", "Scope", "Link"]
    branch = seeded_store.get_branch('feature/y', git.repo)
    assert branch.ticket == 'JIRA-5'
    assert branch.scope is None
    assert branch.link == 'http://t/5'


def test_context_shows_stored_values(invoke, git, seeded_store):
    result = invoke(['context', 'JIRA-3', '-s', 'cli'])

    assert result.exit_code == 0
    assert "JIRA-3" in result.output
    assert seeded_store.get_branch(git.branch, git.repo).scope == 'cli'


def test_commit_with_template(invoke, git):
    result = invoke(['commit', 'bug', '-t', 'T-1', '-m', 'fix it'])

    assert result.exit_code == 0
    assert git.commits == [("[T-1] 🐛 fix it", CommitMsgStatus.COMPLETED)]


def test_commit_without_template_non_interactive(invoke, git):
    result = invoke(['commit'])

    assert result.exit_code == 1
    assert "Missing required value" in result.output
    assert git.commits == []


def test_commit_selects_template_when_interactive(invoke, git):
    result = invoke(['--interactive', 'commit', '-m', 'new thing'], answers=['feature'])

    assert result.exit_code == 0
    assert result.prompter.questions == ["Template:"]
    assert git.commits == [("✨ new thing", CommitMsgStatus.COMPLETED)]


def test_commit_unknown_template(invoke, git):
    result = invoke(['commit', 'nope'])

    assert result.exit_code == 1
    assert "Invalid template 'nope'" in result.output


def test_commit_with_missing_user_config(invoke, temp_repo):
    result = invoke(['--config', str(temp_repo / 'missing.yml'), 'commit', 'bug'])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_templates_lists_default_config(invoke):
    result = invoke(['templates'])

    assert result.exit_code == 0
    assert "Templates from default config" in result.output
    assert "feature" in result.output


def test_config_show(invoke):
    result = invoke(['config', 'show'])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith("🟢 default (Active)")
    assert any(line.startswith("🔴 conventional") for line in lines)


def test_config_set_and_reset(invoke, seeded_store):
    result = invoke(['config', 'set', 'conventional'])
    assert result.exit_code == 0
    assert str(seeded_store.get_configuration().key) == 'conventional'

    result = invoke(['templates'])
    assert "Templates from conventional config" in result.output

    result = invoke(['config', 'reset'])
    assert result.exit_code == 0
    assert str(seeded_store.get_configuration().key) == 'default'


def test_config_set_prompts_when_interactive(invoke, seeded_store):
    result = invoke(['--interactive', 'config', 'set'], answers=['conventional'])

    assert result.exit_code == 0
    assert result.prompter.questions == ["Configuration:"]
    assert str(seeded_store.get_configuration().key) == 'conventional'


def test_config_set_unknown(invoke):
    result = invoke(['config', 'set', 'missing'])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_config_add(invoke, seeded_store, temp_repo):
    path = temp_repo / 'team.yml'
    path.write_text("commit:\n  templates: {}\n", encoding='utf-8')

    result = invoke(['config', 'add', 'team', str(path)])

    assert result.exit_code == 0
    assert "team (Active)" in result.output
    assert seeded_store.get_configuration().path == path.resolve()


def test_config_add_reserved_name(invoke, temp_repo):
    path = temp_repo / 'team.yml'
    path.write_text("commit:\n  templates: {}\n", encoding='utf-8')

    result = invoke(['config', 'add', 'default', str(path)])

    assert result.exit_code == 1
    assert "reserved" in result.output


def test_version(invoke):
    result = invoke(['--version'])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
