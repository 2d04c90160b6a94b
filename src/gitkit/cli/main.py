"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..core.actions import Actions
from ..git.integration import GitIntegration
from ..storage.migrations import DefaultConfigs, MigrationContext
from ..storage.sqlite import SqliteStore
from ..templates import CONVENTIONAL_TEMPLATES, DEFAULT_TEMPLATES, template_path
from ..utils.config import Settings
from ..utils.errors import GitKitError, MissingValueError
from ..utils.logger import Logger
from .prompt import Prompter, RichPrompter, SelectItem

console = Console()


def get_actions(ctx: click.Context) -> Actions:
    """Build the command actions, opening the store on first use."""
    obj = ctx.find_root().obj
    if 'actions' not in obj:
        settings: Settings = obj['settings']
        store = obj.get('store')
        if store is None:
            store = SqliteStore.open(
                settings.db_path,
                MigrationContext(default_configs=DefaultConfigs(
                    default=template_path(DEFAULT_TEMPLATES),
                    conventional=template_path(CONVENTIONAL_TEMPLATES),
                )),
            )
            obj["store"] = store
            # close the connection no matter if we error or not.
            ctx.find_root().call_on_close(store.close)

        obj['actions'] = Actions(
            obj.get('git') or GitIntegration(),
            store,
            settings,
            user_config=obj.get('user_config'),
        )
    return obj['actions']


def ask(ctx: click.Context, value: Optional[str], question: str) -> Optional[str]:
    """Prompt for an optional value left out on the command line."""
    obj = ctx.find_root().obj
    if value is not None or not obj['settings'].interactive:
        return value
    prompter: Prompter = obj['prompter']
    return prompter.text(question)


def choose(ctx: click.Context, value: Optional[str], name: str, question: str, options) -> str:
    """Select a required value left out on the command line."""
    if value is not None:
        return value

    obj = ctx.find_root().obj
    if not obj['settings'].interactive:
        raise MissingValueError(name)

    prompter: Prompter = obj['prompter']
    return prompter.select(question, options).name


def fail(error: Exception) -> None:
    Logger.error(str(error))
    sys.exit(1)


@click.group()
@click.option('--config', '-c', 'user_config', type=click.Path(path_type=Path),
              help='Use this config file for a single invocation')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--interactive/--no-interactive', default=None,
              help='Prompt for values left out (default: when attached to a terminal)')
@click.version_option(version=__version__, prog_name="git-kit")
@click.pass_context
def cli(ctx, user_config, verbose, debug, interactive):
    """git-kit - git cli containing templates & utilities.

    Checkout branches with ticket context and commit with template messages.
    """
    ctx.ensure_object(dict)

    settings: Settings = ctx.obj.get('settings') or Settings.from_env()
    settings.verbose = settings.verbose or verbose
    settings.debug = settings.debug or debug
    if interactive is not None:
        settings.interactive = interactive

    # Setup logging
    Logger.setup_logger(
        level=logging.INFO if settings.verbose else logging.WARNING,
        debug=settings.debug,
        log_file=settings.log_file,
    )

    ctx.obj['settings'] = settings
    ctx.obj['user_config'] = user_config
    ctx.obj.setdefault('prompter', RichPrompter())


@cli.command()
@click.argument('name')
@click.option('--ticket', '-t', help='Issue ticket number related to the branch')
@click.option('--scope', '-s', help='Section of the codebase the changes relate to')
@click.option('--link', '-l', help='Issue ticket link')
@click.pass_context
def checkout(ctx, name, ticket, scope, link):
    """Checkout an existing branch or create a new branch and add a ticket number as context for future commits."""
    try:
        ticket = ask(ctx, ticket, "Ticket")
        scope = ask(ctx, scope, "Scope")
        link = ask(ctx, link, "Link")

        branch = get_actions(ctx).checkout(name, ticket=ticket, scope=scope, link=link)
        Logger.success(f"Switched to branch '{name}'" + (f" [{branch.ticket}]" if branch.ticket else ""))
    except GitKitError as e:
        fail(e)


@cli.command()
@click.argument('ticket', required=False)
@click.option('--scope', '-s', help='Section of the codebase the changes relate to')
@click.option('--link', '-l', help='Issue ticket link')
@click.pass_context
def context(ctx, ticket, scope, link):
    """Add or update the ticket number related to the current branch."""
    try:
        ticket = ask(ctx, ticket, "Ticket")
        scope = ask(ctx, scope, "Scope")
        link = ask(ctx, link, "Link")

        branch = get_actions(ctx).context(ticket=ticket, scope=scope, link=link)

        table = Table(show_header=False, box=None)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("Ticket", escape(branch.ticket or "-"))
        table.add_row("Scope", escape(branch.scope or "-"))
        table.add_row("Link", escape(branch.link or "-"))
        console.print(table)
    except GitKitError as e:
        fail(e)


@cli.command()
@click.argument('template', required=False)
@click.option('--ticket', '-t', help='Issue ticket number related to the commit')
@click.option('--message', '-m', help='Message for the commit')
@click.option('--scope', '-s', help='Section of the codebase the changes relate to')
@click.option('--link', '-l', help='Issue ticket link')
@click.pass_context
def commit(ctx, template, ticket, message, scope, link):
    """Commit staged changes via git with a template message."""
    try:
        actions = get_actions(ctx)
        template = choose(
            ctx, template, "template", "Template:",
            [SelectItem(name, description) for name, description in actions.templates()],
        )

        contents = actions.commit(template, ticket=ticket, message=message, scope=scope, link=link)
        Logger.info(f"commit message:\n{contents}")
    except GitKitError as e:
        fail(e)


@cli.command()
@click.pass_context
def templates(ctx):
    """Display a list of configured templates."""
    try:
        actions = get_actions(ctx)
        available = actions.templates()

        table = Table(show_header=True, header_style="bold")
        table.add_column("Template", style="green")
        table.add_column("Description", style="italic")
        for name, description in available:
            table.add_row(escape(name), escape(description))

        console.print(f"Templates from [cyan]{escape(str(actions.config_key))}[/cyan] config")
        console.print(table)
    except GitKitError as e:
        fail(e)


@cli.group()
@click.pass_context
def config(ctx):
    """Manage the template config files git-kit uses."""
    pass


def local_config_warning(actions: Actions) -> None:
    if actions.local_config_in_use():
        console.print(
            "[yellow]⚠️ Warning[/yellow]: 'Active' configurations are currently overridden "
            "due to a local repo configuration being used.\n"
        )


@config.command('add')
@click.argument('name')
@click.argument('path', type=click.Path(path_type=Path))
@click.pass_context
def config_add(ctx, name, path):
    """Add / register a custom config file."""
    try:
        actions = get_actions(ctx)
        local_config_warning(actions)

        added = actions.config_add(name, path)
        Logger.success(f"{added.key} (Active)")
    except GitKitError as e:
        fail(e)


@config.command('set')
@click.argument('name', required=False)
@click.pass_context
def config_set(ctx, name):
    """Select config file to use."""
    try:
        actions = get_actions(ctx)
        local_config_warning(actions)

        name = choose(
            ctx, name, "name", "Configuration:",
            [SelectItem(str(c.key), str(c.path)) for c in actions.config_list()],
        )
        selected = actions.config_set(name)
        Logger.success(f"{selected.key} (Active)")
    except GitKitError as e:
        fail(e)


@config.command('show')
@click.pass_context
def config_show(ctx):
    """Display the current config in use."""
    try:
        actions = get_actions(ctx)
        local_config_warning(actions)

        for item in actions.config_list():
            if item.is_active:
                Logger.print(f"🟢 {item.key} (Active) ➜ '{item.path}'", style="green", markup=False)
            else:
                Logger.print(f"🔴 {item.key} ➜ '{item.path}'", markup=False)
    except GitKitError as e:
        fail(e)


@config.command('reset')
@click.pass_context
def config_reset(ctx):
    """Reset to the default config."""
    try:
        actions = get_actions(ctx)
        local_config_warning(actions)

        selected = actions.config_reset()
        Logger.success(f"Config reset to {selected.key}")
    except GitKitError as e:
        fail(e)


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        Logger.error(f"Unexpected error: {e}")
        if Logger._debug_mode:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
