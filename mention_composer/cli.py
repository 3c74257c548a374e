"""Command-line interface for mention-composer."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings

from .composer import MentionComposer
from .console import console
from .exceptions import MentionComposerError
from .known_users import load_known_users
from .models import MentionableUser
from .processing import extract_mentions
from .processing import process_mentions
from .protocol import SuggestionSourceProtocol
from .renderer import render_segments
from .settings import ComposerSettings
from .settings import SettingsLoader
from .sources import HttpSuggestionSource
from .sources import StaticSuggestionSource
from .ui import MentionCompleter
from .ui import highlight_segments
from .ui import mention_summary
from .ui import suggestion_table

logger = logging.getLogger(__name__)

users_option = click.option(
    "--users",
    "users_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML/JSON snapshot of workspace members (defaults to settings.known_users_file)",
)


def _setup_logging(level: str) -> None:
    """Configure root logging once for the CLI process."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.WARNING),
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _known_users(settings: ComposerSettings, users_file: Path | None) -> list[MentionableUser]:
    path = users_file or settings.known_users_file
    if path is None:
        return []
    return load_known_users(Path(path).expanduser())


def _build_source(settings: ComposerSettings, users: list[MentionableUser]) -> SuggestionSourceProtocol:
    """HTTP search when an endpoint is configured, else the local snapshot."""
    if settings.search_url and settings.workspace_id:
        logger.debug(f"Using HTTP member search at {settings.search_url}")
        return HttpSuggestionSource(
            settings.search_url,
            settings.workspace_id,
            api_key=settings.api_key,
            limit=settings.max_suggestions,
            timeout=settings.search_timeout,
        )
    return StaticSuggestionSource(users, limit=settings.max_suggestions)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--search-url", default=None, help="REST root for HTTP member search")
@click.option("--workspace", "workspace_id", default=None, help="Workspace ID for HTTP member search")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, search_url: str | None, workspace_id: str | None) -> None:
    """Compose, search and render @mentions of workspace members."""
    try:
        settings = SettingsLoader().load(search_url=search_url, workspace_id=workspace_id)
    except MentionComposerError as e:
        raise click.ClickException(str(e)) from e

    _setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.command()
@click.argument("text")
@users_option
@click.pass_obj
def render(settings: ComposerSettings, text: str, users_file: Path | None) -> None:
    """Render TEXT with mentions resolved against the known users."""
    try:
        users = _known_users(settings, users_file)
    except MentionComposerError as e:
        raise click.ClickException(str(e)) from e

    console.print(highlight_segments(render_segments(text, users)))


@cli.command()
@click.argument("text")
@users_option
@click.pass_obj
def extract(settings: ComposerSettings, text: str, users_file: Path | None) -> None:
    """List the handles mentioned in TEXT, and the users they match."""
    try:
        users = _known_users(settings, users_file)
    except MentionComposerError as e:
        raise click.ClickException(str(e)) from e

    handles = extract_mentions(text)
    if not handles:
        console.print("[dim]No mentions found[/dim]")
        return

    for handle in handles:
        console.print(f"@{handle}")

    if users:
        matched = asyncio.run(process_mentions(text, users, excerpt_length=settings.excerpt_length))
        console.print(mention_summary(matched))


@cli.command()
@click.argument("query")
@users_option
@click.pass_obj
def search(settings: ComposerSettings, query: str, users_file: Path | None) -> None:
    """Show the suggestion panel for QUERY."""
    try:
        users = _known_users(settings, users_file)
    except MentionComposerError as e:
        raise click.ClickException(str(e)) from e

    composer = MentionComposer(
        _build_source(settings, users),
        search_timeout=settings.search_timeout,
        trigger_on_empty_query=settings.trigger_on_empty_query,
    )
    asyncio.run(composer.update(f"@{query.lstrip('@')}"))

    if not composer.is_open:
        console.print(f"[dim]No users match '{query}'[/dim]")
        return
    console.print(suggestion_table(composer.suggestions, composer.selected_index))


def _create_prompt_session(completer: MentionCompleter) -> PromptSession:
    """Create the compose prompt.

    Enter submits, Ctrl-J inserts a newline, completions appear while typing.
    """
    kb = KeyBindings()

    @kb.add("c-j")
    def insert_newline(event):
        """Insert newline character for multi-line input."""
        event.current_buffer.insert_text("\n")

    @kb.add("enter")
    def accept_input(event):
        """Accept the current completion if one is highlighted, else submit."""
        buffer = event.current_buffer
        state = buffer.complete_state
        if state and state.current_completion:
            buffer.apply_completion(state.current_completion)
            return
        buffer.validate_and_handle()

    return PromptSession(
        message=HTML("<ansigreen><b>comment&gt;</b></ansigreen> "),
        history=InMemoryHistory(),
        completer=completer,
        complete_while_typing=True,
        complete_in_thread=False,
        key_bindings=kb,
        multiline=True,
    )


@cli.command()
@users_option
@click.pass_obj
def compose(settings: ComposerSettings, users_file: Path | None) -> None:
    """Write a comment interactively with @mention completion."""
    try:
        users = _known_users(settings, users_file)
    except MentionComposerError as e:
        raise click.ClickException(str(e)) from e

    asyncio.run(_compose(settings, users))


async def _compose(settings: ComposerSettings, users: list[MentionableUser]) -> None:
    composer = MentionComposer(
        _build_source(settings, users),
        search_timeout=settings.search_timeout,
        trigger_on_empty_query=settings.trigger_on_empty_query,
    )
    session = _create_prompt_session(MentionCompleter(composer))
    console.print("[dim]Type @ to mention team members. Ctrl-J for newline, Ctrl-D to quit.[/dim]")

    while True:
        try:
            text = await session.prompt_async()
        except (EOFError, KeyboardInterrupt):
            break
        if not text.strip():
            continue

        console.print(highlight_segments(render_segments(text, users)))
        mentioned = await process_mentions(text, users, excerpt_length=settings.excerpt_length)
        console.print(mention_summary(mentioned))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
