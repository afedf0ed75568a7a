"""Typer CLI application."""

from dataclasses import replace
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from kilo import __version__
from kilo.config import LOG_LEVELS, EditorConfig


def _print_version(value: bool) -> None:
    if value:
        Console().print(f"kilo {__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="kilo",
        help="A small character-mode screen editor. Quit with Ctrl-Q.",
        add_completion=False,
        rich_markup_mode="rich",
    )
    console = Console(stderr=True)

    @app.command()
    def edit(
        log_level: Annotated[Optional[str], typer.Option("--log-level", "-l", help=f"One of {', '.join(LOG_LEVELS)}")] = None,
        log_file: Annotated[Optional[str], typer.Option("--log-file", help="Append log records to this file")] = None,
        timeout: Annotated[Optional[int], typer.Option("--timeout", "-t", help="Key read timeout in tenths of a second")] = None,
        version: Annotated[bool, typer.Option("--version", "-V", callback=_print_version, is_eager=True, help="Show version and exit")] = False,
    ) -> None:
        """Open the editor on the controlling terminal."""
        from kilo.cli.editor.session import run_editor
        from kilo.logging_setup import setup_logging

        try:
            config = EditorConfig.from_env()
            overrides = {}
            if log_level is not None:
                overrides["log_level"] = log_level.upper()
            if log_file is not None:
                overrides["log_file"] = log_file
            if timeout is not None:
                overrides["read_timeout"] = timeout
            config = replace(config, **overrides).validate()
        except ValueError as e:
            console.print(f"[red]Invalid configuration: {escape(str(e))}[/]", highlight=False)
            raise typer.Exit(2)

        setup_logging(config.log_level, config.log_file)
        raise typer.Exit(run_editor(config))

    return app
