# SPDX-License-Identifier: MIT

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from lessbyless.terminal import configuration, dose, tracker
from lessbyless.terminal.custom_typer import AliasedTyperGroup
from lessbyless.terminal.watch import scan, watch
from lessbyless.view import state as view_state

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="lessbyless - Recovery tracking in the CLI",
    no_args_is_help=True,
)
app.add_typer(tracker.app, name="tracker, tr")
app.add_typer(dose.app, name="dose, d")
app.add_typer(configuration.app, name="config, c")
app.command(name="watch, w", no_args_is_help=True)(watch)
app.command(name="scan, s")(scan)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show debug logging"),
    ] = False,
) -> None:
    """
    lessbyless - Recovery tracking in the CLI

    Global options that apply to all commands.
    """
    configure_logging(verbose)
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
