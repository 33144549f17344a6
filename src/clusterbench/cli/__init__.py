"""CLI entry point: the typer app and its subcommands."""

import typer

app = typer.Typer(
    name="clusterbench",
    help="clusterbench - benchmark clustering algorithms on recovering software structure",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .run import (  # noqa: F401, E402
    ablate as _ablate,
    compare as _compare,
    namespaces as _namespaces,
    prepare as _prepare,
    projects as _projects,
)


def main() -> None:
    app()
