"""
refdoc - documentation snippets for the linter configuration reference.

Usage:
    refdoc snippets extract
    refdoc snippets overview --full
    refdoc snippets table --container formatters
"""

import typer

from refdoc.cli import configure_logging
from refdoc.cli.commands import snippets

__version__ = "0.1.0"

app = typer.Typer(
    name="refdoc",
    help="Generate website documentation from the configuration reference",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(snippets.app, name="snippets")


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging before any command runs."""
    configure_logging(verbose)


def main():
    app()


if __name__ == "__main__":
    main()
