"""CLI command for committing a given message."""

import typer

from commitcoach.cli.utils import create_app
from commitcoach.exceptions import CommitCoachError
from commitcoach.suggestions.formatters import format_message
from commitcoach.suggestions.validation import accept_edit


def commit_command(
    message: str = typer.Option(
        ...,
        "--message",
        "-m",
        help="Commit message (validated as a conventional commit)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be committed without committing",
    ),
) -> None:
    """Validate a commit message and commit the staged changes with it."""
    app = create_app(require_api_key=False)

    try:
        # An empty message is rejected by the commit service itself
        if message.strip():
            message = format_message(accept_edit(message))
        result = app.commit(message, dry_run=dry_run or None)
    except CommitCoachError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(result)
