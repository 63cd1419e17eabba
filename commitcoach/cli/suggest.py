"""CLI command for printing suggestions without committing."""

import typer

from commitcoach.cli.utils import create_app, render_suggestions, suggestions_to_json
from commitcoach.exceptions import CommitCoachError


def suggest_command(
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the suggestions as a JSON array",
    ),
    regenerate: bool = typer.Option(
        False,
        "--regenerate",
        "-r",
        help="Ignore cached suggestions and ask the provider again",
    ),
) -> None:
    """Print three commit message suggestions for the staged changes."""
    app = create_app()

    try:
        suggestions = app.generate(refresh=regenerate)
    except CommitCoachError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        app.close()

    if json_output:
        typer.echo(suggestions_to_json(suggestions))
    else:
        typer.echo(render_suggestions(suggestions))
