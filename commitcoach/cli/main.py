"""Main CLI command: interactive suggestion, selection and commit."""

import logging
from typing import Optional

import typer

from commitcoach import __version__, global_config
from commitcoach.cli.utils import create_app, edit_message, render_suggestions
from commitcoach.config import AVAILABLE_MODELS, LLMProvider
from commitcoach.exceptions import CommitCoachError
from commitcoach.git.exceptions import GitError
from commitcoach.logging_utils import configure_logging
from commitcoach.services.app import App
from commitcoach.suggestions.formatters import format_message
from commitcoach.suggestions.models import Suggestion
from commitcoach.suggestions.validation import accept_edit

logger = logging.getLogger(__name__)

MENU_PROMPT = "Select 1-3, (e)dit, (r)egenerate, (s)witch provider or (q)uit"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"commitcoach {__version__}")
        raise typer.Exit()


def confirm_send(app: App) -> bool:
    """Ask before the staged diff leaves the machine.

    When secret warnings are enabled and the staged diff contains something
    that looks like a secret, the user is told it will be redacted.

    Returns:
        True if the user agreed to send.
    """
    settings = app.settings
    if settings.redact:
        try:
            diff = app.suggest_service.git.staged_diff()
        except GitError as e:
            # Generation reports git failures properly; skip the warning here
            logger.debug("Could not read staged diff for secret check: %s", e)
            diff = ""
        if app.redactor.contains(diff):
            typer.echo(
                "Warning: the staged diff appears to contain secrets. "
                "They will be redacted before sending.",
                err=True,
            )

    return typer.confirm(
        f"Send the staged diff to {settings.provider.value} ({settings.model})?",
        default=True,
    )


def _generate(app: App, refresh: bool = False) -> list[Suggestion]:
    typer.echo("Generating suggestions...", err=True)
    return app.generate(refresh=refresh)


def _commit(app: App, message: str, dry_run: bool, assume_yes: bool) -> bool:
    """Show the final message, confirm, and commit. Returns False if declined."""
    typer.echo()
    typer.echo(message)
    typer.echo()
    if not assume_yes and not typer.confirm("Commit with this message?", default=True):
        return False

    result = app.commit(message, dry_run=dry_run)
    typer.echo(result)
    return True


def _pick(suggestions: list[Suggestion], prompt: str) -> Optional[Suggestion]:
    choice = typer.prompt(prompt, default="1")
    if choice in ("1", "2", "3"):
        return suggestions[int(choice) - 1]
    typer.echo(f"Invalid choice: {choice}", err=True)
    return None


def _choose(label: str, options: list[str], default: int = 1) -> Optional[int]:
    """Show a numbered list and return the chosen index, or None if out of range."""
    typer.echo(f"Available {label}s:")
    for i, option in enumerate(options, 1):
        typer.echo(f"  {i}. {option}")

    choice = typer.prompt(f"Select a {label} (1-{len(options)})", type=int, default=default)
    if choice < 1 or choice > len(options):
        typer.echo(f"Invalid choice: {choice}", err=True)
        return None
    return choice - 1


def switch_provider(app: App) -> bool:
    """Ask for a provider and model and make them active for this session.

    The choice is also saved to the global config when possible.

    Returns:
        True if the provider was switched.
    """
    providers = list(LLMProvider)
    current = providers.index(app.settings.provider) + 1
    index = _choose("provider", [p.value for p in providers], default=current)
    if index is None:
        return False
    provider = providers[index]

    models = AVAILABLE_MODELS[provider]
    index = _choose("model", models)
    if index is None:
        return False
    model = models[index]

    app.switch_provider(provider, model)
    try:
        global_config.set_provider_and_model(provider, model)
    except global_config.GlobalConfigError as e:
        logger.warning("Could not save provider choice: %s", e)

    typer.echo(f"✓ Using {provider.value} ({model})")
    return True


def run_interactive(app: App, dry_run: bool = False, assume_yes: bool = False) -> None:
    """Generate suggestions and loop until the user commits or quits.

    Only a failure of the first generation ends the session. Later errors
    are shown and the previous suggestions stay on screen.

    Args:
        app: The assembled application.
        dry_run: Describe the commit instead of creating it.
        assume_yes: Skip the send and commit confirmations.
    """
    if app.settings.confirm_send and not assume_yes:
        if not confirm_send(app):
            typer.echo("Aborted.")
            raise typer.Exit(0)

    try:
        suggestions = _generate(app)
    except CommitCoachError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    while True:
        typer.echo()
        typer.echo(render_suggestions(suggestions))
        typer.echo()
        choice = typer.prompt(MENU_PROMPT, default="1").strip().lower()

        try:
            if choice in ("1", "2", "3"):
                message = format_message(suggestions[int(choice) - 1])
                if _commit(app, message, dry_run, assume_yes):
                    return

            elif choice == "e":
                selected = _pick(suggestions, "Edit which suggestion (1-3)")
                if selected is None:
                    continue
                suggestion = accept_edit(edit_message(format_message(selected)))
                if _commit(app, format_message(suggestion), dry_run, assume_yes):
                    return

            elif choice == "r":
                suggestions = _generate(app, refresh=True)

            elif choice == "s":
                if switch_provider(app):
                    suggestions = _generate(app)

            elif choice == "q":
                typer.echo("Aborted.")
                return

            else:
                typer.echo(f"Invalid choice: {choice}", err=True)

        except CommitCoachError as e:
            typer.echo(f"Error: {e}", err=True)


def main_command(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v for info, -vv for debug)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be committed without committing",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompts",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Suggest conventional commit messages for staged changes and commit one."""
    configure_logging(verbose)

    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    app = create_app()
    try:
        run_interactive(app, dry_run=dry_run or app.settings.dry_run, assume_yes=yes)
    finally:
        app.close()
