"""Shared utility functions for CLI commands."""

import json
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

import typer

from commitcoach.config import ConfigError, SetupRequiredError, load_settings
from commitcoach.services.app import App, build_app
from commitcoach.suggestions.models import Suggestion

logger = logging.getLogger(__name__)


def create_app(require_api_key: bool = True) -> App:
    """Load settings and build the application, exiting on configuration errors.

    Args:
        require_api_key: Fail when a cloud provider has no API key.

    Returns:
        The assembled App.

    Raises:
        typer.Exit: If configuration is missing or invalid.
    """
    try:
        settings = load_settings(require_api_key=require_api_key)
    except SetupRequiredError as e:
        typer.echo(f"Setup required: {e}", err=True)
        raise typer.Exit(1)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    logger.info("Using provider %s with model %s", settings.provider.value, settings.model)
    return build_app(settings)


def find_editor() -> list[str]:
    """Find an available text editor.

    Preference order:
    1. $VISUAL or $EDITOR environment variable
    2. The editor set in ~/.commitcoach/config.yaml
    3. nano, then vi

    Returns:
        List of command parts to run the editor.
    """
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if editor:
        return editor.split()

    from commitcoach.global_config import GlobalConfigError, get_editor_preference

    try:
        preferred = get_editor_preference()
    except GlobalConfigError as e:
        logger.warning("Could not read editor preference: %s", e)
        preferred = None
    if preferred:
        return preferred.split()

    # noinspection PyArgumentList
    if shutil.which("nano"):
        return ["nano"]

    # Last resort: vi
    return ["vi"]


def open_editor(file_path: Path) -> None:
    """Open the file in an editor and wait for it to close.

    Args:
        file_path: Path to the file to edit.
    """
    editor_cmd = find_editor()

    typer.echo(f"Opening editor: {' '.join(editor_cmd)}", err=True)

    try:
        result = subprocess.run(
            editor_cmd + [str(file_path)],
            check=False,
        )

        if result.returncode != 0:
            typer.echo(f"Warning: Editor exited with code {result.returncode}", err=True)

    except FileNotFoundError:
        typer.echo(f"Error: Editor not found: {editor_cmd[0]}", err=True)
        raise typer.Exit(1)


def edit_message(message: str) -> str:
    """Let the user edit a commit message in their editor.

    Args:
        message: Initial message text.

    Returns:
        The text as saved by the user.
    """
    fd, path = tempfile.mkstemp(prefix="commitcoach-edit-", suffix=".txt")
    message_file = Path(path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(message + "\n")
        open_editor(message_file)
        return message_file.read_text(encoding="utf-8")
    finally:
        message_file.unlink(missing_ok=True)


def render_suggestions(suggestions: list[Suggestion]) -> str:
    """Render suggestions as a numbered list.

    Example output:
        1) feat: add provider abstraction
           Support multiple LLM backends.
           Refs: #42
    """
    lines = []
    for i, s in enumerate(suggestions, 1):
        lines.append(f"{i}) {s.type}: {s.subject}")
        for extra in (s.body, s.footer):
            if extra:
                lines.extend(f"   {line}" for line in extra.splitlines())
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def suggestions_to_json(suggestions: list[Suggestion]) -> str:
    """Render suggestions as a JSON array."""
    return json.dumps([s.model_dump() for s in suggestions], indent=2)
