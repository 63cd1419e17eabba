"""CLI entry point for commitcoach.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from commitcoach.cli.config import config_app
from commitcoach.cli.commit import commit_command
from commitcoach.cli.suggest import suggest_command
from commitcoach.cli.main import main_command

# Main application
app = typer.Typer(
    name="commitcoach",
    help="commitcoach: conventional commit suggestions for staged changes",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("suggest")(suggest_command)
app.command("commit")(commit_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "commit_command",
    "suggest_command",
    "main_command",
]
