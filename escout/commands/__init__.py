"""CLI commands for escout."""

from .account import account_commands


def register_commands(app):
    """Register all CLI command groups with the Flask app."""
    app.cli.add_command(account_commands)
