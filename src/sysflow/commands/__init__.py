"""sysflow CLI commands.

Each command module contains the business logic for a CLI command.
The cli.py module handles Typer decorators and argument parsing,
then delegates to these command functions.
"""

from sysflow.commands.list import list_command
from sysflow.commands.new import new_command
from sysflow.commands.run import run_command
from sysflow.commands.validate import validate_command

__all__ = [
    "list_command",
    "new_command",
    "run_command",
    "validate_command",
]
