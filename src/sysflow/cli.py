"""sysflow CLI - Main entry point.

Commands:
- run: Execute a workflow file
- validate: Check a workflow without running it
- list: List workflows in a directory
- new: Create a workflow from the template
"""

import logging
from pathlib import Path
from typing import Annotated, Optional, get_args

import typer

from sysflow import __version__
from sysflow.commands import list_command, new_command, run_command, validate_command
from sysflow.config import LogLevel
from sysflow.discovery.display import print_error
from sysflow.engine.container import Container
from sysflow.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(
    help="sysflow - Run YAML workflows of shell commands.\n\n"
    "Steps run in order with templating, conditions, retries and timeouts.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sysflow {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Logging level: debug, info, warning, error or critical.",
        ),
    ] = None,
) -> None:
    """sysflow - Run YAML workflows of shell commands."""
    try:
        config = Container.config()
    except ConfigurationError as e:
        print_error(e.message)
        raise typer.Exit(1)

    level = (log_level or config.log_level).lower()
    if level not in get_args(LogLevel):
        print_error(f"Invalid log level: {log_level}")
        raise typer.Exit(1)

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@app.command()
def run(
    path: Annotated[str, typer.Argument(help="Path to the workflow YAML file")],
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would run without executing")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show commands, output and variables")
    ] = False,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output the result as JSON")
    ] = False,
    workdir: Annotated[
        Optional[Path],
        typer.Option("--workdir", help="Working directory for step commands"),
    ] = None,
    strict: Annotated[
        bool, typer.Option("--strict", help="Fail steps that reference unset variables")
    ] = False,
) -> None:
    """Run a workflow.

    Examples:
        sysflow run deploy.yaml
        sysflow run deploy.yaml --dry-run     # Simulate every command
        sysflow run deploy.yaml -v --strict   # Verbose, fail on unset variables
        sysflow run deploy.yaml --json        # Machine-readable result
    """
    run_command(path, dry_run, verbose, json_output, workdir, strict)


@app.command()
def validate(
    path: Annotated[str, typer.Argument(help="Path to the workflow YAML file")],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output the result as JSON")
    ] = False,
    errors_only: Annotated[
        bool, typer.Option("--errors-only", help="Only report errors, not warnings")
    ] = False,
) -> None:
    """Validate a workflow without running it.

    Examples:
        sysflow validate deploy.yaml
        sysflow validate deploy.yaml --json
    """
    validate_command(path, json_output, errors_only)


@app.command("list")
def list_cmd(
    directory: Annotated[
        Optional[Path],
        typer.Option("--dir", help="Directory to search (default: ~/.sysflow/workflows)"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show version, triggers and paths")
    ] = False,
) -> None:
    """List available workflows.

    Examples:
        sysflow list
        sysflow list --dir ./workflows -v
    """
    list_command(directory, json_output, verbose)


@app.command()
def new(
    name: Annotated[str, typer.Argument(help="Workflow name (e.g., backup, morning-routine)")],
    directory: Annotated[
        Optional[Path],
        typer.Option("--dir", help="Directory to create the file in (default: ~/.sysflow/workflows)"),
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d", help="Workflow description"),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite an existing file")
    ] = False,
    to_stdout: Annotated[
        bool, typer.Option("--stdout", help="Print the template instead of writing a file")
    ] = False,
) -> None:
    """Create a new workflow from the template.

    Examples:
        sysflow new backup -d "Nightly backup of ~/Documents"
        sysflow new backup --stdout > backup.yaml
    """
    new_command(name, directory, description, force, to_stdout)


# Alias used by entry points
cli = app

if __name__ == "__main__":
    app()
