"""Rich display utilities for the sysflow CLI."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sysflow.core.schemas import StepStatus, Workflow, WorkflowResult

console = Console()

STATUS_COLORS = {
    StepStatus.SUCCEEDED.value: "green",
    StepStatus.FAILED.value: "red",
    StepStatus.SKIPPED.value: "yellow",
}


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]✗[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]⚠[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[bold blue]ℹ[/] {message}")


def print_json(data: Any) -> None:
    """Print data as pretty JSON, bypassing Rich so output stays parseable."""
    print(json.dumps(data, indent=2, default=str))


def workflow_summary(path: Path, workflow: Workflow) -> dict[str, Any]:
    """Metadata reported by `list` for one workflow."""
    item: dict[str, Any] = {
        "path": str(path),
        "name": workflow.name,
        "steps": len(workflow.steps),
    }
    if workflow.description:
        item["description"] = workflow.description
    if workflow.version:
        item["version"] = workflow.version
    triggers = workflow.trigger_descriptions()
    if triggers:
        item["triggers"] = triggers
    return item


def print_workflow_list(
    workflows: list[tuple[Path, Workflow]],
    directory: Path,
    verbose: bool = False,
) -> None:
    """Print a table of workflows."""
    if not workflows:
        print_info(f"No workflows found in {escape(str(directory))}")
        console.print("  Create one with [cyan]sysflow new <name>[/]")
        return

    table = Table(title=f"Workflows ({len(workflows)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Steps", justify="right")
    if verbose:
        table.add_column("Version")
        table.add_column("Triggers")
        table.add_column("Path", style="dim")

    for path, wf in workflows:
        row = [escape(wf.name), escape(wf.description or "-"), str(len(wf.steps))]
        if verbose:
            row.extend([
                escape(wf.version or "-"),
                escape(", ".join(wf.trigger_descriptions()) or "-"),
                escape(str(path)),
            ])
        table.add_row(*row)

    console.print(table)


def print_workflow_header(workflow: Workflow) -> None:
    """Print name, description and step count of a workflow."""
    console.print(f"[bold]Workflow:[/] {escape(workflow.name)}")
    if workflow.description:
        console.print(f"[bold]Description:[/] {escape(workflow.description)}")
    console.print(f"[bold]Steps:[/] {len(workflow.steps)}")
    console.print()


def print_run_result(result: WorkflowResult, verbose: bool = False) -> None:
    """Print workflow run result."""
    executed = sum(1 for s in result.steps if s.status != StepStatus.SKIPPED)
    mode = " [dim](dry run)[/]" if result.dry_run else ""
    body = (
        f"[bold]Workflow:[/] {escape(result.workflow)}{mode}\n"
        f"[bold]Duration:[/] {result.duration_ms / 1000:.2f}s\n"
        f"[bold]Steps:[/] {executed}/{len(result.steps)}"
    )

    console.print()
    if result.success:
        console.print(
            Panel(
                f"[bold green]Workflow completed successfully![/]\n\n{body}",
                title="[bold green]✓ Success[/]",
                border_style="green",
            )
        )
    else:
        headline = "Workflow cancelled!" if result.cancelled else "Workflow failed!"
        console.print(
            Panel(
                f"[bold red]{headline}[/]\n\n{body}",
                title="[bold red]✗ Failed[/]",
                border_style="red",
            )
        )

    if verbose or not result.success:
        table = Table()
        table.add_column("Step", style="cyan")
        table.add_column("Status")
        table.add_column("Attempts", justify="right")
        table.add_column("Duration", justify="right")
        table.add_column("Error")

        for step in result.steps:
            color = STATUS_COLORS.get(step.status, "white")
            table.add_row(
                escape(step.name),
                f"[{color}]{step.status}[/]",
                str(step.attempts) if step.status != StepStatus.SKIPPED else "-",
                f"{step.duration_ms / 1000:.2f}s",
                escape(f"[{step.error.kind}] {step.error.message}") if step.error else "-",
            )

        console.print(table)

    for step in result.steps:
        if verbose and step.stdout.strip():
            console.print(f"\n[bold]{escape(step.name)} output:[/]")
            console.print(step.stdout.rstrip(), markup=False, highlight=False)
        if step.error and step.stderr.strip():
            console.print(f"\n[bold red]{escape(step.name)} errors:[/]")
            console.print(step.stderr.rstrip(), markup=False, highlight=False)

    if result.error:
        console.print(f"\n[bold red]Error:[/] {escape(result.error)}")


def print_workflow_created(path: Path) -> None:
    """Print workflow creation success."""
    console.print()
    console.print(
        Panel(
            f"[bold green]Workflow created successfully![/]\n\n"
            f"[bold]Path:[/] {escape(str(path))}\n\n"
            f"[dim]Next steps:[/]\n"
            f"  1. Edit [cyan]{escape(str(path))}[/] to define your steps\n"
            f"  2. Run [cyan]sysflow validate {escape(str(path))}[/] to check it\n"
            f"  3. Run [cyan]sysflow run {escape(str(path))} --dry-run[/] to simulate\n"
            f"  4. Run [cyan]sysflow run {escape(str(path))}[/] to execute",
            title="[bold]sysflow[/]",
            border_style="green",
        )
    )
