"""CLI application for the package updater."""

import asyncio
import json
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from core.commands import PackageManagerRunner
from core.errors import InvalidConfiguration
from core.models import OutcomeStatus, UpdateSummary, UpdateRequest
from core.orchestrate import run
from core.reporting import Reporter
from core.resolve_node import NodeResolver

VERSION = "1.0.0"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


console = Console()


def format_json_output(summary: UpdateSummary) -> str:
    """Format JSON output."""
    return json.dumps(summary.to_dict(), indent=2)


def exit_code_for(summary: UpdateSummary) -> int:
    """0 when every manifest was updated or skipped, 1 otherwise."""
    if not summary.ok:
        return 1
    if any(outcome.status == OutcomeStatus.FAILED for outcome in summary.outcomes):
        return 1
    return 0


def version_callback(value: bool) -> None:
    if value:
        console.print(VERSION)
        raise typer.Exit()


app = typer.Typer(
    name="package-updater",
    help="A simple CLI tool for updating a package across many package.json files",
    add_completion=False,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Package updater - batch-update one dependency across package.json manifests."""


@app.command()
def update(
    package: str = typer.Argument(help="Name of the package to update"),
    new_version: str | None = typer.Option(
        None, "--new-version", "-n", help="Semantic version to upgrade to; does not accept ranges"
    ),
    include_dirs: str | None = typer.Option(
        None, "--include-dirs", "-i", help="Comma separated list of sub-directories to recursively search in"
    ),
    exclude_dirs: str | None = typer.Option(
        None, "--exclude-dirs", "-e", help="Comma separated list of sub-directories to ignore"
    ),
    apply: bool = typer.Option(False, "--apply", "-a", help="Apply package.json changes with an install"),
    test: bool = typer.Option(
        False, "--test", "-t", help="Run tests post-install; applies package.json changes first"
    ),
    package_manager: str = typer.Option(
        "npm",
        "--package-manager",
        "-p",
        envvar="PACKAGE_UPDATER_PACKAGE_MANAGER",
        help="Package manager to use; options are: 'npm' and 'yarn'",
    ),
    registry_url: str | None = typer.Option(
        None,
        "--registry-url",
        envvar="PACKAGE_UPDATER_REGISTRY_URL",
        help="Query this npm registry over HTTP for the latest version instead of 'npm view'",
    ),
    command_timeout: float | None = typer.Option(
        None,
        "--command-timeout",
        envvar="PACKAGE_UPDATER_COMMAND_TIMEOUT",
        help="Seconds to wait for each install/test command (default: no limit)",
    ),
    root: Path | None = typer.Option(
        None, "--root", help="Directory include/exclude paths are relative to (default: current directory)"
    ),
    format_type: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", help="Output format"),
) -> None:
    """Update a package to the specified version number. Will choose the latest version by default."""

    as_json = format_type == OutputFormat.JSON
    reporter = Reporter(console, quiet=as_json)

    try:
        request = UpdateRequest.from_options(
            package,
            new_version=new_version,
            include_dirs=include_dirs,
            exclude_dirs=exclude_dirs,
            apply=apply,
            test=test,
            package_manager=package_manager,
        )
    except InvalidConfiguration as e:
        if as_json:
            typer.echo(format_json_output(UpdateSummary(package_name=package, error=str(e))))
        else:
            console.print(f"Failed to update package: {e}", style="red", markup=False)
        raise typer.Exit(1)

    summary = asyncio.run(
        run(
            request,
            root=(root or Path.cwd()).resolve(),
            resolver=NodeResolver(registry_url=registry_url),
            runner=PackageManagerRunner(request.package_manager, timeout=command_timeout),
            reporter=reporter,
        )
    )

    if as_json:
        typer.echo(format_json_output(summary))

    raise typer.Exit(exit_code_for(summary))


if __name__ == "__main__":
    app()
