"""Command-line interface for git-weekly-report."""

import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from .classifier import build_event_sets
from .config import load_config, resolve_settings
from .errors import ConfigurationError, EventDecodeError, EventSourceError
from .events import filter_raw_events_for_window, parse_events
from .forges.github import GitHubClient
from .report import format_markdown, write_report

app = typer.Typer(help="Generate weekly status reports from GitHub activity")
console = Console(stderr=True)
logger = logging.getLogger(__name__)


def main():
    """Entry point for the CLI application."""
    app()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _format_date(value: datetime) -> str:
    return f"{value.month}-{value.day}-{value.year}"


@app.command()
def generate(
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    user: str = typer.Option(
        None, "--user", "-u", help="GitHub user name (overrides config file setting)"
    ),
    token_file: Path = typer.Option(
        None, "--token-file", help="Path to a file holding a GitHub token"
    ),
    start: str = typer.Option(
        None,
        "--start",
        "-s",
        help="Start date in M-D-YYYY format. Defaults to the Monday of last week.",
    ),
    duration: str = typer.Option(
        None,
        "--duration",
        "-d",
        help="Length of the report window, e.g. 7d, 168h, 1w. Defaults to 7d.",
    ),
    endpoint: str = typer.Option(
        None, "--endpoint", help="GitHub API endpoint (for GitHub Enterprise)"
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path. The report is printed to stdout when unset.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Generate a weekly status report for a GitHub user.

    Fetches the user's public events, keeps those inside the report window
    and groups the touched issues and pull requests into Merged, Abandoned,
    Under Review, In Progress, Reviewed and Issues sections.
    """
    _setup_logging(verbose)

    try:
        config = load_config(config_file) if config_file else None
        settings = resolve_settings(
            config,
            user=user,
            token_file=str(token_file) if token_file else None,
            start=start,
            duration=duration,
            endpoint=endpoint,
            output=str(output) if output else None,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(1)

    window = settings.window
    console.print(
        f"Searching for events between {_format_date(window.start)} "
        f"and {_format_date(window.end)}"
    )

    client = GitHubClient(token=settings.token, endpoint=settings.endpoint)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(
            f"Fetching {client.get_forge_name()} events for {settings.user}...",
            total=None,
        )
        try:
            raw_events = client.list_user_events(settings.user)
        except EventSourceError as e:
            progress.remove_task(task)
            console.print(f"[red]Error fetching events:[/red] {e}")
            raise typer.Exit(1)
        progress.remove_task(task)

    try:
        in_window = parse_events(
            filter_raw_events_for_window(raw_events, window.start, window.duration)
        )
    except EventDecodeError as e:
        console.print(f"[red]Unable to parse event:[/red] {e}")
        raise typer.Exit(1)

    logger.debug(
        f"{len(in_window)} of {len(raw_events)} events fall inside the window "
        f"({client.get_api_call_count()} API calls)"
    )

    markdown = format_markdown(build_event_sets(in_window, settings.user))

    if settings.output:
        try:
            write_report(markdown, settings.output)
        except OSError as e:
            console.print(f"[red]Error writing report:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[bold green]Report written:[/bold green] {settings.output}")
    else:
        typer.echo(markdown)


@app.command()
def validate(
    config_file: Path = typer.Option(
        "config.yaml",
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """Validate the configuration file without generating a report.

    This command checks that the configuration file is properly formatted
    and that its user, dates and token settings resolve.
    """
    try:
        settings = resolve_settings(load_config(config_file))
    except ConfigurationError as e:
        console.print(f"[red]Configuration is invalid:[/red] {e}")
        raise typer.Exit(1)

    console.print("[green]Configuration is valid[/green]")
    console.print(f"\nUser: {settings.user}")
    console.print(f"Endpoint: {settings.endpoint}")
    console.print(
        f"Window: {_format_date(settings.window.start)} to "
        f"{_format_date(settings.window.end)}"
    )
    console.print(f"Output: {settings.output or 'stdout'}")
    console.print(f"Token: {'set' if settings.token else 'not set'}")


if __name__ == "__main__":
    main()
