"""
Main CLI application using Typer.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig
from ..domain.exceptions import ToolkitError
from ..services.toolkit import ToolkitService

app = typer.Typer(
    name="baworkflow",
    help="Working-day, sprint, fiscal and timezone calculations for BA workflows",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    BA workflow calculation tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = {"config_file": config_file}


def _load_service(ctx: typer.Context) -> ToolkitService:
    """Build the toolkit service from the effective configuration."""
    config_file = (ctx.obj or {}).get("config_file")
    try:
        config = AppConfig.from_sources(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    return ToolkitService.from_config(config)


def _invoke(service: ToolkitService, name: str, arguments: Dict[str, Any]) -> Any:
    """Run a tool for a convenience command, exiting on failure."""
    try:
        return service.invoke(name, arguments)
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def tools(ctx: typer.Context):
    """
    List the registered tools.
    """
    service = _load_service(ctx)

    table = Table(
        title="Registered Tools",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name", style="bold yellow", no_wrap=True)
    table.add_column("Description", style="dim")

    for tool in service.list_tools():
        table.add_row(tool["name"], tool["description"])

    console.print()
    console.print(table)
    console.print()


@app.command()
def call(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Tool name, e.g. calculate_working_days")],
    args: Annotated[str, typer.Option("--args", "-a", help="Tool arguments as a JSON object")] = "{}",
):
    """
    Call a single tool and print its result.

    Examples:

        baworkflow call calculate_working_days --args '{"startDate": "2024-12-23", "endDate": "2024-12-27"}'
        baworkflow call text_utilities --args '{"operation": "word_count", "text": "one two"}'
    """
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        console.print(f"[bold red]Error:[/bold red] --args is not valid JSON: {e}")
        raise typer.Exit(1)

    if not isinstance(arguments, dict):
        console.print("[bold red]Error:[/bold red] --args must be a JSON object")
        raise typer.Exit(1)

    service = _load_service(ctx)
    result = service.call_tool(name, arguments)

    if result.is_error:
        console.print(result.text, style="bold red", markup=False, highlight=False)
        raise typer.Exit(1)

    typer.echo(result.text)


def handle_request(service: ToolkitService, line: str) -> Dict[str, Any]:
    """
    Answer one JSON-lines request.

    Requests look like {"id": 1, "method": "tools/call", "params": {"name": ..., "arguments": {...}}}.
    """
    try:
        request = json.loads(line)
    except json.JSONDecodeError as e:
        return _error_response(None, "invalid_request", f"Malformed JSON: {e}")

    if not isinstance(request, dict):
        return _error_response(None, "invalid_request", "Request must be a JSON object")

    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if method == "tools/list":
        return {"id": request_id, "result": {"tools": service.list_tools()}}

    if method == "tools/call":
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return _error_response(request_id, "invalid_request", "params.name is required")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return _error_response(request_id, "invalid_request", "params.arguments must be an object")
        return {"id": request_id, "result": service.call_tool(params["name"], arguments).to_dict()}

    return _error_response(request_id, "unsupported", f"Unknown method: {method}")


def _error_response(request_id: Any, code: str, message: str) -> Dict[str, Any]:
    return {"id": request_id, "error": {"code": code, "message": message}}


@app.command()
def serve(ctx: typer.Context):
    """
    Serve tools over stdin/stdout, one JSON request per line.
    """
    service = _load_service(ctx)
    logger.info("Serving %d tools on stdio", len(service.tool_names))

    for line in sys.stdin:
        if not line.strip():
            continue
        response = handle_request(service, line)
        typer.echo(json.dumps(response))


@app.command("working-days")
def working_days(
    ctx: typer.Context,
    start: Annotated[str, typer.Argument(help="Start date (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="End date (YYYY-MM-DD)")],
):
    """
    Count working days between two dates, inclusive.
    """
    service = _load_service(ctx)
    result = _invoke(service, "calculate_working_days", {"startDate": start, "endDate": end})
    console.print(
        f"[bold green]{result['workingDays']}[/bold green] working day(s) "
        f"from {result['startDate']} to {result['endDate']}"
    )


@app.command()
def sprints(
    ctx: typer.Context,
    start: Annotated[str, typer.Argument(help="Sprint 1 start date (YYYY-MM-DD)")],
    count: Annotated[int, typer.Option("--count", "-n", help="Number of sprints")] = 4,
    length: Annotated[Optional[int], typer.Option("--length", "-l", help="Sprint length in weeks")] = None,
):
    """
    Lay out a series of back-to-back sprints.
    """
    service = _load_service(ctx)
    result = _invoke(service, "calculate_sprint_dates", {
        "sprintStart": start,
        "sprintLength": length,
        "numberOfSprints": count,
    })

    table = Table(
        title=f"Sprints ({result['sprintLength']})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Sprint", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Working Days", justify="right")

    for sprint in result["sprints"]:
        table.add_row(
            str(sprint["sprintNumber"]),
            sprint["startDate"],
            sprint["endDate"],
            str(sprint["workingDays"]),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def release(
    ctx: typer.Context,
    start: Annotated[str, typer.Argument(help="Start date (YYYY-MM-DD)")],
    points: Annotated[float, typer.Argument(help="Story points remaining")],
    velocity: Annotated[float, typer.Argument(help="Points completed per sprint")],
    length: Annotated[Optional[int], typer.Option("--length", "-l", help="Sprint length in weeks")] = None,
):
    """
    Project a release date from the remaining backlog and team velocity.
    """
    service = _load_service(ctx)
    result = _invoke(service, "calculate_release_date", {
        "startDate": start,
        "storyPointsRemaining": points,
        "teamVelocity": velocity,
        "sprintLength": length,
    })

    console.print(Panel.fit(
        f"[bold]Estimated release:[/bold] {result['estimatedReleaseDate']}\n"
        f"[bold]Sprints needed:[/bold] {result['sprintsNeeded']}\n"
        f"[bold]Weeks needed:[/bold] {result['weeksNeeded']}\n"
        f"[bold]Working days:[/bold] {result['workingDaysNeeded']}",
        title="Release Projection"
    ))


@app.command()
def fiscal(
    ctx: typer.Context,
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    start_month: Annotated[Optional[int], typer.Option("--start-month", help="Fiscal year start month (1-12)")] = None,
):
    """
    Show the fiscal year and quarter a date falls in.
    """
    service = _load_service(ctx)
    result = _invoke(service, "calculate_fiscal_quarter", {
        "date": date,
        "fiscalYearStart": start_month,
    })

    console.print(Panel.fit(
        f"[bold]Fiscal year:[/bold] {result['fiscalYear']}\n"
        f"[bold]Quarter:[/bold] {result['quarter']} "
        f"({result['quarterStart']} to {result['quarterEnd']})\n"
        f"[bold]Fiscal year end:[/bold] {result['fiscalYearEnd']}",
        title=f"Fiscal Period for {result['date']}"
    ))


@app.command()
def convert(
    ctx: typer.Context,
    time: Annotated[str, typer.Argument(help="Time (HH:MM, 24-hour)")],
    from_timezone: Annotated[str, typer.Argument(help="Source timezone, e.g. GMT")],
    to_timezone: Annotated[str, typer.Argument(help="Target timezone, e.g. AEST")],
):
    """
    Convert a wall-clock time between timezones.
    """
    service = _load_service(ctx)
    result = _invoke(service, "convert_timezone", {
        "time": time,
        "fromTimezone": from_timezone,
        "toTimezone": to_timezone,
    })
    console.print(
        f"{result['originalTime']} {result['originalTimezone']} = "
        f"[bold green]{result['convertedTime']} {result['convertedTimezone']}[/bold green] "
        f"({result['note']})"
    )


def _parse_participant(value: str) -> Dict[str, Any]:
    """
    Parse NAME:TZ or NAME:TZ:START-END into a participant argument object.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise typer.BadParameter(f"Expected NAME:TZ[:START-END], got '{value}'")

    participant: Dict[str, Any] = {"name": parts[0], "timezone": parts[1]}
    if len(parts) == 3:
        hours = parts[2].split("-")
        if len(hours) != 2 or not all(hour.isdigit() for hour in hours):
            raise typer.BadParameter(f"Expected available hours as START-END, got '{parts[2]}'")
        participant["availableHours"] = [int(hour) for hour in hours]
    return participant


@app.command()
def meeting(
    ctx: typer.Context,
    participants: Annotated[List[str], typer.Argument(help="Participants as NAME:TZ or NAME:TZ:START-END, e.g. alice:EST:9-17")],
):
    """
    Find meeting times that fall inside every participant's working hours.
    """
    participant_args = [_parse_participant(value) for value in participants]
    service = _load_service(ctx)
    try:
        suggestions = service.find_meetings(participant_args)
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not suggestions:
        console.print("[yellow]No meeting time suits every participant.[/yellow]")
        return

    console.print(f"[bold green]{len(suggestions)} suitable meeting time(s):[/bold green]\n")
    for suggestion in suggestions:
        console.print(f"  {suggestion.format_display()}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]baworkflow[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
