"""CLI for checkvist-mcp (text views and the MCP server)."""

from collections.abc import Callable
from typing import Annotated

import typer
from loguru import logger

from checkvist_mcp.errors import CheckvistError
from checkvist_mcp.logging_config import configure_logging
from checkvist_mcp.protocols import ApiProtocol

app = typer.Typer(help="Checkvist checklists as readable task trees, and an MCP server.")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = {"verbose": verbose}


def _make_api() -> ApiProtocol:
    from checkvist_mcp.api import CheckvistApi

    try:
        return CheckvistApi()
    except RuntimeError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _echo_view(render: Callable[[ApiProtocol], str]) -> None:
    """Run a view against a fresh API client, turning domain errors into exit code 1."""
    api = _make_api()
    try:
        text = render(api)
    except CheckvistError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo(text, nl=False)


MaxDepthOption = Annotated[
    int | None,
    typer.Option("--max-depth", "-m", min=0, help="Max levels of subtasks to render"),
]
IncludeClosedOption = Annotated[
    bool, typer.Option("--include-closed", "-c", help="Include closed tasks")
]
UltraCompactOption = Annotated[
    bool, typer.Option("--ultra-compact", "-u", help="Only IDs and shortened titles")
]


@app.command()
def summary(
    checklist_id: int = typer.Argument(..., help="Checklist ID"),
    max_depth: MaxDepthOption = None,
    include_closed: IncludeClosedOption = False,
    compact: bool = typer.Option(False, "--compact", help="Only status, title and ID"),
    ultra_compact: UltraCompactOption = False,
    preview: bool = typer.Option(False, "--preview", "-p", help="Top-level tasks only"),
    with_notes: bool = typer.Option(False, "--with-notes", "-n", help="Show task notes"),
) -> None:
    """Print the whole checklist as an indented tree."""
    from checkvist_mcp.mcp.server import checkvist_get_tasks_summary

    _echo_view(
        lambda api: checkvist_get_tasks_summary(
            api,
            checklist_id=checklist_id,
            max_depth=max_depth,
            include_closed=include_closed,
            compact=compact,
            ultra_compact=ultra_compact,
            preview=preview,
            with_notes=with_notes,
        )
    )


@app.command()
def tree(
    checklist_id: int = typer.Argument(..., help="Checklist ID"),
    task_id: int = typer.Argument(..., help="Task ID to start from"),
    max_depth: MaxDepthOption = None,
    include_closed: IncludeClosedOption = False,
    compact: bool = typer.Option(False, "--compact", help="Only status, title and ID"),
    ultra_compact: UltraCompactOption = False,
    with_notes: bool = typer.Option(False, "--with-notes", "-n", help="Show task notes"),
) -> None:
    """Print one task and its subtasks."""
    from checkvist_mcp.mcp.server import checkvist_get_task_tree

    _echo_view(
        lambda api: checkvist_get_task_tree(
            api,
            checklist_id=checklist_id,
            task_id=task_id,
            max_depth=max_depth,
            include_closed=include_closed,
            compact=compact,
            ultra_compact=ultra_compact,
            with_notes=with_notes,
        )
    )


@app.command()
def stats(checklist_id: int = typer.Argument(..., help="Checklist ID")) -> None:
    """Print checklist statistics and a reading recommendation."""
    from checkvist_mcp.mcp.server import checkvist_get_checklist_stats

    _echo_view(lambda api: checkvist_get_checklist_stats(api, checklist_id=checklist_id))


@app.command(name="top-level")
def top_level(checklist_id: int = typer.Argument(..., help="Checklist ID")) -> None:
    """Print the IDs of all top-level tasks."""
    from checkvist_mcp.mcp.server import checkvist_list_top_level_tasks

    _echo_view(lambda api: checkvist_list_top_level_tasks(api, checklist_id=checklist_id))


@app.command()
def page(
    checklist_id: int = typer.Argument(..., help="Checklist ID"),
    number: int = typer.Argument(1, help="Page number (1-based)"),
    max_depth: MaxDepthOption = None,
    include_closed: IncludeClosedOption = False,
    full: bool = typer.Option(False, "--full", "-f", help="Show status and metadata"),
    ultra_compact: UltraCompactOption = False,
) -> None:
    """Print one page (one top-level task with its subtasks)."""
    from checkvist_mcp.mcp.server import checkvist_get_tasks_paginated

    _echo_view(
        lambda api: checkvist_get_tasks_paginated(
            api,
            checklist_id=checklist_id,
            page=number,
            max_depth=max_depth,
            include_closed=include_closed,
            compact=not full,
            ultra_compact=ultra_compact,
        )
    )


@app.command()
def serve(ctx: typer.Context) -> None:
    """Start the MCP server (stdio transport)."""
    from checkvist_mcp.mcp.server import run_mcp_server

    run_mcp_server(verbose=ctx.obj["verbose"])
