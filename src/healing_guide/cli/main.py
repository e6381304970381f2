"""Command-line interface for healing-guide."""

import asyncio
import json
from pathlib import Path

import typer

from ..config.settings import load_config
from ..core.exceptions import ConfigurationError, ProviderError
from ..core.local_search import search_local
from ..core.models import RegenerationStatus
from ..core.normalizer import to_slug
from ..logger_config import setup_logging
from ..mcp.services.session import SessionService
from .output import console, print_document, print_error, print_info, print_search_outcome, print_success, print_warning

app = typer.Typer(help="Resolve described symptoms into healing guides", no_args_is_help=True)
catalog_app = typer.Typer(help="Curated catalog maintenance")
cache_app = typer.Typer(help="Inspect generated caches")
app.add_typer(catalog_app, name="catalog")
app.add_typer(cache_app, name="cache")


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path = typer.Option(
        None, "--config-dir", "-c", help="Directory with config.json and the database (default ./.healing-guide)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Load configuration and logging for every command."""
    try:
        config = load_config(config_dir)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2)

    setup_logging("DEBUG" if verbose else config.log_level, config.log_file)
    ctx.obj = {"config": config, "config_dir": config_dir}


def _session(ctx: typer.Context) -> SessionService:
    return SessionService(config=ctx.obj["config"])


def _require_query(query: str) -> str:
    query = query.strip()
    if not query:
        print_error("Query must not be empty")
        raise typer.Exit(code=2)
    return query


@app.command()
def details(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Symptom to explain"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON document"),
) -> None:
    """Show the healing guide for a symptom."""
    query = _require_query(query)

    async def _run():
        async with _session(ctx) as session:
            return await session.document_resolver.resolve(query)

    try:
        document = asyncio.run(_run())
    except ProviderError as e:
        print_error(f"Could not generate the healing guide: {e}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(document.to_payload(), ensure_ascii=False))
    else:
        print_document(document)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Free-text search"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON list"),
) -> None:
    """Search candidate symptoms."""
    query = _require_query(query)

    async def _run():
        async with _session(ctx) as session:
            return await session.candidate_resolver.search(query)

    outcome = asyncio.run(_run())
    if as_json:
        console.print_json(json.dumps(outcome.to_payload(), ensure_ascii=False))
    else:
        print_search_outcome(query, outcome)


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Beginning or fragment of a symptom name"),
    limit: int = typer.Option(5, "--limit", "-n", min=1, help="Maximum suggestions"),
) -> None:
    """Offline autocomplete over known symptom names."""
    suggestions = search_local(query, limit=limit)
    if not suggestions:
        print_info("No suggestions")
        return
    for name in suggestions:
        console.print(name)


@app.command()
def chat(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message for the healer assistant"),
) -> None:
    """Send one chat message and print the reply."""
    message = _require_query(message)

    async def _run():
        async with _session(ctx) as session:
            return await session.chat_service.send_message([], message)

    console.print(asyncio.run(_run()))


@app.command()
def regenerate(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Symptom whose cached guide should be regenerated"),
) -> None:
    """Regenerate a cached healing guide (the catalog is never overwritten)."""
    query = _require_query(query)

    async def _run():
        async with _session(ctx) as session:
            return await session.document_resolver.regenerate(query)

    status = asyncio.run(_run())
    if status is RegenerationStatus.FAILED:
        print_error(f"Regeneration failed for '{query}'")
        raise typer.Exit(code=1)
    if status is RegenerationStatus.CATALOG:
        print_warning(f"'{query}' is served from the curated catalog; nothing regenerated")
    else:
        print_success(f"Regenerated '{query}'")


@app.command()
def serve(ctx: typer.Context) -> None:
    """Run the MCP server over stdio."""
    from ..mcp.server import run_mcp_server

    asyncio.run(run_mcp_server(ctx.obj["config_dir"]))


@catalog_app.command("import")
def catalog_import(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with curated documents"),
) -> None:
    """Load curated documents into the catalog."""

    async def _run():
        async with _session(ctx) as session:
            return await session.catalog.load_from_json(path)

    try:
        written = asyncio.run(_run())
    except (ValueError, OSError) as e:
        print_error(f"Could not import {path}: {e}")
        raise typer.Exit(code=1)
    print_success(f"Imported {written} catalog documents")


@cache_app.command("show")
def cache_show(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Symptom whose cache row to show"),
) -> None:
    """Show the cached document row for a symptom, if any."""
    slug = to_slug(query)

    async def _run():
        async with _session(ctx) as session:
            return await session.cache.get(slug), session.cache

    entry, cache = asyncio.run(_run())
    if entry is None:
        print_info(f"No cache entry for '{slug}'")
        return
    state = "toxic" if cache.is_toxic(entry) else ("complete" if entry.document.is_complete else "incomplete")
    print_info(f"slug={entry.slug} name={entry.name} stored_at={entry.stored_at} state={state}")
    print_document(entry.document)


if __name__ == "__main__":
    app()
