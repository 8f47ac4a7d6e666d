"""Entry point for the keep-alive engine."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from keepalive.config import settings
from keepalive.engine.models import LogEntry, TriggerKind
from keepalive.engine.pipeline import KeepAliveEngine
from keepalive.storage.kv import SQLiteKVStore, StoreError

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def _make_engine() -> tuple[SQLiteKVStore, KeepAliveEngine]:
    store = SQLiteKVStore(settings.kv_db_path)
    engine = KeepAliveEngine(
        store,
        user_agent=settings.user_agent,
        timezone=settings.display_timezone,
    )
    return store, engine


def _render_entry(entry: LogEntry) -> Table:
    table = Table(title=f"{entry.timestamp}  [{entry.trigger.value}]")
    table.add_column("URL")
    table.add_column("Result")
    table.add_column("Attempts", justify="right")
    table.add_column("Detail")
    for r in entry.results:
        if r.ok:
            table.add_row(r.url, "[green]OK[/green]", str(r.attempts), f"{r.status} in {r.elapsedMs}ms")
        else:
            table.add_row(r.url, "[red]FAIL[/red]", str(r.attempts), r.error or "")
    return table


def run_server() -> None:
    """Start the FastAPI server (manual trigger + cron scheduler)."""
    console.print(Panel("Starting Keep-Alive Engine", style="bold green"))
    uvicorn.run(
        "keepalive.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def run_once() -> int:
    """Run a single MANUAL execution and print the result."""
    store, engine = _make_engine()
    try:
        with console.status("[bold green]Probing targets..."):
            entry = asyncio.run(engine.execute(TriggerKind.MANUAL))
    except StoreError as e:
        console.print(f"[bold red]Store error:[/bold red] {e}")
        return 1
    finally:
        store.close()

    if entry is None:
        console.print("[yellow]No targets configured — nothing executed.[/yellow]")
        return 0
    console.print(_render_entry(entry))
    return 0 if all(r.ok for r in entry.results) else 2


def show_logs(limit: int) -> int:
    """Print the stored history, newest first."""
    store, engine = _make_engine()
    try:
        history = engine.history()
    except StoreError as e:
        console.print(f"[bold red]Store error:[/bold red] {e}")
        return 1
    finally:
        store.close()

    if not history:
        console.print("[dim]No executions recorded yet.[/dim]")
    for entry in history[:limit]:
        console.print(_render_entry(entry))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Keep-Alive Engine")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the API server with the scheduled trigger")
    sub.add_parser("run", help="Probe all targets once (manual trigger)")

    logs_parser = sub.add_parser("logs", help="Show recorded executions")
    logs_parser.add_argument("-n", "--limit", type=int, default=14, help="Entries to show")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "run":
        sys.exit(run_once())
    elif args.command == "logs":
        sys.exit(show_logs(args.limit))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
