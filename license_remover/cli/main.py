"""License Remover CLI.

Usage:
    license-remover run [OPTIONS]
    license-remover discover [OPTIONS]
    license-remover version

Exit codes: 0=queue drained, 1=configuration or discovery error,
130=interrupted. Removal errors never stop a run; affected licenses are
retried until they succeed.
"""

# Load .env file before any other imports
from pathlib import Path as _Path

from dotenv import load_dotenv

load_dotenv(_Path.cwd() / ".env")

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from .. import __version__
from ..config import Settings, get_settings
from ..core.errors import ConfigurationError, DiscoveryError
from ..core.types import Credential, RunResult
from ..observability.logger import setup_logging
from ..pipeline import ItemQueue, ProcessingLoop
from ..sources import (
    DiscoverySource,
    IdentifierFileSource,
    LicensePageSource,
    RemovalClient,
)

# Create CLI app
app = typer.Typer(
    name="license-remover",
    help="Remove free licenses from a Steam account, one request at a time",
    add_completion=False,
)

console = Console()


def _configure_logging(quiet: bool = False, verbose: bool = False, json_logs: bool = False) -> None:
    level = logging.WARNING if quiet else (logging.DEBUG if verbose else logging.INFO)
    setup_logging(
        level=level,
        json_format=json_logs,
        console=None if json_logs else console,
        force=True,
    )


@app.command()
def run(
    session_id: Annotated[str | None, typer.Option("--session-id", help="Steam sessionid (or STEAM_SESSION_ID)")] = None,
    login_secure: Annotated[str | None, typer.Option("--login-secure", help="steamLoginSecure cookie (or STEAM_LOGIN_SECURE)")] = None,
    ids_file: Annotated[Path | None, typer.Option("--ids-file", help="File with package ids, one per line")] = None,
    html: Annotated[Path | None, typer.Option("--html", help="Saved licenses page to scan instead of fetching it")] = None,
    limit: Annotated[int | None, typer.Option("--limit", min=1, help="Remove at most this many licenses")] = None,
    delay: Annotated[float | None, typer.Option("--delay", min=0, help="Seconds between requests")] = None,
    cooldown: Annotated[float | None, typer.Option("--cooldown", min=0, help="Seconds to wait after a throttle response")] = None,
    tick: Annotated[float | None, typer.Option("--tick", min=0, help="Cooldown status interval in seconds")] = None,
    backoff: Annotated[str | None, typer.Option("--backoff", help="Retry pacing: fixed or exponential")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Minimal output")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
    json_logs: Annotated[bool, typer.Option("--json-logs", help="Log JSON lines to stderr")] = False,
) -> None:
    """Discover removable licenses and remove them until none are left.

    Examples:
        license-remover run
        license-remover run --ids-file ids.txt --delay 3
        license-remover run --html licenses.html --limit 50 -q
    """
    _configure_logging(quiet=quiet, verbose=verbose, json_logs=json_logs)

    if backoff is not None and backoff not in ("fixed", "exponential"):
        console.print(f"[red]Invalid backoff: {backoff}. Use fixed or exponential.[/red]")
        raise typer.Exit(code=1)

    settings = _apply_overrides(
        get_settings(),
        steam_session_id=session_id,
        steam_login_secure=login_secure,
        request_delay=delay,
        cooldown_seconds=cooldown,
        cooldown_tick_interval=tick,
        retry_backoff=backoff,
    )

    try:
        credential = settings.credential()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    source = _build_source(settings, credential, ids_file=ids_file, html=html)

    if not quiet:
        console.print("=" * 44)
        console.print("[bold]Steam License Remover[/bold]")
        console.print(f"Source: {source.name}")
        console.print(f"Delay: {settings.request_delay}s")
        console.print(f"Cooldown: {settings.cooldown_seconds:.0f}s")
        console.print(f"Retry backoff: {settings.retry_backoff}")
        if limit:
            console.print(f"Limit: {limit}")
        console.print("=" * 44)

    try:
        result = asyncio.run(_run_removal(settings, credential, source, limit=limit, quiet=quiet))
    except DiscoveryError as e:
        console.print(f"[red]Discovery failed: {e}[/red]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted. Licenses not yet removed are still on the account.[/yellow]")
        raise typer.Exit(code=130)

    if not quiet:
        console.print("=" * 44)
        if result.total == 0:
            console.print("[green]Nothing to remove.[/green]")
        else:
            console.print(f"[green]Removed {result.removed_count}/{result.total} licenses.[/green]")
        console.print("=" * 44)


@app.command()
def discover(
    session_id: Annotated[str | None, typer.Option("--session-id", help="Steam sessionid (or STEAM_SESSION_ID)")] = None,
    login_secure: Annotated[str | None, typer.Option("--login-secure", help="steamLoginSecure cookie (or STEAM_LOGIN_SECURE)")] = None,
    html: Annotated[Path | None, typer.Option("--html", help="Saved licenses page to scan instead of fetching it")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write ids to this file (usable with run --ids-file)")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Minimal output")] = False,
) -> None:
    """List removable licenses without removing anything."""
    _configure_logging(quiet=quiet)

    settings = _apply_overrides(
        get_settings(),
        steam_session_id=session_id,
        steam_login_secure=login_secure,
    )
    credential = settings.credential() if settings.has_credentials else None

    if html is None and credential is None:
        console.print("[red]Pass --html or configure a Steam session to fetch the licenses page.[/red]")
        raise typer.Exit(code=1)

    source = LicensePageSource(
        credential,
        html_path=html,
        store_url=settings.store_url,
        timeout=settings.request_timeout,
    )

    try:
        ids = asyncio.run(_discover(source))
    except DiscoveryError as e:
        console.print(f"[red]Discovery failed: {e}[/red]")
        raise typer.Exit(code=1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            f.write(f"# {len(ids)} removable licenses\n")
            for package_id in ids:
                f.write(f"{package_id}\n")
        console.print(f"[green]Saved {len(ids)} package ids to {output}[/green]")
    else:
        for package_id in ids:
            console.print(package_id)

    if not quiet:
        console.print(f"Found {len(ids)} removable licenses")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]License Remover v{__version__}[/bold]")


# ==================== Helper Functions ====================


def _apply_overrides(settings: Settings, **overrides: object) -> Settings:
    """Return settings with non-None CLI values applied."""
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return settings
    return settings.model_copy(update=update)


def _build_source(
    settings: Settings,
    credential: Credential,
    ids_file: Path | None = None,
    html: Path | None = None,
) -> DiscoverySource:
    """Pick the discovery source: ids file, then saved page, then live page."""
    if ids_file is not None:
        return IdentifierFileSource(ids_file)
    return LicensePageSource(
        credential,
        html_path=html,
        store_url=settings.store_url,
        timeout=settings.request_timeout,
    )


async def _discover(source: DiscoverySource) -> list[str]:
    if isinstance(source, LicensePageSource):
        async with source:
            return await source.discover()
    return await source.discover()


async def _run_removal(
    settings: Settings,
    credential: Credential,
    source: DiscoverySource,
    limit: int | None = None,
    quiet: bool = False,
) -> RunResult:
    """Discover identifiers and drain them through the processing loop."""
    ids = await _discover(source)
    if limit:
        ids = ids[:limit]

    if not ids:
        return RunResult(total=0)

    async with RemovalClient(store_url=settings.store_url, timeout=settings.request_timeout) as client:
        loop = ProcessingLoop.from_settings(settings, ItemQueue(ids), client, credential)
        result = await loop.run()

    if not quiet:
        console.print(loop.metrics.to_summary())

    return result


if __name__ == "__main__":
    app()
