"""Typer CLI for the lbprobe load balancer check."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from lbprobe.config import LbprobeConfig
from lbprobe.core.check import load_lines, probe
from lbprobe.core.report import render_plugin_output
from lbprobe.core.transport import TransportError
from lbprobe.logging_setup import setup_logging
from lbprobe.models.enums import Severity

app = typer.Typer(
    name="lbprobe",
    help="Load balancer stats socket probe for Nagios-compatible supervisors.",
    no_args_is_help=True,
)
console = Console(stderr=True)

SocketOpt = Annotated[
    Optional[str], typer.Option("--socket", "-s", help="Stats socket path or host:port")
]
FileOpt = Annotated[
    Optional[Path], typer.Option("--file", "-f", help="Read a saved show stat dump instead")
]
TimeoutOpt = Annotated[
    Optional[float], typer.Option("--timeout", "-t", help="Socket timeout in seconds")
]
DefaultsOpt = Annotated[
    Optional[str], typer.Option("--defaults", "-d", help="Default thresholds (d,2,5,.75,.9)")
]
OverrideOpt = Annotated[
    Optional[list[str]], typer.Option("--override", "-o", help="Per-entity name:spec override")
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging on stderr")]


def _config(
    socket: str | None = None,
    timeout: float | None = None,
    defaults: str | None = None,
    overrides: list[str] | None = None,
    frontends: bool | None = None,
    backends: bool | None = None,
    servers: bool | None = None,
) -> LbprobeConfig:
    """Load layered config, then apply any flags given on the command line."""
    config = LbprobeConfig.load()

    sock = config.socket
    if socket is not None:
        sock = replace(sock, address=socket)
    if timeout is not None:
        sock = replace(sock, timeout=timeout)

    thresholds = config.thresholds
    if defaults is not None:
        thresholds = replace(thresholds, defaults=defaults)
    if overrides:
        thresholds = replace(thresholds, overrides=tuple(overrides))

    checks = config.checks
    for name, value in (("frontends", frontends), ("backends", backends), ("servers", servers)):
        if value is not None:
            checks = replace(checks, **{name: value})

    return replace(config, socket=sock, thresholds=thresholds, checks=checks)


def _setup(verbose: bool) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def check(
    socket: SocketOpt = None,
    stats_file: FileOpt = None,
    timeout: TimeoutOpt = None,
    defaults: DefaultsOpt = None,
    override: OverrideOpt = None,
    frontends: Annotated[
        Optional[bool], typer.Option("--frontends/--no-frontends", help="Check frontends")
    ] = None,
    backends: Annotated[
        Optional[bool], typer.Option("--backends/--no-backends", help="Check backends")
    ] = None,
    servers: Annotated[
        Optional[bool], typer.Option("--servers/--no-servers", help="Check servers")
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Run the health check and exit with its status code."""
    _setup(verbose)
    config = _config(socket, timeout, defaults, override, frontends, backends, servers)
    result = probe(config, stats_file)
    typer.echo(render_plugin_output(result))
    raise typer.Exit(int(result.severity))


@app.command()
def stats(
    socket: SocketOpt = None,
    stats_file: FileOpt = None,
    timeout: TimeoutOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the parsed frontends, backends and servers."""
    from rich.table import Table

    from lbprobe.core.parser import parse_stats

    _setup(verbose)
    config = _config(socket, timeout)
    try:
        snapshot = parse_stats(load_lines(config, stats_file))
    except TransportError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(int(Severity.UNKNOWN))

    if not snapshot.frontends and not snapshot.backends:
        console.print("[dim]No frontends or backends reported.[/dim]")
        return

    frontends = Table(title="Frontends")
    frontends.add_column("Name", style="bold")
    frontends.add_column("Status")
    frontends.add_column("Sessions", justify="right")
    frontends.add_column("Connections", justify="right")
    for name in sorted(snapshot.frontends):
        fe = snapshot.frontends[name]
        style = "" if fe.status == "OPEN" else "red"
        frontends.add_row(
            name,
            f"[{style}]{fe.status}[/{style}]" if style else fe.status,
            _ratio(fe.sessions.current, fe.sessions.limit),
            str(fe.connections),
        )
    console.print(frontends)

    backends = Table(title="Backends")
    backends.add_column("Name", style="bold")
    backends.add_column("Status")
    backends.add_column("Sessions", justify="right")
    backends.add_column("Queued", justify="right")
    backends.add_column("Active", justify="right")
    backends.add_column("Backup", justify="right")
    for name in sorted(snapshot.backends):
        be = snapshot.backends[name]
        backends.add_row(
            name,
            be.status or "—",
            _ratio(be.sessions.current, be.sessions.limit),
            str(be.queued_current),
            str(be.active_servers),
            str(be.backup_servers),
        )
    console.print(backends)

    servers = Table(title="Servers")
    servers.add_column("Server", style="bold")
    servers.add_column("Status")
    servers.add_column("Role")
    servers.add_column("Sessions", justify="right")
    servers.add_column("Queue", justify="right")
    servers.add_column("Check")
    servers.add_column("Q/C/R/T ms", justify="right")
    for be_name in sorted(snapshot.backends):
        be = snapshot.backends[be_name]
        for sv_name in sorted(be.servers):
            sv = be.servers[sv_name]
            status_style = "green" if sv.is_up else "red" if sv.is_down else "yellow"
            t = sv.timings
            servers.add_row(
                f"{be_name}/{sv_name}",
                f"[{status_style}]{sv.status}[/{status_style}]",
                "backup" if sv.is_backup else "active",
                _ratio(sv.sessions.current, sv.sessions.limit),
                _ratio(sv.queued.current, sv.queued.limit),
                sv.check_status or "—",
                "/".join("—" if v is None else str(v) for v in (t.queue, t.connect, t.response, t.total)),
            )
    console.print(servers)


def _ratio(current: int, limit: int) -> str:
    return f"{current}/{limit}" if limit else str(current)


@app.command()
def plan(
    socket: SocketOpt = None,
    stats_file: FileOpt = None,
    timeout: TimeoutOpt = None,
    defaults: DefaultsOpt = None,
    override: OverrideOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the thresholds each frontend and backend will be checked with."""
    from rich.table import Table

    from lbprobe.core.parser import parse_stats
    from lbprobe.core.plan import build_plan
    from lbprobe.core.thresholds import MalformedSpecError, format_spec
    from lbprobe.models.thresholds import ThresholdOverride

    _setup(verbose)
    config = _config(socket, timeout, defaults, override)
    try:
        snapshot = parse_stats(load_lines(config, stats_file))
        check_plan = build_plan(
            snapshot, config.thresholds.defaults, config.thresholds.overrides
        )
    except (MalformedSpecError, TransportError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(int(Severity.UNKNOWN))

    if not check_plan:
        console.print("[dim]No frontends or backends reported.[/dim]")
        return

    table = Table(title="Check Plan")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Thresholds")
    for name in sorted(check_plan):
        spec = check_plan[name]
        if snapshot.is_frontend_only(name):
            kind = "frontend"
            shown = ThresholdOverride(session_warn=spec.session_warn, session_crit=spec.session_crit)
        else:
            kind = "frontend+backend" if name in snapshot.frontends else "backend"
            shown = spec
        table.add_row(name, kind, format_spec(shown))
    console.print(table)


def main() -> None:
    """Entry point for the lbprobe CLI."""
    app()


if __name__ == "__main__":
    main()
