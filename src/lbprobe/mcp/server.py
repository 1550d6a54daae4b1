"""FastMCP server factory exposing the probe as agent tools."""

from __future__ import annotations

from dataclasses import replace

from lbprobe.config import LbprobeConfig
from lbprobe.mcp.formatters import format_plan, format_result, format_snapshot


def _with_overrides(
    config: LbprobeConfig,
    socket: str | None = None,
    defaults: str | None = None,
    overrides: list[str] | None = None,
) -> LbprobeConfig:
    """Apply tool arguments on top of the loaded config."""
    if socket is not None:
        config = replace(config, socket=replace(config.socket, address=socket))
    thresholds = config.thresholds
    if defaults is not None:
        thresholds = replace(thresholds, defaults=defaults)
    if overrides:
        thresholds = replace(thresholds, overrides=tuple(overrides))
    return replace(config, thresholds=thresholds)


def create_server(config: LbprobeConfig | None = None):
    """Create and return a configured FastMCP server instance.

    Args:
        config: Optional pre-loaded config. If None, loads from cwd.
    """
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP("lbprobe", instructions="Load balancer health checks from the stats socket")
    _config = config or LbprobeConfig.load()

    @mcp.tool()
    def lbprobe_check(
        socket: str | None = None,
        defaults: str | None = None,
        overrides: list[str] | None = None,
        frontends: bool = True,
        backends: bool = True,
        servers: bool = True,
    ) -> str:
        """Run the load balancer health check.

        Args:
            socket: Stats socket path or host:port (default from config or discovery)
            defaults: Default thresholds, e.g. "d,2,5,.75,.9"
            overrides: Per-entity overrides, e.g. ["api:u,50%,25%"]
            frontends: Check frontends (default true)
            backends: Check backend quorum and sessions (default true)
            servers: Check per-server sessions and queues (default true)
        """
        from lbprobe.core.check import probe

        cfg = _with_overrides(_config, socket, defaults, overrides)
        cfg = replace(
            cfg,
            checks=replace(cfg.checks, frontends=frontends, backends=backends, servers=servers),
        )
        return format_result(probe(cfg))

    @mcp.tool()
    def lbprobe_stats(socket: str | None = None) -> str:
        """Show parsed frontends, backends and servers from the stats socket.

        Args:
            socket: Stats socket path or host:port (default from config or discovery)
        """
        from lbprobe.core.check import load_lines
        from lbprobe.core.parser import parse_stats
        from lbprobe.core.transport import TransportError

        try:
            lines = load_lines(_with_overrides(_config, socket))
        except TransportError as exc:
            return f"Error reading stats: {exc}"
        return format_snapshot(parse_stats(lines))

    @mcp.tool()
    def lbprobe_plan(
        socket: str | None = None,
        defaults: str | None = None,
        overrides: list[str] | None = None,
    ) -> str:
        """Show the thresholds each frontend and backend will be checked with.

        Args:
            socket: Stats socket path or host:port (default from config or discovery)
            defaults: Default thresholds, e.g. "d,2,5,.75,.9"
            overrides: Per-entity overrides, e.g. ["api:u,50%,25%"]
        """
        from lbprobe.core.check import load_lines
        from lbprobe.core.parser import parse_stats
        from lbprobe.core.plan import build_plan
        from lbprobe.core.thresholds import MalformedSpecError
        from lbprobe.core.transport import TransportError

        cfg = _with_overrides(_config, socket, defaults, overrides)
        try:
            snapshot = parse_stats(load_lines(cfg))
            check_plan = build_plan(snapshot, cfg.thresholds.defaults, cfg.thresholds.overrides)
        except (MalformedSpecError, TransportError) as exc:
            return f"Error building plan: {exc}"
        return format_plan(check_plan, snapshot)

    return mcp


def main() -> None:
    """Entry point for lbprobe-mcp (stdio transport)."""
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
