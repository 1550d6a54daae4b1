"""Markdown formatters for LLM-friendly output."""

from __future__ import annotations

from lbprobe.core.report import PLUGIN_NAME, format_number
from lbprobe.core.thresholds import format_spec
from lbprobe.models.results import AggregateResult
from lbprobe.models.stats import Snapshot
from lbprobe.models.thresholds import CheckPlan, ThresholdOverride


def format_result(result: AggregateResult) -> str:
    """Format a check result with its metrics as a table."""
    lines = [
        f"## {PLUGIN_NAME} {result.severity.name}",
        "",
        f"**Exit code:** {int(result.severity)}  ",
        f"**Message:** {result.message}",
    ]

    if result.metrics:
        lines.extend([
            "",
            "| Metric | Value | Warn | Crit | Min | Max |",
            "|--------|-------|------|------|-----|-----|",
        ])
        for m in result.metrics:
            lines.append(
                f"| {m.label} | {format_number(m.value)} "
                f"| {format_number(m.warn) or '—'} | {format_number(m.crit) or '—'} "
                f"| {format_number(m.min) or '—'} | {format_number(m.max) or '—'} |"
            )

    return "\n".join(lines)


def _ratio(current: int, limit: int) -> str:
    return f"{current}/{limit}" if limit else str(current)


def format_snapshot(snapshot: Snapshot) -> str:
    """Format frontends, backends and servers as tables."""
    if not snapshot.frontends and not snapshot.backends:
        return "No frontends or backends reported."

    lines = [
        "## Frontends",
        "",
        "| Name | Status | Sessions | Connections |",
        "|------|--------|----------|-------------|",
    ]
    for name in sorted(snapshot.frontends):
        fe = snapshot.frontends[name]
        lines.append(
            f"| {name} | {fe.status} | {_ratio(fe.sessions.current, fe.sessions.limit)} "
            f"| {fe.connections} |"
        )

    lines.extend([
        "",
        "## Backends",
        "",
        "| Name | Status | Sessions | Queued | Servers |",
        "|------|--------|----------|--------|---------|",
    ])
    for name in sorted(snapshot.backends):
        be = snapshot.backends[name]
        up = sum(1 for s in be.servers.values() if s.is_up)
        lines.append(
            f"| {name} | {be.status or '—'} | {_ratio(be.sessions.current, be.sessions.limit)} "
            f"| {be.queued_current} | {up}/{len(be.servers)} up |"
        )

    lines.extend([
        "",
        "## Servers",
        "",
        "| Server | Status | Role | Sessions | Queue |",
        "|--------|--------|------|----------|-------|",
    ])
    for be_name in sorted(snapshot.backends):
        be = snapshot.backends[be_name]
        for sv_name in sorted(be.servers):
            sv = be.servers[sv_name]
            lines.append(
                f"| {be_name}/{sv_name} | {sv.status} | {'backup' if sv.is_backup else 'active'} "
                f"| {_ratio(sv.sessions.current, sv.sessions.limit)} "
                f"| {_ratio(sv.queued.current, sv.queued.limit)} |"
            )

    return "\n".join(lines)


def format_plan(plan: CheckPlan, snapshot: Snapshot) -> str:
    """Format the resolved thresholds per entity."""
    if not plan:
        return "No frontends or backends reported."

    lines = [
        "## Check Plan",
        "",
        "| Name | Kind | Thresholds |",
        "|------|------|------------|",
    ]
    for name in sorted(plan):
        spec = plan[name]
        if snapshot.is_frontend_only(name):
            shown = format_spec(
                ThresholdOverride(session_warn=spec.session_warn, session_crit=spec.session_crit)
            )
            lines.append(f"| {name} | frontend | `{shown}` |")
        else:
            lines.append(f"| {name} | backend | `{format_spec(spec)}` |")
    return "\n".join(lines)
