"""Apply a CheckPlan to a Snapshot, producing per-check verdicts."""

from __future__ import annotations

import logging

from lbprobe.config import ChecksConfig
from lbprobe.core.thresholds import queue_threshold, resolve_threshold
from lbprobe.models.enums import Polarity, Severity
from lbprobe.models.results import Metric, Verdict
from lbprobe.models.stats import BackendRecord, Counter, FrontendRecord, ServerRecord, Snapshot
from lbprobe.models.thresholds import CheckPlan, ThresholdSpec

logger = logging.getLogger("lbprobe.evaluate")

# Backend name excluded from backend and server checks
STATS_BACKEND = "stats"


def _at_or_above(value: float, warn: float, crit: float) -> Severity:
    """Higher is worse: reaching a threshold trips it."""
    if value >= crit:
        return Severity.CRITICAL
    if value >= warn:
        return Severity.WARNING
    return Severity.OK


def _below(value: float, warn: float, crit: float) -> Severity:
    """Lower is worse: falling under a threshold trips it."""
    if value < crit:
        return Severity.CRITICAL
    if value < warn:
        return Severity.WARNING
    return Severity.OK


def _session_verdict(
    label: str, subject: str, sessions: Counter, spec: ThresholdSpec
) -> Verdict | None:
    if sessions.limit == 0:
        return None

    warn = resolve_threshold(spec.session_warn, sessions.limit)
    crit = resolve_threshold(spec.session_crit, sessions.limit)
    severity = _at_or_above(sessions.current, warn, crit)
    message = ""
    if severity != Severity.OK:
        message = f"{subject} sessions {sessions.current}/{sessions.limit}"
    metric = Metric(label, sessions.current, warn=warn, crit=crit, min=0, max=sessions.limit)
    return Verdict(severity, message, (metric,))


def check_frontend(frontend: FrontendRecord, spec: ThresholdSpec) -> list[Verdict]:
    """Open check, then session check."""
    verdicts = []
    if frontend.status != "OPEN":
        verdicts.append(
            Verdict(Severity.CRITICAL, f"{frontend.name} frontend is {frontend.status}")
        )

    sessions = _session_verdict(
        f"fe_{frontend.name}_sess", f"{frontend.name} frontend", frontend.sessions, spec
    )
    if sessions is not None:
        verdicts.append(sessions)
    return verdicts


def _counted_servers(backend: BackendRecord) -> list[ServerRecord]:
    return [
        backend.servers[name]
        for name in sorted(backend.servers)
        if not backend.servers[name].is_backup and not backend.servers[name].aggregate
    ]


def check_quorum(backend: BackendRecord, spec: ThresholdSpec) -> Verdict:
    """Count up/down servers against the backend's polarity.

    ``u`` trips when fewer than the threshold are up; ``d`` trips when
    at least the threshold are down. Both resolve against the number
    of non-backup servers.
    """
    servers = _counted_servers(backend)
    total = len(servers)
    up = sum(1 for s in servers if s.is_up)
    down = sum(1 for s in servers if s.is_down)
    disabled = sum(1 for s in servers if s.is_disabled)

    warn = resolve_threshold(spec.warn, total)
    crit = resolve_threshold(spec.crit, total)

    if spec.polarity == Polarity.UP:
        severity = _below(up, warn, crit)
        watched, count = "up", up
    else:
        severity = _at_or_above(down, warn, crit)
        watched, count = "down", down

    def _metric(kind: str, value: int) -> Metric:
        annotate = kind == watched
        return Metric(
            f"be_{backend.name}_{kind}",
            min(value, total),
            warn=warn if annotate else None,
            crit=crit if annotate else None,
            min=0,
            max=total,
        )

    message = ""
    if severity != Severity.OK:
        message = f"{backend.name} backend has {count} of {total} servers {watched}"
    metrics = (_metric("up", up), _metric("down", down), _metric("disabled", disabled))
    return Verdict(severity, message, metrics)


def check_backend(backend: BackendRecord, spec: ThresholdSpec) -> list[Verdict]:
    """Quorum check, then session check."""
    verdicts = [check_quorum(backend, spec)]
    sessions = _session_verdict(
        f"be_{backend.name}_sess", f"{backend.name} backend", backend.sessions, spec
    )
    if sessions is not None:
        verdicts.append(sessions)
    return verdicts


def check_queue(label: str, subject: str, queued: Counter, spec: ThresholdSpec) -> Verdict | None:
    """Queue depth against ``limit * fraction``, never rounded."""
    if queued.limit <= 0:
        return None

    warn = queue_threshold(spec.session_warn, queued.limit)
    crit = queue_threshold(spec.session_crit, queued.limit)
    severity = _at_or_above(queued.current, warn, crit)
    message = f"{subject} queue {queued.current}/{queued.limit}" if severity != Severity.OK else ""
    metric = Metric(label, queued.current, warn=warn, crit=crit, min=0, max=queued.limit)
    return Verdict(severity, message, (metric,))


def check_servers(backend: BackendRecord, spec: ThresholdSpec) -> list[Verdict]:
    """Session and queue checks for every non-backup server, by name."""
    verdicts = []
    for server in _counted_servers(backend):
        prefix = f"sv_{backend.name}_{server.name}"
        subject = f"{backend.name}/{server.name}"
        for verdict in (
            _session_verdict(f"{prefix}_sess", subject, server.sessions, spec),
            check_queue(f"{prefix}_queue", subject, server.queued, spec),
        ):
            if verdict is not None:
                verdicts.append(verdict)
    return verdicts


def evaluate(
    snapshot: Snapshot,
    plan: CheckPlan,
    checks: ChecksConfig | None = None,
) -> list[Verdict]:
    """Run every enabled check in a fixed order.

    Frontends by name, then backends by name, each backend's quorum and
    session checks before its servers.
    """
    checks = checks or ChecksConfig()
    verdicts: list[Verdict] = []

    if checks.frontends:
        for name in sorted(snapshot.frontends):
            verdicts.extend(check_frontend(snapshot.frontends[name], plan[name]))

    for name in sorted(snapshot.backends):
        spec = plan[name]
        if name == STATS_BACKEND or spec.polarity == Polarity.DISABLED:
            logger.debug("Skipping checks for backend %s", name)
            continue
        backend = snapshot.backends[name]
        if checks.backends:
            verdicts.extend(check_backend(backend, spec))
        if checks.servers:
            verdicts.extend(check_servers(backend, spec))

    return verdicts
