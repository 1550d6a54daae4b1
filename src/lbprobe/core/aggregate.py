"""Combine verdicts into one status, message and metric list."""

from __future__ import annotations

from collections.abc import Iterable

from lbprobe.models.enums import Severity
from lbprobe.models.results import AggregateResult, Summary, Verdict
from lbprobe.models.stats import Snapshot

MESSAGE_SEPARATOR = "; "


def summarize(snapshot: Snapshot) -> Summary:
    """Count entities. Services are non-backup server slots summed per backend."""
    server_names: set[str] = set()
    services = 0
    for backend in snapshot.backends.values():
        for server in backend.servers.values():
            if server.is_backup:
                continue
            server_names.add(server.name)
            services += 1
    return Summary(
        frontends=len(snapshot.frontends),
        backends=len(snapshot.backends),
        servers=len(server_names),
        services=services,
    )


def aggregate(snapshot: Snapshot, verdicts: Iterable[Verdict]) -> AggregateResult:
    """Most severe verdict wins; non-OK messages keep evaluation order."""
    verdicts = list(verdicts)
    summary = summarize(snapshot)

    severity = max((v.severity for v in verdicts), default=Severity.OK)
    messages = [v.message for v in verdicts if v.severity != Severity.OK and v.message]
    messages.append(summary.sentence())

    return AggregateResult(
        severity=severity,
        message=MESSAGE_SEPARATOR.join(messages),
        metrics=tuple(m for v in verdicts for m in v.metrics),
        summary=summary,
    )
