"""Check orchestration: fetch, parse, plan, evaluate, aggregate."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from lbprobe.config import ChecksConfig, LbprobeConfig, ThresholdConfig
from lbprobe.core.aggregate import aggregate
from lbprobe.core.evaluate import evaluate
from lbprobe.core.parser import parse_stats
from lbprobe.core.plan import build_plan, resolve_defaults
from lbprobe.core.thresholds import MalformedSpecError, parse_override
from lbprobe.core.transport import TransportError, discover_socket, fetch_stats, read_stats_file
from lbprobe.models.enums import Severity
from lbprobe.models.results import AggregateResult

logger = logging.getLogger("lbprobe.check")


def unknown(message: str) -> AggregateResult:
    """A run that could not be evaluated."""
    return AggregateResult(severity=Severity.UNKNOWN, message=message)


def validate_thresholds(thresholds: ThresholdConfig) -> None:
    """Parse every spec string so malformed input fails before any I/O."""
    resolve_defaults(thresholds.defaults)
    for text in thresholds.overrides:
        parse_override(text)


def load_lines(config: LbprobeConfig, stats_file: Path | None = None) -> list[str]:
    """Stats lines from a file, the configured socket, or a discovered one."""
    if stats_file is not None:
        return read_stats_file(stats_file)

    address = config.socket.address or discover_socket()
    if address is None:
        raise TransportError("No stats socket configured or found")
    return fetch_stats(address, timeout=config.socket.timeout)


def run_check(
    lines: Iterable[str],
    thresholds: ThresholdConfig | None = None,
    checks: ChecksConfig | None = None,
) -> AggregateResult:
    """Evaluate one stats response. Malformed specs yield UNKNOWN and no metrics."""
    thresholds = thresholds or ThresholdConfig()
    snapshot = parse_stats(lines)

    try:
        plan = build_plan(snapshot, thresholds.defaults, thresholds.overrides)
    except MalformedSpecError as exc:
        logger.error("%s", exc)
        return unknown(str(exc))

    verdicts = evaluate(snapshot, plan, checks)
    result = aggregate(snapshot, verdicts)
    logger.debug("Evaluated %d checks: %s", len(verdicts), result.severity.name)
    return result


def probe(config: LbprobeConfig, stats_file: Path | None = None) -> AggregateResult:
    """Full single-shot run. Never raises for spec or transport failures."""
    try:
        validate_thresholds(config.thresholds)
        lines = load_lines(config, stats_file)
    except MalformedSpecError as exc:
        logger.error("%s", exc)
        return unknown(str(exc))
    except TransportError as exc:
        logger.error("%s", exc)
        return unknown(str(exc))

    return run_check(lines, config.thresholds, config.checks)
