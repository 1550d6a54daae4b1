"""Verdicts produced by the evaluators and the aggregated run result."""

from __future__ import annotations

from dataclasses import dataclass

from lbprobe.models.enums import Severity


@dataclass(frozen=True, slots=True)
class Metric:
    """One performance data point."""

    label: str
    value: float
    warn: float | None = None
    crit: float | None = None
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of one check against one entity."""

    severity: Severity
    message: str = ""
    metrics: tuple[Metric, ...] = ()


@dataclass(frozen=True, slots=True)
class Summary:
    """Entity counts reported at the end of every message."""

    frontends: int = 0
    backends: int = 0
    servers: int = 0
    services: int = 0

    def sentence(self) -> str:
        return (
            f"{self.frontends} frontends, {self.backends} backends, "
            f"{self.servers} servers, {self.services} services"
        )


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Final status, message and metrics for one run."""

    severity: Severity
    message: str
    metrics: tuple[Metric, ...] = ()
    summary: Summary | None = None
