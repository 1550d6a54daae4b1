"""lbprobe data models."""

from lbprobe.models.enums import Polarity, ServiceType, Severity
from lbprobe.models.results import AggregateResult, Metric, Summary, Verdict
from lbprobe.models.stats import (
    BackendRecord,
    Counter,
    FrontendRecord,
    ServerRecord,
    Snapshot,
    Timings,
)
from lbprobe.models.thresholds import (
    DEFAULT_SPEC,
    Absolute,
    CheckPlan,
    Fraction,
    Threshold,
    ThresholdOverride,
    ThresholdSpec,
)

__all__ = [
    "ServiceType",
    "Polarity",
    "Severity",
    "Counter",
    "Timings",
    "ServerRecord",
    "FrontendRecord",
    "BackendRecord",
    "Snapshot",
    "Absolute",
    "Fraction",
    "Threshold",
    "ThresholdOverride",
    "ThresholdSpec",
    "DEFAULT_SPEC",
    "CheckPlan",
    "Metric",
    "Verdict",
    "Summary",
    "AggregateResult",
]
