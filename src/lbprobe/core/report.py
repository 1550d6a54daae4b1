"""Render an AggregateResult as a monitoring plugin status line."""

from __future__ import annotations

from lbprobe.models.results import AggregateResult, Metric

PLUGIN_NAME = "HAPROXY"


def format_number(value: float | None) -> str:
    """Integral values without a decimal point, others trimmed."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return "%.6g" % value


def _quote_label(label: str) -> str:
    if any(c in label for c in " ='"):
        return "'" + label.replace("'", "''") + "'"
    return label


def format_metric(metric: Metric) -> str:
    """``label=value;warn;crit;min;max`` with trailing empty fields dropped."""
    fields = [
        format_number(metric.value),
        format_number(metric.warn),
        format_number(metric.crit),
        format_number(metric.min),
        format_number(metric.max),
    ]
    while fields and fields[-1] == "":
        fields.pop()
    return f"{_quote_label(metric.label)}={';'.join(fields)}"


def format_perfdata(metrics: tuple[Metric, ...] | list[Metric]) -> str:
    return " ".join(format_metric(m) for m in metrics)


def render_plugin_output(result: AggregateResult) -> str:
    """One line: ``HAPROXY <SEVERITY> - <message> | <perfdata>``."""
    line = f"{PLUGIN_NAME} {result.severity.name} - {result.message}"
    if result.metrics:
        line += " | " + format_perfdata(result.metrics)
    return line
