"""Threshold values, partial overrides and the resolved check plan."""

from __future__ import annotations

from dataclasses import dataclass

from lbprobe.models.enums import Polarity


@dataclass(frozen=True, slots=True)
class Absolute:
    """A literal count."""

    value: float


@dataclass(frozen=True, slots=True)
class Fraction:
    """A proportion of some total, resolved at evaluation time."""

    value: float


Threshold = Absolute | Fraction


@dataclass(frozen=True, slots=True)
class ThresholdOverride:
    """A parsed spec string. None marks a field the string did not provide."""

    polarity: Polarity | None = None
    warn: Threshold | None = None
    crit: Threshold | None = None
    session_warn: Threshold | None = None
    session_crit: Threshold | None = None


@dataclass(frozen=True, slots=True)
class ThresholdSpec:
    """Fully resolved thresholds for one entity."""

    polarity: Polarity
    warn: Threshold
    crit: Threshold
    session_warn: Threshold
    session_crit: Threshold


# Built-in defaults: d,2,5,.75,.9
DEFAULT_SPEC = ThresholdSpec(
    polarity=Polarity.DOWN,
    warn=Absolute(2),
    crit=Absolute(5),
    session_warn=Fraction(0.75),
    session_crit=Fraction(0.9),
)

CheckPlan = dict[str, ThresholdSpec]
