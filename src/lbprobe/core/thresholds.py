"""Threshold spec mini-language: parse, merge, serialise and resolve.

A spec string has up to five comma-separated fields, all optional::

    [polarity],[warn[%]],[crit[%]],[session_warn[%]],[session_crit[%]]

``polarity`` is ``u`` (watch up servers), ``d`` (watch down servers) or
``x`` (disable checks). A ``%`` suffix always marks a fraction; a bare
number is a fraction when below 1 and an absolute count otherwise.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from decimal import Decimal

from lbprobe.models.enums import Polarity
from lbprobe.models.thresholds import (
    Absolute,
    Fraction,
    Threshold,
    ThresholdOverride,
    ThresholdSpec,
)

_NUM = r"\d*\.?\d+%?"

_SPEC_RE = re.compile(
    rf"^(?P<polarity>[udx])?"
    rf"(?:,(?P<warn>{_NUM})?"
    rf"(?:,(?P<crit>{_NUM})?"
    rf"(?:,(?P<session_warn>{_NUM})?"
    rf"(?:,(?P<session_crit>{_NUM})?"
    r")?)?)?)?$"
)

_OVERRIDE_RE = re.compile(r"^(?P<name>[\w.-]+):(?P<spec>.*)$")

_FIELDS = ("warn", "crit", "session_warn", "session_crit")


class MalformedSpecError(ValueError):
    """A defaults or override string does not match the grammar."""

    def __init__(self, text: str, kind: str = "threshold spec") -> None:
        super().__init__(f"Malformed {kind}: '{text}'")
        self.text = text
        self.kind = kind


def _parse_value(raw: str | None) -> Threshold | None:
    if raw is None:
        return None
    if raw.endswith("%"):
        return Fraction(float(raw[:-1]) / 100)
    value = float(raw)
    return Fraction(value) if value < 1 else Absolute(value)


def parse_spec(text: str) -> ThresholdOverride:
    """Parse a spec string into a partial override.

    Raises MalformedSpecError if the text does not match the grammar.
    """
    m = _SPEC_RE.match(text.strip())
    if not m:
        raise MalformedSpecError(text)

    polarity = m.group("polarity")
    return ThresholdOverride(
        polarity=Polarity(polarity) if polarity else None,
        **{name: _parse_value(m.group(name)) for name in _FIELDS},
    )


def parse_override(text: str) -> tuple[str, ThresholdOverride]:
    """Parse a ``name:spec`` override string."""
    m = _OVERRIDE_RE.match(text.strip())
    if not m:
        raise MalformedSpecError(text, kind="override")
    try:
        return m.group("name"), parse_spec(m.group("spec"))
    except MalformedSpecError:
        raise MalformedSpecError(text, kind="override") from None


def apply_override(
    spec: ThresholdSpec,
    override: ThresholdOverride,
    sessions_only: bool = False,
) -> ThresholdSpec:
    """Replace each field the override provides. Unset fields are inherited."""
    names = ("session_warn", "session_crit") if sessions_only else ("polarity",) + _FIELDS
    changes = {
        name: getattr(override, name)
        for name in names
        if getattr(override, name) is not None
    }
    return replace(spec, **changes) if changes else spec


def _format_number(value: float, scale: int = 1) -> str:
    # plain decimal, never exponent form, shortest text that reads back the same
    text = format(Decimal(repr(value)) * scale, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_value(value: Threshold | None) -> str:
    if value is None:
        return ""
    if isinstance(value, Absolute):
        return _format_number(value.value)
    if value.value < 1:
        return _format_number(value.value)
    return _format_number(value.value, scale=100) + "%"


def format_spec(spec: ThresholdSpec | ThresholdOverride) -> str:
    """Render a spec back into the grammar, dropping trailing empty fields."""
    parts = [spec.polarity.value if spec.polarity is not None else ""]
    parts.extend(_format_value(getattr(spec, name)) for name in _FIELDS)
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return ",".join(parts)


def resolve_threshold(value: Threshold, total: int) -> float:
    """Effective threshold against a population or limit.

    Fractions become ``ceil(total * fraction)``. Absolute counts are
    returned unchanged, even when they exceed ``total``.
    """
    if isinstance(value, Fraction):
        # round first so 100 * 1.1 does not ceil to 111
        return math.ceil(round(total * value.value, 9))
    return value.value


def queue_threshold(value: Threshold, limit: int) -> float:
    """Queue thresholds are always ``limit * value``, with no rounding."""
    return limit * value.value
