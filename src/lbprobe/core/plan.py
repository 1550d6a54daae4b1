"""Build the per-entity CheckPlan from defaults and overrides."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from lbprobe.core.thresholds import apply_override, parse_override, parse_spec
from lbprobe.models.stats import Snapshot
from lbprobe.models.thresholds import DEFAULT_SPEC, CheckPlan, ThresholdSpec

logger = logging.getLogger("lbprobe.plan")


def resolve_defaults(defaults: str | None = None) -> ThresholdSpec:
    """Built-in defaults with any fields from the global spec string applied."""
    if not defaults:
        return DEFAULT_SPEC
    return apply_override(DEFAULT_SPEC, parse_spec(defaults))


def build_plan(
    snapshot: Snapshot,
    defaults: str | None = None,
    overrides: Iterable[str] = (),
) -> CheckPlan:
    """Resolve thresholds for every frontend and backend in the snapshot.

    Overrides are applied in lexicographic order of their raw text, so
    when two name the same entity the later one wins field by field.
    Overrides for entities absent from the snapshot are dropped. On a
    frontend-only entity only the session fields are honoured.

    Raises MalformedSpecError for any string that fails the grammar,
    before any override is applied.
    """
    base = resolve_defaults(defaults)
    parsed = [parse_override(text) for text in sorted(overrides)]

    plan: CheckPlan = {name: base for name in snapshot.names()}

    for name, override in parsed:
        if name not in plan:
            logger.info("Ignoring override for unknown entity %s", name)
            continue
        plan[name] = apply_override(
            plan[name], override, sessions_only=snapshot.is_frontend_only(name)
        )

    return plan
