"""Parse ``show stat`` CSV output into a Snapshot."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import replace

from lbprobe.models.enums import ServiceType
from lbprobe.models.stats import (
    BackendRecord,
    Counter,
    FrontendRecord,
    ServerRecord,
    Snapshot,
    Timings,
)

logger = logging.getLogger("lbprobe.parser")

# Column positions in the show stat CSV schema
PXNAME = 0
SVNAME = 1
QCUR = 2
SCUR = 4
SLIM = 6
STOT = 7
STATUS = 17
WEIGHT = 18
ACT = 19
BCK = 20
QLIMIT = 25
TYPE = 32
RATE_LIM = 34
CHECK_STATUS = 36
QTIME = 58
CTIME = 59
RTIME = 60
TTIME = 61

# A record must reach the type column to be classified
MIN_FIELDS = TYPE + 1

_UP_RE = re.compile(r"^(UP|NO CHECK)", re.IGNORECASE)
_DISABLED_RE = re.compile(r"^(MAINT|DRAIN|NOLB)", re.IGNORECASE)


def _int(value: str) -> int:
    """Empty and non-numeric columns read as 0."""
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


def _optional_int(fields: list[str], index: int) -> int | None:
    if index >= len(fields) or not fields[index]:
        return None
    try:
        return int(fields[index])
    except ValueError:
        return None


def _str(fields: list[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def _timings(fields: list[str]) -> Timings:
    return Timings(
        queue=_optional_int(fields, QTIME),
        connect=_optional_int(fields, CTIME),
        response=_optional_int(fields, RTIME),
        total=_optional_int(fields, TTIME),
    )


def _parse_frontend(fields: list[str]) -> FrontendRecord:
    return FrontendRecord(
        name=fields[PXNAME],
        status=fields[STATUS],
        sessions=Counter(current=_int(fields[SCUR]), limit=_int(fields[SLIM])),
        connections=_int(fields[STOT]),
        rate_limit=_int(_str(fields, RATE_LIM)),
    )


def _merge_backend(existing: BackendRecord | None, fields: list[str]) -> BackendRecord:
    """Set backend-specific fields without touching servers already attached."""
    base = existing or BackendRecord(name=fields[PXNAME])
    return replace(
        base,
        status=fields[STATUS],
        sessions=Counter(current=_int(fields[SCUR]), limit=_int(fields[SLIM])),
        connections=_int(fields[STOT]),
        queued_current=_int(fields[QCUR]),
        active_servers=_int(fields[ACT]),
        backup_servers=_int(fields[BCK]),
        timings=_timings(fields),
    )


def _parse_server(fields: list[str]) -> ServerRecord:
    status = fields[STATUS]
    return ServerRecord(
        name=fields[SVNAME],
        status=status,
        is_active=_int(fields[ACT]) > 0,
        is_backup=_int(fields[BCK]) > 0,
        is_up=bool(_UP_RE.match(status)),
        is_down=status == "DOWN",
        is_disabled=bool(_DISABLED_RE.match(status)),
        sessions=Counter(current=_int(fields[SCUR]), limit=_int(fields[SLIM])),
        queued=Counter(current=_int(fields[QCUR]), limit=_int(fields[QLIMIT])),
        weight=_int(fields[WEIGHT]),
        check_status=_str(fields, CHECK_STATUS),
        timings=_timings(fields),
    )


def parse_stats(lines: Iterable[str]) -> Snapshot:
    """Build a Snapshot from ``show stat`` lines, in input order.

    Header, empty, short and unrecognised records are skipped.
    """
    frontends: dict[str, FrontendRecord] = {}
    backends: dict[str, BackendRecord] = {}

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split(",")
        if len(fields) < MIN_FIELDS:
            logger.debug("Skipping short record on line %d (%d fields)", lineno, len(fields))
            continue

        try:
            kind = ServiceType(fields[TYPE])
        except ValueError:
            logger.debug("Skipping record with unknown type %r on line %d", fields[TYPE], lineno)
            continue

        name = fields[PXNAME]
        if kind == ServiceType.FRONTEND:
            frontends[name] = _parse_frontend(fields)
        elif kind == ServiceType.BACKEND:
            backends[name] = _merge_backend(backends.get(name), fields)
        elif kind == ServiceType.SERVER:
            backend = backends.get(name) or BackendRecord(name=name)
            server = _parse_server(fields)
            backends[name] = replace(backend, servers={**backend.servers, server.name: server})

    logger.debug("Parsed %d frontends and %d backends", len(frontends), len(backends))
    return Snapshot(frontends=frontends, backends=backends)
