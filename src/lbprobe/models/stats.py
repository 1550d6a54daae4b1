"""Frozen dataclass models for a parsed statistics snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Counter:
    """A current value paired with its configured limit (0 = unlimited)."""

    current: int = 0
    limit: int = 0


@dataclass(frozen=True, slots=True)
class Timings:
    """Average delays in milliseconds. None when the snapshot lacks them."""

    queue: int | None = None
    connect: int | None = None
    response: int | None = None
    total: int | None = None


@dataclass(frozen=True, slots=True)
class ServerRecord:
    """One pool member within a backend."""

    name: str
    status: str
    is_active: bool = False
    is_backup: bool = False
    is_up: bool = False
    is_down: bool = False
    is_disabled: bool = False
    sessions: Counter = field(default_factory=Counter)
    queued: Counter = field(default_factory=Counter)
    weight: int = 0
    check_status: str = ""
    timings: Timings = field(default_factory=Timings)
    aggregate: bool = False  # backend-total pseudo-row, never set by the parser


@dataclass(frozen=True, slots=True)
class FrontendRecord:
    """A listener accepting inbound connections."""

    name: str
    status: str
    sessions: Counter = field(default_factory=Counter)
    connections: int = 0
    rate_limit: int = 0


@dataclass(frozen=True, slots=True)
class BackendRecord:
    """A named pool of servers.

    A backend may exist before its own BACKEND row has been seen, when
    server rows precede it. Such a partial record has an empty status.
    """

    name: str
    status: str = ""
    sessions: Counter = field(default_factory=Counter)
    connections: int = 0
    queued_current: int = 0
    active_servers: int = 0
    backup_servers: int = 0
    timings: Timings = field(default_factory=Timings)
    servers: dict[str, ServerRecord] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """All frontends and backends from one ``show stat`` response.

    Frontends and backends live in separate namespaces because a
    ``listen`` section reports both under the same proxy name.
    """

    frontends: dict[str, FrontendRecord] = field(default_factory=dict)
    backends: dict[str, BackendRecord] = field(default_factory=dict)

    def names(self) -> list[str]:
        """Sorted union of all frontend and backend names."""
        return sorted(set(self.frontends) | set(self.backends))

    def is_frontend_only(self, name: str) -> bool:
        return name in self.frontends and name not in self.backends
