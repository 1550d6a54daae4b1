"""Layered configuration: .lbprobe/config.toml -> LBPROBE_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _overrides(value: object) -> tuple[str, ...]:
    # a single override may be written as a plain string
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"thresholds.overrides must be a list of strings: {value!r}")
    return tuple(str(item) for item in value)


@dataclass(frozen=True, slots=True)
class SocketConfig:
    """Where and how long to wait for the stats socket."""

    address: str | None = None
    timeout: float = 10.0


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Global defaults spec and per-entity ``name:spec`` overrides."""

    defaults: str | None = None
    overrides: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ChecksConfig:
    """Which entity kinds get checked."""

    frontends: bool = True
    backends: bool = True
    servers: bool = True


@dataclass(frozen=True, slots=True)
class LbprobeConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    socket: SocketConfig = field(default_factory=SocketConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    checks: ChecksConfig = field(default_factory=ChecksConfig)

    @property
    def lbprobe_dir(self) -> Path:
        return self.project_path / ".lbprobe"

    @property
    def config_path(self) -> Path:
        return self.lbprobe_dir / "config.toml"

    @classmethod
    def load(cls, project_path: Path | None = None) -> LbprobeConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".lbprobe" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        socket_data = toml_data.get("socket", {})
        threshold_data = toml_data.get("thresholds", {})
        checks_data = toml_data.get("checks", {})

        _socket_defaults = SocketConfig()
        _check_defaults = ChecksConfig()

        socket = SocketConfig(
            address=os.environ.get(
                "LBPROBE_SOCKET",
                socket_data.get("address", _socket_defaults.address),
            ),
            timeout=float(
                os.environ.get(
                    "LBPROBE_TIMEOUT",
                    socket_data.get("timeout", _socket_defaults.timeout),
                )
            ),
        )

        # Override specs contain commas, so the env var is whitespace-separated
        env_overrides = os.environ.get("LBPROBE_OVERRIDES")
        thresholds = ThresholdConfig(
            defaults=os.environ.get(
                "LBPROBE_DEFAULTS", threshold_data.get("defaults")
            ),
            overrides=(
                tuple(env_overrides.split())
                if env_overrides is not None
                else _overrides(threshold_data.get("overrides", ()))
            ),
        )

        checks = ChecksConfig(
            frontends=_bool(
                os.environ.get(
                    "LBPROBE_FRONTENDS",
                    checks_data.get("frontends", _check_defaults.frontends),
                )
            ),
            backends=_bool(
                os.environ.get(
                    "LBPROBE_BACKENDS",
                    checks_data.get("backends", _check_defaults.backends),
                )
            ),
            servers=_bool(
                os.environ.get(
                    "LBPROBE_SERVERS",
                    checks_data.get("servers", _check_defaults.servers),
                )
            ),
        )

        return cls(
            project_path=project,
            socket=socket,
            thresholds=thresholds,
            checks=checks,
        )
