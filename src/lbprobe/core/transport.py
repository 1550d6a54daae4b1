"""Stats socket discovery and retrieval."""

from __future__ import annotations

import logging
import socket
from pathlib import Path

import psutil

logger = logging.getLogger("lbprobe.transport")

STATS_COMMAND = b"show stat\n"

DEFAULT_SOCKET_PATHS = (
    "/run/haproxy/admin.sock",
    "/var/run/haproxy/admin.sock",
    "/var/lib/haproxy/stats",
    "/run/haproxy.sock",
    "/var/run/haproxy.sock",
)

_PROCESS_NAME = "haproxy"
_CHUNK_SIZE = 65536


class TransportError(OSError):
    """The stats socket could not be reached or read."""


def _process_sockets() -> list[str]:
    """UNIX socket paths held open by running load balancer processes."""
    paths: set[str] = set()
    try:
        for proc in psutil.process_iter(["name"]):
            if proc.info.get("name") != _PROCESS_NAME:
                continue
            try:
                for conn in proc.net_connections(kind="unix"):
                    if conn.laddr and isinstance(conn.laddr, str):
                        paths.add(conn.laddr)
            except (psutil.AccessDenied, psutil.NoSuchProcess):
                logger.debug("Cannot list sockets of process %d", proc.pid)
    except (psutil.AccessDenied, OSError):
        logger.debug("Access denied scanning processes")
    return sorted(paths)


def discover_socket() -> str | None:
    """Find the stats socket: process-held sockets first, then well-known paths."""
    for path in _process_sockets():
        if Path(path).exists():
            logger.debug("Discovered socket %s from running process", path)
            return path
    for path in DEFAULT_SOCKET_PATHS:
        if Path(path).exists():
            logger.debug("Using well-known socket %s", path)
            return path
    return None


def _is_tcp(address: str) -> bool:
    return not address.startswith("/") and ":" in address


def _connect(address: str, timeout: float) -> socket.socket:
    if _is_tcp(address):
        host, _, port = address.rpartition(":")
        return socket.create_connection((host, int(port)), timeout=timeout)
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def fetch_stats(address: str, timeout: float = 10.0) -> list[str]:
    """Send ``show stat`` and return the response lines.

    ``address`` is a UNIX socket path or ``host:port``.
    """
    try:
        with _connect(address, timeout) as sock:
            sock.sendall(STATS_COMMAND)
            chunks = []
            while True:
                chunk = sock.recv(_CHUNK_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
    except (OSError, ValueError) as exc:
        raise TransportError(f"Cannot read stats from {address}: {exc}") from exc

    text = b"".join(chunks).decode("utf-8", errors="replace")
    lines = text.splitlines()
    logger.debug("Read %d lines from %s", len(lines), address)
    return lines


def read_stats_file(path: Path) -> list[str]:
    """Read a saved ``show stat`` dump."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        raise TransportError(f"Cannot read stats file {path}: {exc}") from exc
