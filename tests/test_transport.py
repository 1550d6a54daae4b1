"""Tests for socket discovery and stats retrieval (mocked psutil and sockets)."""

import socket
from unittest.mock import MagicMock, patch

import psutil
import pytest

from lbprobe.core.transport import (
    STATS_COMMAND,
    TransportError,
    _process_sockets,
    discover_socket,
    fetch_stats,
    read_stats_file,
)


def _proc(name, sockets=(), pid=100):
    proc = MagicMock()
    proc.pid = pid
    proc.info = {"name": name}
    proc.net_connections.return_value = [MagicMock(laddr=path) for path in sockets]
    return proc


class TestProcessSockets:
    @patch("lbprobe.core.transport.psutil.process_iter")
    def test_found(self, mock_iter):
        mock_iter.return_value = [
            _proc("nginx", ["/run/nginx.sock"]),
            _proc("haproxy", ["/run/haproxy/admin.sock", ""]),
        ]
        assert _process_sockets() == ["/run/haproxy/admin.sock"]

    @patch("lbprobe.core.transport.psutil.process_iter")
    def test_access_denied(self, mock_iter):
        proc = _proc("haproxy")
        proc.net_connections.side_effect = psutil.AccessDenied(100)
        mock_iter.return_value = [proc]
        assert _process_sockets() == []


class TestDiscoverSocket:
    @patch("lbprobe.core.transport._process_sockets")
    def test_prefers_process_socket(self, mock_sockets, tmp_path):
        sock = tmp_path / "lb.sock"
        sock.touch()
        mock_sockets.return_value = [str(sock)]
        assert discover_socket() == str(sock)

    @patch("lbprobe.core.transport._process_sockets")
    def test_falls_back_to_well_known(self, mock_sockets, tmp_path, monkeypatch):
        known = tmp_path / "admin.sock"
        known.touch()
        mock_sockets.return_value = [str(tmp_path / "gone.sock")]
        monkeypatch.setattr("lbprobe.core.transport.DEFAULT_SOCKET_PATHS", (str(known),))
        assert discover_socket() == str(known)

    @patch("lbprobe.core.transport._process_sockets")
    def test_nothing(self, mock_sockets, monkeypatch):
        mock_sockets.return_value = []
        monkeypatch.setattr("lbprobe.core.transport.DEFAULT_SOCKET_PATHS", ())
        assert discover_socket() is None


class TestFetchStats:
    @patch("lbprobe.core.transport._connect")
    def test_reads_until_eof(self, mock_connect):
        sock = MagicMock()
        sock.__enter__.return_value = sock
        sock.recv.side_effect = [b"# pxname,svname\nweb,FRO", b"NTEND\n", b""]
        mock_connect.return_value = sock

        lines = fetch_stats("/run/haproxy/admin.sock", timeout=1.0)

        sock.sendall.assert_called_once_with(STATS_COMMAND)
        assert lines == ["# pxname,svname", "web,FRONTEND"]

    @patch("lbprobe.core.transport._connect")
    def test_connection_refused(self, mock_connect):
        mock_connect.side_effect = ConnectionRefusedError("refused")
        with pytest.raises(TransportError) as exc:
            fetch_stats("/run/haproxy/admin.sock")
        assert "/run/haproxy/admin.sock" in str(exc.value)

    @patch("lbprobe.core.transport._connect")
    def test_timeout(self, mock_connect):
        sock = MagicMock()
        sock.__enter__.return_value = sock
        sock.recv.side_effect = socket.timeout("timed out")
        mock_connect.return_value = sock
        with pytest.raises(TransportError):
            fetch_stats("127.0.0.1:9999", timeout=0.1)

    @patch("lbprobe.core.transport.socket.create_connection")
    def test_tcp_address(self, mock_create):
        sock = MagicMock()
        sock.__enter__.return_value = sock
        sock.recv.side_effect = [b""]
        mock_create.return_value = sock
        assert fetch_stats("lb.example.com:9999", timeout=3.0) == []
        mock_create.assert_called_once_with(("lb.example.com", 9999), timeout=3.0)

    def test_missing_unix_socket(self, tmp_path):
        with pytest.raises(TransportError):
            fetch_stats(str(tmp_path / "nope.sock"), timeout=0.5)


class TestReadStatsFile:
    def test_read(self, stats_file):
        assert read_stats_file(stats_file)[0].startswith("# pxname")

    def test_missing(self, tmp_path):
        with pytest.raises(TransportError):
            read_stats_file(tmp_path / "missing.csv")
