"""Tests for MCP server tool functions."""

import pytest

from lbprobe.config import LbprobeConfig, SocketConfig, ThresholdConfig
from lbprobe.mcp.server import _with_overrides


class TestWithOverrides:
    def test_no_arguments_keeps_config(self):
        config = LbprobeConfig(socket=SocketConfig(address="/run/a.sock"))
        assert _with_overrides(config) == config

    def test_arguments_replace(self):
        config = LbprobeConfig(thresholds=ThresholdConfig(defaults="u", overrides=("a:x",)))
        out = _with_overrides(config, socket="lb:9000", defaults="d,1", overrides=["b:u"])
        assert out.socket.address == "lb:9000"
        assert out.thresholds.defaults == "d,1"
        assert out.thresholds.overrides == ("b:u",)


class TestMcpToolsDirect:
    """Test the core logic that MCP tools use, without requiring mcp package."""

    def test_check_flow(self, stats_file):
        from lbprobe.core.check import probe
        from lbprobe.mcp.formatters import format_result

        out = format_result(probe(LbprobeConfig(), stats_file))
        assert "HAPROXY OK" in out

    def test_check_flow_transport_error(self, tmp_path):
        from lbprobe.core.check import probe
        from lbprobe.mcp.formatters import format_result

        config = LbprobeConfig(socket=SocketConfig(address=str(tmp_path / "none.sock"), timeout=0.5))
        out = format_result(probe(config))
        assert "HAPROXY UNKNOWN" in out


class TestCreateServer:
    def test_create(self, tmp_path):
        pytest.importorskip("mcp")
        from lbprobe.mcp.server import create_server

        server = create_server(LbprobeConfig(project_path=tmp_path))
        assert server.name == "lbprobe"
