"""Unit tests for configuration helpers."""

import json
import socket

import pytest

from udpfling.config import (
    DEFAULT_BACKOFF,
    DEFAULT_COUNT,
    DEFAULT_DELAY,
    DEFAULT_PADDING,
    MAX_BACKOFF,
    UINT32_MAX,
    RuntimeConfig,
    build_runtime_config,
    load_config_file,
    merge_config,
)
from udpfling.errors import UsageError


class TestLoadConfigFile:
    """Test reading config files."""

    def test_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"host": "10.0.0.1", "port": "9000"}))
        assert load_config_file(str(path)) == {"host": "10.0.0.1", "port": "9000"}

    def test_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("host: example.net\nport: 5001\nflood: true\n")
        assert load_config_file(str(path)) == {"host": "example.net", "port": 5001, "flood": True}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("")
        assert load_config_file(str(path)) == {}

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_file(str(tmp_path / "nope.json"))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config_file(str(path))


class TestMergeConfig:
    """Test merging of file and CLI values."""

    def test_override_wins(self):
        assert merge_config({"delay": 5, "port": "1"}, {"delay": 20}) == {"delay": 20, "port": "1"}

    def test_none_does_not_override(self):
        assert merge_config({"flood": True}, {"flood": None, "host": "h"}) == {"flood": True, "host": "h"}


class TestBuildRuntimeConfig:
    """Test normalization and validation."""

    def test_defaults(self):
        cfg = build_runtime_config({"host": "localhost", "port": 9999})
        assert cfg == RuntimeConfig(host="localhost", port="9999")
        assert cfg.family == socket.AF_UNSPEC
        assert cfg.max_send == UINT32_MAX
        assert cfg.count == DEFAULT_COUNT
        assert cfg.delay == DEFAULT_DELAY
        assert cfg.padding == DEFAULT_PADDING
        assert cfg.backoff == DEFAULT_BACKOFF
        assert cfg.max_backoff == MAX_BACKOFF
        assert not cfg.flood and not cfg.line_buffered and not cfg.nanoseconds

    def test_all_values(self):
        cfg = build_runtime_config(
            {
                "host": "h",
                "port": "domain",
                "family": "6",
                "max_send": "500",
                "count": 50,
                "delay": 3,
                "flood": True,
                "line_buffered": True,
                "nanoseconds": True,
                "padding": 1400,
                "backoff": 2,
                "max_backoff": 64,
                "pcap_out": "out.pcap",
                "note": "kept",
            }
        )
        assert cfg.port == "domain"
        assert cfg.family == socket.AF_INET6
        assert cfg.max_send == 500
        assert cfg.count == 50
        assert cfg.flood and cfg.line_buffered and cfg.nanoseconds
        assert cfg.padding == 1400
        assert (cfg.backoff, cfg.max_backoff) == (2, 64)
        assert cfg.pcap_out == "out.pcap"
        assert cfg.extra == {"note": "kept"}

    @pytest.mark.parametrize(
        "family, expected",
        [("4", socket.AF_INET), (4, socket.AF_INET), ("ipv6", socket.AF_INET6), ("any", socket.AF_UNSPEC), (None, socket.AF_UNSPEC)],
    )
    def test_family(self, family, expected):
        assert build_runtime_config({"host": "h", "port": "1", "family": family}).family == expected

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"port": "1"}, "no hostname"),
            ({"host": "h"}, "port"),
            ({"host": "h", "port": "1", "padding": 3}, "padding"),
            ({"host": "h", "port": "1", "count": 0}, "count"),
            ({"host": "h", "port": "1", "max_send": 0}, "max_send"),
            ({"host": "h", "port": "1", "max_send": 2**32}, "max_send"),
            ({"host": "h", "port": "1", "delay": -1}, "delay"),
            ({"host": "h", "port": "1", "backoff": 0}, "backoff"),
            ({"host": "h", "port": "1", "backoff": 10, "max_backoff": 5}, "max_backoff"),
            ({"host": "h", "port": "1", "family": "7"}, "family"),
            ({"host": "h", "port": "1", "count": "lots"}, "count must be an integer"),
        ],
    )
    def test_invalid(self, data, message):
        with pytest.raises(UsageError, match=message) as excinfo:
            build_runtime_config(data)
        assert excinfo.value.exit_code == 64
