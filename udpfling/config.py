"""
Configuration loading and merging helpers.
"""

from __future__ import annotations

import json
import pathlib
import socket
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import UsageError

UINT32_MAX = 2**32 - 1
SEQUENCE_FIELD_SIZE = 4

DEFAULT_COUNT = 10
DEFAULT_DELAY = 1000
DEFAULT_PADDING = 64
DEFAULT_BACKOFF = 1
MAX_BACKOFF = 1000

_FAMILIES = {
    "any": socket.AF_UNSPEC,
    "4": socket.AF_INET,
    "ipv4": socket.AF_INET,
    "6": socket.AF_INET6,
    "ipv6": socket.AF_INET6,
}


@dataclass
class RuntimeConfig:
    host: str
    port: str
    family: int = socket.AF_UNSPEC
    max_send: int = UINT32_MAX
    count: int = DEFAULT_COUNT
    delay: int = DEFAULT_DELAY
    flood: bool = False
    line_buffered: bool = False
    nanoseconds: bool = False
    padding: int = DEFAULT_PADDING
    backoff: int = DEFAULT_BACKOFF
    max_backoff: int = MAX_BACKOFF
    pcap_out: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def load_config_file(path: str) -> Dict[str, Any]:
    """
    Load a JSON or YAML config file.
    """
    config_path = pathlib.Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    text = config_path.read_text()
    if config_path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pyyaml is required to read YAML configs") from exc

        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Config file must define a mapping at the top level")
    return data


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combine two config dictionaries, keeping override values when provided.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def build_runtime_config(data: Dict[str, Any]) -> RuntimeConfig:
    """
    Normalize dictionary input into a RuntimeConfig.

    Raises UsageError for anything the sender could not run with.
    """
    host = str(data.get("host") or "")
    if not host:
        raise UsageError("no hostname specified")
    port = str(data.get("port") or "")
    if not port:
        raise UsageError("Missing required option: port")

    padding = _as_int(data.get("padding"), "padding", DEFAULT_PADDING)
    if padding < SEQUENCE_FIELD_SIZE:
        raise UsageError(f"padding must be at least {SEQUENCE_FIELD_SIZE} bytes (got {padding})")

    count = _as_int(data.get("count"), "count", DEFAULT_COUNT)
    if count <= 0:
        raise UsageError(f"count must be a positive integer (got {count})")

    max_send = _as_int(data.get("max_send"), "max_send", UINT32_MAX)
    if not (1 <= max_send <= UINT32_MAX):
        raise UsageError(f"max_send must be 1-{UINT32_MAX} (got {max_send})")

    delay = _as_int(data.get("delay"), "delay", DEFAULT_DELAY)
    if delay < 0:
        raise UsageError(f"delay must not be negative (got {delay})")

    backoff = _as_int(data.get("backoff"), "backoff", DEFAULT_BACKOFF)
    max_backoff = _as_int(data.get("max_backoff"), "max_backoff", MAX_BACKOFF)
    if backoff <= 0:
        raise UsageError(f"backoff must be a positive integer (got {backoff})")
    if max_backoff < backoff:
        raise UsageError(f"max_backoff ({max_backoff}) is below backoff ({backoff})")

    return RuntimeConfig(
        host=host,
        port=port,
        family=_resolve_family(data.get("family")),
        max_send=max_send,
        count=count,
        delay=delay,
        flood=bool(data.get("flood", False)),
        line_buffered=bool(data.get("line_buffered", False)),
        nanoseconds=bool(data.get("nanoseconds", False)),
        padding=padding,
        backoff=backoff,
        max_backoff=max_backoff,
        pcap_out=data.get("pcap_out"),
        extra={k: v for k, v in data.items() if k not in _known_keys()},
    )


def _known_keys() -> set:
    return {
        "host",
        "port",
        "family",
        "max_send",
        "count",
        "delay",
        "flood",
        "line_buffered",
        "nanoseconds",
        "padding",
        "backoff",
        "max_backoff",
        "pcap_out",
    }


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise UsageError(f"{name} must be an integer (got {value!r})") from exc


def _resolve_family(raw: Any) -> int:
    """
    Map 4/6/any to a socket address family.
    """
    if raw is None or raw == "":
        return socket.AF_UNSPEC
    key = str(raw).lower()
    if key not in _FAMILIES:
        raise UsageError("family must be one of: 4, 6, any")
    return _FAMILIES[key]
