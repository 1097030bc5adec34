"""
Command-line entrypoint for the UDP sender.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .capture import PacketCapture
from .config import build_runtime_config, load_config_file, merge_config
from .errors import EX_USAGE, ResourceError, UdpflingError, UsageError
from .sender import Sender
from .transport import open_destination

log = logging.getLogger(__name__)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        file_cfg: Dict[str, Any] = {}
        if args.config:
            file_cfg = _load_file(args.config)
        cli_cfg = {k: v for k, v in vars(args).items() if k not in {"config", "log_level"}}
        cfg = build_runtime_config(merge_config(file_cfg, cli_cfg))
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        log.error("%s", exc)
        return exc.exit_code

    if cfg.line_buffered:
        sys.stdout.reconfigure(line_buffering=True)  # type: ignore[union-attr]

    try:
        destination = open_destination(cfg.host, cfg.port, cfg.family)
        capture = _open_capture(cfg.pcap_out, destination) if cfg.pcap_out else None
        try:
            Sender(cfg, destination, capture).run()
        finally:
            if capture:
                capture.close()
    except UdpflingError as exc:
        log.error("%s", exc)
        return exc.exit_code
    return 0


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_file(path: str) -> Dict[str, Any]:
    try:
        return load_config_file(path)
    except (OSError, ValueError, RuntimeError) as exc:
        raise UsageError(f"Failed to load config: {exc}") from exc


def _open_capture(path: str, destination) -> PacketCapture:
    try:
        return PacketCapture(path, destination)
    except OSError as exc:
        raise ResourceError(f"could not open pcap output {path}: {exc}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="udpfling",
        description="Send numbered UDP datagrams at a steady pace and report the send rate",
    )
    family = parser.add_mutually_exclusive_group()
    family.add_argument("-4", dest="family", action="store_const", const="4", help="Use IPv4 only")
    family.add_argument("-6", dest="family", action="store_const", const="6", help="Use IPv6 only")
    parser.add_argument("-C", dest="max_send", type=int, help="Send-count limit (default: 4294967295)")
    parser.add_argument("-c", dest="count", type=int, help="Print a rate sample every N packets (default: 10)")
    pacing = parser.add_mutually_exclusive_group()
    pacing.add_argument("-d", dest="delay", type=int, help="Delay between packets: value // 1000 seconds plus (value %% 1000) microseconds (default: 1000)")
    pacing.add_argument("-f", dest="flood", action="store_true", default=None, help="Flood: send without delay")
    parser.add_argument("-l", dest="line_buffered", action="store_true", default=None, help="Line-buffer stdout")
    parser.add_argument("-N", dest="nanoseconds", action="store_true", default=None, help="Use the nanosecond divisor for -d")
    parser.add_argument("-P", dest="padding", type=int, help="Payload size in bytes, at least 4 (default: 64)")
    parser.add_argument("-p", dest="port", help="Destination port or service name (required)")
    parser.add_argument("--backoff", type=int, help="Initial retry backoff in ms (default: 1)")
    parser.add_argument("--max-backoff", type=int, help="Retry backoff ceiling in ms (default: 1000)")
    parser.add_argument("--pcap-out", help="Append every sent datagram to this pcap file")
    parser.add_argument("--config", help="Optional YAML or JSON config file")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING)")
    parser.add_argument("host", nargs="?", help="Destination hostname or address")
    return parser


if __name__ == "__main__":
    sys.exit(main())
