"""
Error types raised by udpfling and the exit codes they map to.
"""

from __future__ import annotations

# sysexits.h values
EX_USAGE = 64
EX_NOHOST = 68
EX_OSERR = 71
EX_IOERR = 74


class UdpflingError(Exception):
    exit_code = 1


class UsageError(UdpflingError):
    exit_code = EX_USAGE


class ResolutionError(UdpflingError):
    exit_code = EX_NOHOST


class ResourceError(UdpflingError):
    exit_code = EX_OSERR


class FatalIOError(UdpflingError):
    exit_code = EX_IOERR


class UserInterrupt(UdpflingError):
    """Raised out of the send loop when SIGINT arrives."""

    exit_code = 1

    def __init__(self, sent: int) -> None:
        super().__init__(f"quit due to SIGINT (sent {sent} packets)")
        self.sent = sent
