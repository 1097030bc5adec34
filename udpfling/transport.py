"""
Resolution of the destination and the single datagram socket used to reach it.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Any, Tuple

from .errors import FatalIOError, ResolutionError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Destination:
    """
    A resolved UDP endpoint and the one socket used to reach it.
    """

    family: int
    socktype: int
    proto: int
    sockaddr: Tuple[Any, ...]
    sock: socket.socket

    def send(self, data) -> int:
        return self.sock.sendto(data, self.sockaddr)

    def local_address(self) -> Tuple[Any, ...]:
        return self.sock.getsockname()

    def close(self) -> None:
        try:
            self.sock.close()
        except OSError:
            pass


def open_destination(host: str, port: str, family: int = socket.AF_UNSPEC) -> Destination:
    """
    Resolve host/port and open a datagram socket for the first usable candidate.
    """
    if not host:
        raise ResolutionError("no hostname specified")
    try:
        infos = socket.getaddrinfo(host, port, family, socket.SOCK_DGRAM)
    except socket.gaierror as exc:
        raise ResolutionError(f"getaddrinfo error: {exc.strerror or exc}") from exc

    for cand_family, socktype, proto, _, sockaddr in infos:
        try:
            sock = socket.socket(cand_family, socktype, proto)
        except OSError as exc:
            log.warning("socket error for %s: %s", sockaddr[0], exc)
            continue
        log.info("sending to %s port %s", sockaddr[0], sockaddr[1])
        return Destination(cand_family, socktype, proto, sockaddr, sock)

    raise FatalIOError("could not bind to socket")
