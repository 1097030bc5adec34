"""
The send loop: stamp, send, classify, report, pace.
"""

from __future__ import annotations

import errno
import logging
import signal
import sys
import time
from dataclasses import dataclass
from typing import Optional, TextIO

from .capture import PacketCapture
from .config import RuntimeConfig
from .errors import FatalIOError, ResourceError, UserInterrupt
from .pacer import Backoff, pacing_delay
from .payload import PayloadBuffer
from .transport import Destination

log = logging.getLogger(__name__)

TRANSIENT_ERRNOS = frozenset({errno.ENOBUFS, errno.EINTR})


@dataclass
class SendState:
    """
    Progress shared by the loop and the SIGINT handler.
    """

    counter: int = 0
    prev_sent_count: int = 0
    retries: int = 0


def format_report(when: float, delta: int) -> str:
    return f"{when:.4f} {delta}"


class Sender:
    """
    Sends numbered datagrams to one destination until the send limit or SIGINT.

    Every iteration consumes one sequence number whether the send worked or
    hit a transient error. Transient errors (ENOBUFS, EINTR) back off and move
    on; anything else, or a short write, raises FatalIOError.
    """

    def __init__(
        self,
        cfg: RuntimeConfig,
        destination: Destination,
        capture: Optional[PacketCapture] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.cfg = cfg
        self.destination = destination
        self.capture = capture
        self.out = out
        self.state = SendState()
        self.payload = PayloadBuffer(cfg.padding)
        self.backoff = Backoff(cfg.backoff, cfg.max_backoff)
        self.delay = pacing_delay(cfg.delay, cfg.nanoseconds)

    def run(self) -> SendState:
        log.info(
            "sending %d-byte datagrams to %s every %.9fs%s",
            len(self.payload),
            self.destination.sockaddr[0],
            self.delay.total,
            " (flood)" if self.cfg.flood else "",
        )
        previous = self._install_interrupt_handler()
        try:
            while True:
                self.state.counter += 1
                if self.state.counter >= self.cfg.max_send:
                    break
                self._send_one()
                if self.state.counter % self.cfg.count == 0:
                    self.report()
                if not self.cfg.flood:
                    self.delay.sleep()
        finally:
            signal.signal(signal.SIGINT, previous)

        self.destination.close()
        log.info("finished after %d packets (%d transient retries)", self.state.counter - 1, self.state.retries)
        return self.state

    def report(self, update: bool = True) -> None:
        """Write one rate sample line: timestamp and packets since the last one."""
        counter = self.state.counter
        line = format_report(time.time(), counter - self.state.prev_sent_count)
        print(line, file=self.out if self.out is not None else sys.stdout)
        if update:
            self.state.prev_sent_count = counter

    def _send_one(self) -> None:
        data = self.payload.stamp(self.state.counter)
        try:
            sent = self.destination.send(data)
        except OSError as exc:
            if exc.errno not in TRANSIENT_ERRNOS:
                raise FatalIOError(f"send error: {exc}") from exc
            self.state.retries += 1
            if not self.cfg.flood:
                log.warning("retrying sendto (%d): %s", exc.errno, exc.strerror)
            self.backoff.sleep()
            self.backoff.grow()
            return

        if sent < len(self.payload):
            raise FatalIOError(f"sent size less than expected: {sent} vs {len(self.payload)}")
        if self.capture:
            self.capture.record(data)
        self.backoff.reset()

    def _install_interrupt_handler(self):
        try:
            return signal.signal(signal.SIGINT, self._on_interrupt)
        except (ValueError, OSError) as exc:
            raise ResourceError(f"could not setup SIGINT handle: {exc}") from exc

    def _on_interrupt(self, signum, frame) -> None:
        self.report(update=False)
        raise UserInterrupt(self.state.counter)
