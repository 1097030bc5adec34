"""Pytest configuration and shared fixtures."""

import os
import socket
from typing import Dict, List, Optional

import pytest
from unittest.mock import patch

from udpfling.config import RuntimeConfig


class FakeDestination:
    """
    Stand-in for transport.Destination that records payloads.

    ``failures`` maps a 1-based send call number to the errno that call raises.
    ``short_at`` makes that call report one byte less than requested.
    """

    def __init__(self, failures: Optional[Dict[int, int]] = None, short_at: Optional[int] = None):
        self.family = socket.AF_INET
        self.sockaddr = ("127.0.0.1", 9999)
        self.failures = failures or {}
        self.short_at = short_at
        self.calls = 0
        self.sent: List[bytes] = []
        self.closed = False

    def send(self, data) -> int:
        self.calls += 1
        err = self.failures.get(self.calls)
        if err is not None:
            raise OSError(err, os.strerror(err))
        self.sent.append(bytes(data))
        if self.calls == self.short_at:
            return len(data) - 1
        return len(data)

    def local_address(self):
        return ("127.0.0.1", 40000)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def basic_config():
    """Small, fast configuration for loop tests."""
    return RuntimeConfig(
        host="127.0.0.1",
        port="9999",
        max_send=11,
        count=5,
        delay=10,
        padding=16,
        backoff=1,
        max_backoff=8,
    )


@pytest.fixture
def make_destination():
    """Factory for FakeDestination instances."""
    return FakeDestination


@pytest.fixture
def mock_sleep():
    """Mock time.sleep to prevent delays in tests."""
    with patch("udpfling.pacer.time.sleep") as mock:
        yield mock
