"""
Rate-controlled UDP packet sender for loss and throughput testing.
"""

__all__ = [
    "cli",
    "config",
    "errors",
    "capture",
    "pacer",
    "payload",
    "sender",
    "transport",
]

__version__ = "0.1.0"
