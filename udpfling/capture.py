"""
Optional pcap recording of sent datagrams.
"""

from __future__ import annotations

import socket

from scapy.all import IP, UDP, IPv6, PcapWriter, Raw  # type: ignore

from .transport import Destination


class PacketCapture:
    """
    Append every datagram handed to record() to a pcap file as IP/UDP.
    """

    def __init__(self, path: str, destination: Destination) -> None:
        self.destination = destination
        self.writer = PcapWriter(path, append=True, sync=True)

    def record(self, payload: bytes) -> None:
        src = self.destination.local_address()
        dst = self.destination.sockaddr
        ip_cls = IPv6 if self.destination.family == socket.AF_INET6 else IP
        frame = ip_cls(src=src[0], dst=dst[0]) / UDP(sport=src[1], dport=dst[1]) / Raw(load=bytes(payload))
        self.writer.write(frame)

    def close(self) -> None:
        self.writer.close()
