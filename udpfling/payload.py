"""
Reusable datagram body with an in-place sequence field.
"""

import struct

from .errors import ResourceError

FILL_BYTE = 0xFF
_SEQUENCE = struct.Struct("!I")


class PayloadBuffer:
    """
    Fixed-size datagram body. Bytes 0-3 hold the big-endian sequence number,
    the rest stays 0xFF (ones, as zeros might compress).
    """

    def __init__(self, size: int) -> None:
        if size < _SEQUENCE.size:
            raise ValueError(f"payload size must be at least {_SEQUENCE.size} bytes")
        try:
            self.data = bytearray([FILL_BYTE]) * size
        except (MemoryError, OverflowError) as exc:
            raise ResourceError(f"could not malloc payload of {size} bytes: {exc!r}") from exc

    def __len__(self) -> int:
        return len(self.data)

    def stamp(self, sequence: int) -> bytearray:
        _SEQUENCE.pack_into(self.data, 0, sequence)
        return self.data


def read_sequence(datagram: bytes) -> int:
    return _SEQUENCE.unpack_from(datagram, 0)[0]
