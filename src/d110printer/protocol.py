"""
D110 Printer Protocol Implementation.

This module implements packet encoding/decoding for the NIIMBOT D110.

Packet Structure:
    Head:      0x55 0x55 (constant)
    Command:   0x00-0xFF (packet identifier)
    DataLen:   Number of data bytes (one byte, so at most 255)
    Data:      Payload bytes
    Checksum:  XOR of Command, DataLen and every Data byte
    Tail:      0xAA 0xAA (constant)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .errors import ProtocolEncodingError

MAX_PAYLOAD_SIZE = 0xFF


class PacketType(IntEnum):
    """Command codes used by a print job."""
    # Print Job Control
    PRINT_START = 0x01
    PAGE_START = 0x03
    PAGE_END = 0xE3
    PRINT_END = 0xF3

    # Label Configuration
    SET_DIMENSION = 0x13

    # Image Data
    PRINT_BITMAP_ROW = 0x85


def checksum(command: int, data: bytes) -> int:
    """XOR-fold of the command code, the data length and the data bytes."""
    value = command ^ len(data)
    for b in data:
        value ^= b
    return value


@dataclass(frozen=True)
class Packet:
    """Represents a protocol packet."""
    command: int
    data: bytes = b""

    HEAD = bytes([0x55, 0x55])
    TAIL = bytes([0xAA, 0xAA])

    # HEAD(2) + CMD(1) + LEN(1) + CHECKSUM(1) + TAIL(2)
    OVERHEAD = 7

    def encode(self) -> bytes:
        """Encode packet to bytes for transmission.

        Raises:
            ProtocolEncodingError: If the command code is not a byte or the
                payload does not fit the one-byte length field
        """
        if not 0 <= self.command <= 0xFF:
            raise ProtocolEncodingError(
                f"Command code 0x{self.command:X} does not fit in one byte"
            )
        if len(self.data) > MAX_PAYLOAD_SIZE:
            raise ProtocolEncodingError(
                f"Payload too large: {len(self.data)} bytes "
                f"(maximum {MAX_PAYLOAD_SIZE})"
            )

        data = bytes(self.data)
        return (
            self.HEAD
            + bytes([self.command, len(data)])
            + data
            + bytes([checksum(self.command, data)])
            + self.TAIL
        )

    @classmethod
    def decode(cls, data: bytes) -> Optional["Packet"]:
        """Decode bytes into a Packet object."""
        if len(data) < cls.OVERHEAD:
            return None

        # Verify head and tail
        if data[:2] != cls.HEAD or data[-2:] != cls.TAIL:
            return None

        cmd = data[2]
        data_len = data[3]

        if len(data) != cls.OVERHEAD + data_len:
            return None

        payload = bytes(data[4:4 + data_len])
        if checksum(cmd, payload) != data[4 + data_len]:
            return None

        return cls(command=cmd, data=payload)

    def __repr__(self) -> str:
        return f"Packet(cmd=0x{self.command:02X}, data={self.data.hex()})"
