"""
D110 Printer Command Definitions.

This module provides builders for the packets of a print job.
Commands are built using the protocol module's packet format.
"""

from typing import Sequence

from .errors import ProtocolEncodingError, RowIndexOutOfRange
from .protocol import Packet, PacketType

MAX_ROW_INDEX = 0xFFFF

# Bytes in front of the packed row: index (2), reserved (3), repeat count (1)
ROW_HEADER_SIZE = 6


def pack_row(row: Sequence[int]) -> bytes:
    """
    Pack binary pixels into bytes.

    MSB is leftmost pixel. The last byte is padded with 0 (white) bits.
    """
    result = bytearray((len(row) + 7) // 8)
    for col, value in enumerate(row):
        if value:
            result[col >> 3] |= 0x80 >> (col & 7)
    return bytes(result)


def encode_row(row_index: int, row: Sequence[int]) -> Packet:
    """
    Build a bitmap row packet.

    Args:
        row_index: Row number (0-based), sent big-endian
        row: Row pixels, 1 = black

    Raises:
        RowIndexOutOfRange: If row_index does not fit in 16 bits
    """
    if not 0 <= row_index <= MAX_ROW_INDEX:
        raise RowIndexOutOfRange(
            f"Row index {row_index} out of range (0-{MAX_ROW_INDEX})"
        )

    header = bytes([
        (row_index >> 8) & 0xFF, row_index & 0xFF,
        0, 0, 0,  # reserved
        1,        # repeat count
    ])
    return Packet(PacketType.PRINT_BITMAP_ROW, header + pack_row(row))


def _u16be(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ProtocolEncodingError(f"{name} {value} does not fit in 16 bits")
    return bytes([(value >> 8) & 0xFF, value & 0xFF])


class Commands:
    """Packet builders for D110 print jobs."""

    @staticmethod
    def print_start() -> Packet:
        """Start a print job."""
        return Packet(PacketType.PRINT_START, b"\x01")

    @staticmethod
    def page_start() -> Packet:
        """Start a page within the job."""
        return Packet(PacketType.PAGE_START, b"\x01")

    @staticmethod
    def set_dimension(width: int, height: int) -> Packet:
        """
        Set page size in pixels.

        Args:
            width: Row length in pixels
            height: Number of rows
        """
        # Pack as big-endian 16-bit values
        data = _u16be("Width", width) + _u16be("Height", height)
        return Packet(PacketType.SET_DIMENSION, data)

    @staticmethod
    def page_end() -> Packet:
        """Signal end of current page/label."""
        return Packet(PacketType.PAGE_END, b"\x01")

    @staticmethod
    def print_end() -> Packet:
        """End a print job."""
        return Packet(PacketType.PRINT_END, b"\x01")
