"""Tests for row encoding and command builders."""

import pytest

from d110printer.commands import Commands, encode_row, pack_row
from d110printer.errors import ProtocolEncodingError, RowIndexOutOfRange
from d110printer.protocol import PacketType


class TestPackRow:
    """Test bit packing of binary rows."""

    def test_full_byte(self):
        assert pack_row([1] * 8) == bytes([0xFF])

    def test_alternating(self):
        """Pattern: B W B W B W B W = 10101010 = 0xAA."""
        assert pack_row([1, 0] * 4) == bytes([0xAA])

    def test_msb_is_leftmost(self):
        assert pack_row([1, 0, 0, 0, 0, 0, 0, 0]) == bytes([0x80])
        assert pack_row([0, 0, 0, 0, 0, 0, 0, 1]) == bytes([0x01])

    def test_partial_byte_padded_with_zero(self):
        """12 black pixels = 11111111 11110000."""
        assert pack_row([1] * 12) == bytes([0xFF, 0xF0])

    def test_empty_row(self):
        assert pack_row([]) == b""


class TestEncodeRow:
    """Test bitmap row packets."""

    def test_ten_pixel_black_row(self):
        """10 marked pixels pack to FF C0."""
        packet = encode_row(0, [1] * 10)

        assert packet.command == PacketType.PRINT_BITMAP_ROW
        assert packet.data == bytes([0, 0, 0, 0, 0, 1, 0xFF, 0xC0])

    def test_row_index_big_endian(self):
        packet = encode_row(0x0102, [0] * 8)
        assert packet.data[:2] == bytes([0x01, 0x02])

    def test_header_layout(self):
        """Index, three reserved zeros, repeat count 1."""
        packet = encode_row(7, [0] * 8)
        assert packet.data[:6] == bytes([0x00, 0x07, 0x00, 0x00, 0x00, 0x01])

    @pytest.mark.parametrize("width", [1, 7, 8, 9, 50, 96, 100, 101])
    def test_payload_length(self, width):
        """Payload is 6 header bytes plus ceil(width / 8)."""
        packet = encode_row(3, [1] * width)
        assert len(packet.data) == 6 + (width + 7) // 8

    def test_max_row_index(self):
        packet = encode_row(0xFFFF, [1])
        assert packet.data[:2] == bytes([0xFF, 0xFF])

    def test_row_index_too_large_raises(self):
        with pytest.raises(RowIndexOutOfRange):
            encode_row(0x10000, [1])

    def test_negative_row_index_raises(self):
        with pytest.raises(RowIndexOutOfRange):
            encode_row(-1, [1])

    def test_row_index_error_is_encoding_error(self):
        assert issubclass(RowIndexOutOfRange, ProtocolEncodingError)

    def test_wide_row_fails_at_encode(self):
        """Rows wider than the length byte allows fail when framed."""
        packet = encode_row(0, [1] * (250 * 8))
        with pytest.raises(ProtocolEncodingError, match="Payload too large"):
            packet.encode()


class TestCommands:
    """Test control packet builders."""

    def test_control_packets(self):
        assert Commands.print_start().command == 0x01
        assert Commands.page_start().command == 0x03
        assert Commands.page_end().command == 0xE3
        assert Commands.print_end().command == 0xF3
        for packet in (
            Commands.print_start(),
            Commands.page_start(),
            Commands.page_end(),
            Commands.print_end(),
        ):
            assert packet.data == b"\x01"

    def test_set_dimension_big_endian(self):
        packet = Commands.set_dimension(100, 0x0132)
        assert packet.command == 0x13
        assert packet.data == bytes([0x00, 0x64, 0x01, 0x32])

    def test_set_dimension_overflow_raises(self):
        with pytest.raises(ProtocolEncodingError, match="16 bits"):
            Commands.set_dimension(0x10000, 10)
