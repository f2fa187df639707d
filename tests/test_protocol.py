"""Tests for D110 protocol implementation."""

import pytest

from d110printer.errors import ProtocolEncodingError
from d110printer.protocol import Packet, PacketType, checksum


class TestPacket:
    """Test packet encoding/decoding."""

    def test_encode_simple(self):
        """Test encoding a simple packet."""
        packet = Packet(command=0x01, data=b"\x01")
        encoded = packet.encode()

        # HEAD(55 55) + CMD(01) + LEN(01) + DATA(01) + CHECKSUM + TAIL(AA AA)
        assert encoded == bytes([0x55, 0x55, 0x01, 0x01, 0x01, 0x01, 0xAA, 0xAA])

    def test_encode_empty_data(self):
        """Test encoding a packet with no data."""
        encoded = Packet(command=0x40).encode()

        assert encoded[:2] == bytes([0x55, 0x55])
        assert encoded[3] == 0x00  # Length = 0
        # Checksum = 0x40 ^ 0x00 = 0x40
        assert encoded[4] == 0x40
        assert encoded[-2:] == bytes([0xAA, 0xAA])
        assert len(encoded) == 7

    def test_encode_dimension_packet(self):
        """Test encoding a 100x50 dimension packet."""
        encoded = Packet(command=0x13, data=bytes([0x00, 0x64, 0x00, 0x32])).encode()

        assert encoded[2] == 0x13
        assert encoded[3] == 0x04
        assert encoded[4:8] == bytes([0x00, 0x64, 0x00, 0x32])
        assert encoded[8] == 0x13 ^ 0x04 ^ 0x64 ^ 0x32

    def test_frame_length(self):
        """Frame is payload plus seven bytes of framing."""
        for size in (0, 1, 19, 255):
            assert len(Packet(0x85, bytes(size)).encode()) == size + 7

    def test_checksum_is_xor_fold(self):
        """Checksum byte equals type ^ len ^ every data byte."""
        data = bytes([0x12, 0x34, 0x56, 0xFF, 0x00])
        encoded = Packet(0x85, data).encode()

        expected = 0x85 ^ len(data)
        for b in data:
            expected ^= b
        assert encoded[4 + len(data)] == expected
        assert checksum(0x85, data) == expected

    def test_max_payload_accepted(self):
        """A 255-byte payload fits the length field."""
        encoded = Packet(0x85, bytes([0xAB]) * 255).encode()
        assert encoded[3] == 0xFF

    def test_payload_too_large_raises(self):
        """A 256-byte payload cannot be encoded."""
        with pytest.raises(ProtocolEncodingError, match="Payload too large"):
            Packet(0x85, bytes(256)).encode()

    def test_command_out_of_range_raises(self):
        """Command codes are one byte."""
        with pytest.raises(ProtocolEncodingError, match="one byte"):
            Packet(0x100, b"").encode()

    def test_packet_is_immutable(self):
        """Packets are frozen once built."""
        packet = Packet(0x01, b"\x01")
        with pytest.raises(AttributeError):
            packet.command = 0x03

    def test_decode_simple(self):
        """Test decoding a valid packet."""
        data = bytes([0x55, 0x55, 0xE3, 0x01, 0x01, 0xE3, 0xAA, 0xAA])
        packet = Packet.decode(data)

        assert packet is not None
        assert packet.command == 0xE3
        assert packet.data == b"\x01"

    def test_decode_invalid_head(self):
        """Test decoding rejects invalid head."""
        data = bytes([0x00, 0x00, 0xE3, 0x01, 0x01, 0xE3, 0xAA, 0xAA])
        assert Packet.decode(data) is None

    def test_decode_invalid_tail(self):
        """Test decoding rejects invalid tail."""
        data = bytes([0x55, 0x55, 0xE3, 0x01, 0x01, 0xE3, 0x00, 0x00])
        assert Packet.decode(data) is None

    def test_decode_invalid_checksum(self):
        """Test decoding rejects invalid checksum."""
        data = bytes([0x55, 0x55, 0xE3, 0x01, 0x01, 0xFF, 0xAA, 0xAA])
        assert Packet.decode(data) is None

    def test_decode_length_mismatch(self):
        """Test decoding rejects a frame whose length byte is wrong."""
        data = bytes([0x55, 0x55, 0xE3, 0x02, 0x01, 0xE2, 0xAA, 0xAA])
        assert Packet.decode(data) is None

    def test_decode_too_short(self):
        """Test decoding rejects too-short data."""
        assert Packet.decode(bytes([0x55, 0x55, 0xC1])) is None

    def test_roundtrip(self):
        """Test encode/decode roundtrip."""
        original = Packet(command=0x85, data=bytes([0x00, 0x07, 0, 0, 0, 1, 0xFF, 0xC0]))
        decoded = Packet.decode(original.encode())

        assert decoded == original

    def test_repr(self):
        assert repr(Packet(0x01, b"\x01")) == "Packet(cmd=0x01, data=01)"


class TestPacketType:
    """Test PacketType enum values."""

    def test_known_commands(self):
        """Verify expected command values."""
        assert PacketType.PRINT_START == 0x01
        assert PacketType.PAGE_START == 0x03
        assert PacketType.SET_DIMENSION == 0x13
        assert PacketType.PRINT_BITMAP_ROW == 0x85
        assert PacketType.PAGE_END == 0xE3
        assert PacketType.PRINT_END == 0xF3
