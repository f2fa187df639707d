"""
BLE Connection Handler for D110 Printer.

Handles Bluetooth Low Energy communication using the Bleak library.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from bleak import BleakClient, BleakScanner

from .errors import TransportConnectError, TransportWriteError


@dataclass
class PrinterInfo:
    """Information about a discovered printer.

    Attributes:
        name: Device advertised name (e.g., "D110-G123456789")
        address: MAC address on Linux/Windows, CoreBluetooth UUID on macOS
        rssi: Signal strength in dB
    """
    name: str
    address: str
    rssi: int

    def __str__(self) -> str:
        return f"{self.name} [{self.address}] RSSI: {self.rssi} dB"


class BLEConnection:
    """Manages BLE connection to a D110 printer."""

    DEFAULT_NAME_PREFIX = "D110"

    # Vendor service and its writable characteristic
    SERVICE_UUID = "e7810a71-73ae-499d-8c15-faa9aef0c3f2"
    CHAR_WRITE = "bef8d6c9-9c21-4c9e-b632-bd58c1009f9f"

    # Default chunk size and pacing for BLE writes
    DEFAULT_CHUNK_SIZE = 160
    DEFAULT_DELAY_MS = 10.0

    def __init__(self, write_response: bool = False):
        self.client: Optional[BleakClient] = None
        self.address: Optional[str] = None
        self.write_response = write_response
        # One writer at a time; chunks of different frames must not interleave
        self._write_lock = asyncio.Lock()

    @classmethod
    async def scan(
        cls,
        name_prefix: str = DEFAULT_NAME_PREFIX,
        timeout: float = 10.0,
    ) -> list[PrinterInfo]:
        """Scan for printers whose advertised name starts with name_prefix."""
        printers = []
        devices = await BleakScanner.discover(timeout=timeout, return_adv=True)

        for device, adv_data in devices.values():
            name = device.name or adv_data.local_name or ""
            if name.upper().startswith(name_prefix.upper()):
                printers.append(PrinterInfo(
                    name=name,
                    address=device.address,
                    rssi=adv_data.rssi if adv_data.rssi is not None else -100,
                ))

        return sorted(printers, key=lambda p: p.rssi, reverse=True)

    @classmethod
    async def find_printer(
        cls,
        name_prefix: str = DEFAULT_NAME_PREFIX,
        timeout: float = 10.0,
    ) -> PrinterInfo:
        """
        Return the strongest printer matching name_prefix.

        Raises:
            TransportConnectError: If scanning fails or finds nothing
        """
        try:
            printers = await cls.scan(name_prefix, timeout)
        except Exception as e:
            raise TransportConnectError(f"Scan failed: {e}") from e

        if not printers:
            raise TransportConnectError(
                f"No printer found with name prefix '{name_prefix}'"
            )
        return printers[0]

    async def connect(self, address: str) -> None:
        """
        Connect to a printer by address.

        Raises:
            TransportConnectError: If the link cannot be established or the
                printer does not expose the D110 write characteristic
        """
        self.client = BleakClient(address)
        self.address = address

        try:
            await self.client.connect()
        except Exception as e:
            self.client = None
            raise TransportConnectError(f"Failed to connect to {address}: {e}") from e

        if self.client.services.get_characteristic(self.CHAR_WRITE) is None:
            await self.disconnect()
            raise TransportConnectError(
                f"{address} has no write characteristic {self.CHAR_WRITE} "
                f"(service {self.SERVICE_UUID})"
            )

    async def disconnect(self):
        """Disconnect from the printer. Safe to call when not connected."""
        client = self.client
        self.client = None
        if client and client.is_connected:
            await client.disconnect()

    async def write(self, data: bytes) -> None:
        """Write a single chunk to the printer."""
        if not self.is_connected:
            raise TransportWriteError("Not connected to printer")

        try:
            await self.client.write_gatt_char(
                self.CHAR_WRITE,
                data,
                response=self.write_response,
            )
        except Exception as e:
            raise TransportWriteError(f"Write failed: {e}") from e

    async def write_chunked(
        self,
        data: bytes,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        delay_ms: float = DEFAULT_DELAY_MS,
    ) -> None:
        """
        Write data to the printer in chunks.

        Chunks go out strictly in order, each one awaited, with a pause of
        delay_ms after every chunk so consecutive frames are paced too.

        Args:
            data: Data to write (usually one encoded frame)
            chunk_size: Maximum bytes per chunk
            delay_ms: Delay after each chunk in milliseconds

        Raises:
            TransportWriteError: If not connected or any chunk is rejected
        """
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be at least 1, got {chunk_size}")

        total_chunks = (len(data) + chunk_size - 1) // chunk_size

        async with self._write_lock:
            for i in range(0, len(data), chunk_size):
                chunk = data[i:i + chunk_size]
                chunk_num = i // chunk_size + 1

                try:
                    await self.write(chunk)
                except TransportWriteError as e:
                    raise TransportWriteError(
                        f"Write failed at chunk {chunk_num}/{total_chunks}: {e}"
                    ) from e

                if delay_ms > 0:
                    await asyncio.sleep(delay_ms / 1000.0)

    @property
    def is_connected(self) -> bool:
        """Check if currently connected."""
        return self.client is not None and self.client.is_connected
