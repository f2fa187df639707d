"""
Pytest configuration for D110 printer tests.

Provides fixtures shared by the session and printer tests, and a
command-line option for hardware tests.
"""

import pytest
import pytest_asyncio

from d110printer import D110Printer
from d110printer.errors import TransportWriteError
from d110printer.protocol import Packet


class FakeTransport:
    """Records every frame written; optionally rejects one."""

    def __init__(self, fail_when=None):
        self.frames: list[bytes] = []
        self.calls: list[dict] = []
        self.is_connected = True
        self.address = "AA:BB:CC:DD:EE:FF"
        self._fail_when = fail_when

    async def write_chunked(self, data, chunk_size=160, delay_ms=10.0):
        self.calls.append({"chunk_size": chunk_size, "delay_ms": delay_ms})
        if self._fail_when is not None and self._fail_when(Packet.decode(data)):
            raise TransportWriteError("Write failed at chunk 1/1: rejected")
        self.frames.append(bytes(data))

    @property
    def packets(self) -> list[Packet]:
        return [Packet.decode(f) for f in self.frames]

    @property
    def types(self) -> list[int]:
        return [p.command for p in self.packets]


def pytest_addoption(parser):
    """Add command-line options for hardware tests."""
    parser.addoption(
        "--address",
        action="store",
        default=None,
        help="Bluetooth address of the printer for hardware tests",
    )


@pytest.fixture(autouse=True)
def clear_active_devices():
    """Forget device reservations left by tests that never disconnect."""
    yield
    D110Printer._active_devices.clear()


@pytest.fixture
def transport():
    """A connected transport that accepts everything."""
    return FakeTransport()


@pytest.fixture
def failing_transport():
    """Factory for a transport that rejects packets matching a predicate."""
    return FakeTransport


@pytest.fixture
def printer_address(request):
    """Get the printer address from command line."""
    address = request.config.getoption("--address")
    if address is None:
        pytest.skip("No printer address provided (use --address=XX:XX:XX:XX:XX:XX)")
    return address


@pytest_asyncio.fixture
async def connected_printer(printer_address):
    """Provide a connected printer instance."""
    printer = D110Printer()
    printer.set_debug(True)
    await printer.connect(printer_address)

    yield printer

    await printer.disconnect()
