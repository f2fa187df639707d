"""
Print Session for the D110 printer.

A print job is a fixed command sequence. Each step is a method that checks
the current state, sends its packet(s), and advances the state:

    DISCONNECTED -> CONNECTED -> PRINT_STARTED -> PAGE_STARTED
        -> DIMENSIONS_SET -> ROWS_STREAMING -> PAGE_ENDED -> PRINT_ENDED

The printer has no abort command, so a failure leaves the session where it
stopped and nothing else is sent.
"""

from enum import Enum
from typing import Optional, Protocol

from .commands import Commands, encode_row
from .config import LabelConfig
from .errors import PrinterError, SessionStateError
from .image import MonochromeImage
from .protocol import Packet


class SessionState(Enum):
    """Print session states, in protocol order."""
    DISCONNECTED = 0
    CONNECTED = 1
    PRINT_STARTED = 2
    PAGE_STARTED = 3
    DIMENSIONS_SET = 4
    ROWS_STREAMING = 5
    PAGE_ENDED = 6
    PRINT_ENDED = 7


class Transport(Protocol):
    """What a session needs from the link (BLEConnection satisfies it)."""

    @property
    def is_connected(self) -> bool: ...

    async def write_chunked(
        self, data: bytes, chunk_size: int = ..., delay_ms: float = ...
    ) -> None: ...


class PrintSession:
    """Streams one MonochromeImage through the print command sequence."""

    def __init__(
        self,
        transport: Transport,
        image: MonochromeImage,
        config: Optional[LabelConfig] = None,
    ):
        self.transport = transport
        self.image = image
        self.config = config or LabelConfig()
        self.state = SessionState.DISCONNECTED
        self.failed_at: Optional[str] = None
        self.frames_sent = 0
        self.rows_sent = 0
        self._debug = False

    def set_debug(self, enabled: bool):
        """Enable/disable debug output."""
        self._debug = enabled

    def _log(self, message: str):
        """Print debug message if enabled."""
        if self._debug:
            print(f"[D110] {message}")

    def _require(self, step: str, expected: SessionState):
        if self.state is not expected:
            raise SessionStateError(
                f"Cannot {step} in state {self.state.name} "
                f"(expected {expected.name})",
                stage=self.state,
            )

    async def _send(self, step: str, packet: Packet):
        """Encode and write one packet, recording the step on failure."""
        try:
            frame = packet.encode()
            await self.transport.write_chunked(
                frame,
                chunk_size=self.config.chunk_size,
                delay_ms=self.config.chunk_delay_ms,
            )
        except PrinterError as e:
            self.failed_at = step
            if e.stage is None:
                e.stage = self.state
            raise
        self.frames_sent += 1

    def attach(self):
        """Enter CONNECTED once the transport link is up."""
        self._require("attach", SessionState.DISCONNECTED)
        if not self.transport.is_connected:
            self.failed_at = "attach"
            raise SessionStateError("Transport is not connected", stage=self.state)
        self.state = SessionState.CONNECTED

    async def start_print(self):
        """Send PRINT_START (0x01)."""
        self._require("start print", SessionState.CONNECTED)
        await self._send("start print", Commands.print_start())
        self.state = SessionState.PRINT_STARTED

    async def start_page(self):
        """Send PAGE_START (0x03)."""
        self._require("start page", SessionState.PRINT_STARTED)
        await self._send("start page", Commands.page_start())
        self.state = SessionState.PAGE_STARTED

    async def set_dimensions(self):
        """Send SET_DIMENSION (0x13) with the image width and height."""
        self._require("set dimensions", SessionState.PAGE_STARTED)
        await self._send(
            "set dimensions",
            Commands.set_dimension(self.image.width, self.image.height),
        )
        self.state = SessionState.DIMENSIONS_SET

    async def stream_rows(self):
        """Send one PRINT_BITMAP_ROW (0x85) per row, top to bottom.

        The state is ROWS_STREAMING from the first row on, so a failure at
        any row reports that stage.
        """
        self._require("stream rows", SessionState.DIMENSIONS_SET)
        self._log(f"Sending {self.image.height} rows...")
        self.state = SessionState.ROWS_STREAMING

        for y, row in enumerate(self.image.rows()):
            step = f"row {y}"
            try:
                packet = encode_row(y, row)
            except PrinterError as e:
                self.failed_at = step
                e.stage = self.state
                raise
            await self._send(step, packet)
            self.rows_sent += 1

    async def end_page(self):
        """Send PAGE_END (0xE3)."""
        self._require("end page", SessionState.ROWS_STREAMING)
        if self.rows_sent != self.image.height:
            raise SessionStateError(
                f"Cannot end page after {self.rows_sent} of "
                f"{self.image.height} rows",
                stage=self.state,
            )
        await self._send("end page", Commands.page_end())
        self.state = SessionState.PAGE_ENDED

    async def end_print(self):
        """Send PRINT_END (0xF3)."""
        self._require("end print", SessionState.PAGE_ENDED)
        await self._send("end print", Commands.print_end())
        self.state = SessionState.PRINT_ENDED

    async def run(self) -> SessionState:
        """
        Run the whole sequence.

        Returns:
            SessionState.PRINT_ENDED on success

        Raises:
            PrinterError: From the first step that fails; later steps are
                not attempted
        """
        if self.state is SessionState.DISCONNECTED:
            self.attach()

        self._log(f"Image size: {self.image.width}x{self.image.height} pixels")
        await self.start_print()
        await self.start_page()
        await self.set_dimensions()
        await self.stream_rows()
        await self.end_page()
        await self.end_print()
        self._log(f"Print job complete ({self.frames_sent} frames)")
        return self.state
