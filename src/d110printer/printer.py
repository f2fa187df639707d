"""
High-Level D110 Printer Interface.

Provides a simple API for printing labels on the NIIMBOT D110 printer.
"""

from typing import Optional

from PIL import Image

from .config import LabelConfig
from .connection import BLEConnection, PrinterInfo
from .errors import (
    ImageError,
    PrinterBusyError,
    TransportConnectError,
)
from .image import ImageSource, MonochromeImage, load_image, normalize
from .session import PrintSession


class D110Printer:
    """
    High-level interface to the D110 label printer.

    Only one session may hold a device at a time. The address is reserved
    before the BLE link is opened and released on disconnect, so a second
    connect() or print_image() on the same address raises PrinterBusyError
    instead of opening a competing link.
    """

    # Addresses reserved by a connected or printing instance
    _active_devices: set = set()

    def __init__(self, config: Optional[LabelConfig] = None):
        """
        Initialize printer interface.

        Args:
            config: Label geometry and write pacing (default: D110 defaults)
        """
        self.config = config or LabelConfig()
        self.connection = BLEConnection(write_response=self.config.write_response)
        self.last_session: Optional[PrintSession] = None
        self._reserved: Optional[str] = None
        self._debug = False

    def set_debug(self, enabled: bool):
        """Enable/disable debug output."""
        self._debug = enabled

    def _log(self, message: str):
        """Print debug message if enabled."""
        if self._debug:
            print(f"[D110] {message}")

    @classmethod
    async def scan(
        cls, timeout: float = 10.0, name_prefix: str = BLEConnection.DEFAULT_NAME_PREFIX
    ) -> list[PrinterInfo]:
        """Scan for available D110 printers."""
        return await BLEConnection.scan(name_prefix, timeout)

    @classmethod
    def is_busy(cls, address: str) -> bool:
        """Check whether a print session is active on address."""
        return address.upper() in cls._active_devices

    def reserve(self, address: str):
        """
        Claim address for this instance.

        Raises:
            PrinterBusyError: If another instance holds the address
        """
        device = address.upper()
        if self._reserved == device:
            return
        if device in self._active_devices:
            raise PrinterBusyError(f"A print is already in progress on {device}")
        self.release()
        self._active_devices.add(device)
        self._reserved = device

    def release(self):
        """Give up the address claimed by reserve(), if any."""
        if self._reserved is not None:
            self._active_devices.discard(self._reserved)
            self._reserved = None

    async def connect(self, address: Optional[str] = None) -> str:
        """
        Connect to a printer.

        Args:
            address: Bluetooth address; scans by name prefix when omitted

        Returns:
            The address connected to

        Raises:
            TransportConnectError: If discovery or connection fails
            PrinterBusyError: If another session holds the address
        """
        if address is None:
            self._log(f"Scanning for '{self.config.name_prefix}' printers...")
            info = await BLEConnection.find_printer(
                self.config.name_prefix, self.config.scan_timeout
            )
            self._log(f"Found {info}")
            address = info.address

        self.reserve(address)
        self._log(f"Connecting to {address}...")
        try:
            await self.connection.connect(address)
        except BaseException:
            self.release()
            raise
        self._log("Connected")
        return address

    async def disconnect(self):
        """Disconnect from the printer and release its address."""
        try:
            await self.connection.disconnect()
        finally:
            self.release()
        self._log("Disconnected")

    def prepare(self, image: ImageSource) -> MonochromeImage:
        """
        Load an image and normalize it to the label.

        Raises:
            ImageError: If image cannot be loaded or is invalid
        """
        img = load_image(image)
        self._log(f"Source image: {img.width}x{img.height} pixels")

        try:
            mono = normalize(img, self.config.max_width, self.config.max_height)
        except Exception as e:
            raise ImageError(f"Failed to process image: {e}") from e

        self._log(f"Label bitmap: {mono.width}x{mono.height} pixels")
        return mono

    async def print_image(self, image: ImageSource) -> bool:
        """
        Print an image as a label.

        Args:
            image: Image source (path, bytes, or PIL Image)

        Returns:
            True if the print job completed

        Raises:
            TransportConnectError: If not connected
            ImageError: If image cannot be loaded
            PrinterBusyError: If a session is already active on this device
            TransportWriteError: If a write is rejected mid-job
            ProtocolEncodingError: If a packet cannot be encoded
        """
        if not self.connection.is_connected:
            raise TransportConnectError("Not connected to printer")

        mono = self.prepare(image)

        device = (self.connection.address or "").upper()
        held = self._reserved == device
        if not held:
            self.reserve(device)
        try:
            session = PrintSession(self.connection, mono, self.config)
            session.set_debug(self._debug)
            self.last_session = session
            await session.run()
        finally:
            if not held:
                self.release()

        return True

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to a printer."""
        return self.connection.is_connected


async def print_image(
    image: ImageSource,
    address: Optional[str] = None,
    config: Optional[LabelConfig] = None,
    debug: bool = False,
) -> bool:
    """
    Convenience function to connect, print one image and disconnect.

    Args:
        image: Image source (path, bytes, or PIL Image)
        address: Printer Bluetooth address; scans when omitted
        config: Label geometry and write pacing
        debug: Print debug output

    Returns:
        True if successful

    Raises:
        PrinterError: Subclass identifying the stage that failed
    """
    printer = D110Printer(config)
    printer.set_debug(debug)
    if address is not None:
        printer.reserve(address)

    try:
        await printer.connect(address)
        return await printer.print_image(image)
    finally:
        try:
            await printer.disconnect()
        finally:
            printer.release()


def render_preview(
    image: ImageSource, config: Optional[LabelConfig] = None
) -> Image.Image:
    """Return the 1-bit label exactly as it would be printed."""
    return D110Printer(config).prepare(image).to_image()
