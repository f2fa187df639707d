"""
Exception classes for the D110 printer driver.

Every error raised by this package derives from PrinterError, so callers can
catch one class. The subclass tells which stage stopped the operation:
connecting, encoding, writing, or loading the image.
"""

from typing import Optional


class PrinterError(Exception):
    """Base exception for all printer errors."""

    def __init__(self, message: str, stage: Optional[object] = None):
        super().__init__(message)
        # SessionState reached when the error happened, if inside a session
        self.stage = stage


class ProtocolEncodingError(PrinterError):
    """A packet field does not fit its wire encoding."""

    pass


class RowIndexOutOfRange(ProtocolEncodingError):
    """Row index does not fit in 16 bits."""

    pass


class TransportConnectError(PrinterError):
    """Printer discovery or connection failed."""

    pass


class TransportWriteError(PrinterError):
    """The printer rejected a write, or the link is down."""

    pass


class ImageError(PrinterError):
    """Error processing image for printing."""

    pass


class ImageSizeError(ImageError):
    """Image dimensions exceed safety limits."""

    pass


class SessionStateError(PrinterError):
    """A print session transition was invoked out of order."""

    pass


class PrinterBusyError(PrinterError):
    """Another print session is already active on the device."""

    pass
