"""NIIMBOT D110 Label Printer Driver for Linux/macOS."""

__version__ = "0.1.0"

from .commands import Commands, encode_row, pack_row
from .config import LabelConfig
from .connection import BLEConnection, PrinterInfo
from .errors import (
    ImageError,
    ImageSizeError,
    PrinterBusyError,
    PrinterError,
    ProtocolEncodingError,
    RowIndexOutOfRange,
    SessionStateError,
    TransportConnectError,
    TransportWriteError,
)
from .image import (
    MAX_IMAGE_DIMENSION,
    MAX_IMAGE_PIXELS,
    MonochromeImage,
    fit_to_bounds,
    load_image,
    normalize,
    pad_to_width,
    to_monochrome,
)
from .printer import D110Printer, print_image, render_preview
from .protocol import Packet, PacketType
from .session import PrintSession, SessionState

__all__ = [
    "D110Printer",
    "print_image",
    "render_preview",
    "LabelConfig",
    "BLEConnection",
    "PrinterInfo",
    "Packet",
    "PacketType",
    "Commands",
    "encode_row",
    "pack_row",
    "MonochromeImage",
    "fit_to_bounds",
    "pad_to_width",
    "to_monochrome",
    "normalize",
    "load_image",
    "MAX_IMAGE_DIMENSION",
    "MAX_IMAGE_PIXELS",
    "PrintSession",
    "SessionState",
    "PrinterError",
    "ProtocolEncodingError",
    "RowIndexOutOfRange",
    "TransportConnectError",
    "TransportWriteError",
    "ImageError",
    "ImageSizeError",
    "SessionStateError",
    "PrinterBusyError",
]
