"""
Label and link configuration for the D110 printer.

The D110 prints on 12-15mm tape; the print head covers 100 dots at 203 DPI,
so images are fitted into a 100x100 box and padded to the full head width.
Other label sizes are supported by passing a different LabelConfig.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LabelConfig:
    """Print geometry and BLE write pacing.

    Attributes:
        max_width: Print head width in dots; images are padded to this width
        max_height: Maximum label length in dots
        chunk_size: Maximum bytes per BLE write
        chunk_delay_ms: Pause after every chunk write in milliseconds
        name_prefix: Advertised name prefix used to discover the printer
        scan_timeout: BLE scan timeout in seconds
        write_response: Request a GATT write response for every chunk
    """
    DEFAULT_MAX_WIDTH_PX = 100
    DEFAULT_MAX_HEIGHT_PX = 100
    DEFAULT_CHUNK_SIZE = 160
    DEFAULT_CHUNK_DELAY_MS = 10.0

    max_width: int = DEFAULT_MAX_WIDTH_PX
    max_height: int = DEFAULT_MAX_HEIGHT_PX
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_delay_ms: float = DEFAULT_CHUNK_DELAY_MS
    name_prefix: str = "D110"
    scan_timeout: float = 10.0
    write_response: bool = False

    def __post_init__(self):
        if self.max_width < 1 or self.max_height < 1:
            raise ValueError(
                f"Label dimensions must be positive, got "
                f"{self.max_width}x{self.max_height}"
            )
        # Row index and dimension fields are 16-bit
        if self.max_width > 0xFFFF or self.max_height > 0xFFFF:
            raise ValueError("Label dimensions must fit in 16 bits")
        if self.chunk_size < 1:
            raise ValueError(f"Chunk size must be at least 1, got {self.chunk_size}")
        if self.chunk_delay_ms < 0:
            raise ValueError(f"Chunk delay cannot be negative, got {self.chunk_delay_ms}")
