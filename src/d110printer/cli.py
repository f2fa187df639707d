"""
Command-Line Interface for D110 Printer.

Usage:
    d110 scan                  - Scan for printers
    d110 print IMAGE           - Print an image
    d110 preview IMAGE OUTPUT  - Save the label bitmap without printing
    d110 forget                - Forget the cached printer
"""

import asyncio
import re
import sys

import click

from .cache import clear_cache, load_cached_printer, save_printer
from .config import LabelConfig
from .errors import (
    ImageError,
    PrinterBusyError,
    PrinterError,
    ProtocolEncodingError,
    TransportConnectError,
    TransportWriteError,
)
from .printer import D110Printer, render_preview


# Bluetooth MAC address format: XX:XX:XX:XX:XX:XX (hex pairs separated by colons)
BLUETOOTH_MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$")

# macOS CoreBluetooth UUID format: XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX
MACOS_UUID_PATTERN = re.compile(
    r"^[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}$"
)

# Error class -> label of the stage that stopped the print
ERROR_STAGES = [
    (TransportConnectError, "Connection error"),
    (ImageError, "Image error"),
    (ProtocolEncodingError, "Encoding error"),
    (TransportWriteError, "Transport error"),
    (PrinterBusyError, "Printer busy"),
    (PrinterError, "Printer error"),
]


def validate_bluetooth_address(ctx, param, value):
    """Validate Bluetooth address format.

    Accepts:
        - MAC address format: XX:XX:XX:XX:XX:XX (Linux/Windows)
        - UUID format: XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX (macOS)

    Returns:
        The validated address (uppercased for consistency)

    Raises:
        click.BadParameter: If the address format is invalid
    """
    if value is None:
        return None
    if BLUETOOTH_MAC_PATTERN.match(value) or MACOS_UUID_PATTERN.match(value):
        return value.upper()
    raise click.BadParameter(
        f"Invalid Bluetooth address format: '{value}'. "
        "Expected MAC format XX:XX:XX:XX:XX:XX or "
        "macOS UUID format XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX"
    )


def describe_error(error: PrinterError) -> str:
    """Format an error with the stage it stopped at."""
    label = next(text for cls, text in ERROR_STAGES if isinstance(error, cls))
    message = f"{label}: {error}"
    if error.stage is not None:
        message += f" (stopped after {error.stage.name})"
    return message


def build_config(max_width, max_height, chunk_size=None, delay_ms=None) -> LabelConfig:
    """Build a LabelConfig from CLI options, keeping defaults for None."""
    overrides = {
        "max_width": max_width,
        "max_height": max_height,
        "chunk_size": chunk_size,
        "chunk_delay_ms": delay_ms,
    }
    try:
        return LabelConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


async def resolve_address(config: LabelConfig) -> tuple[str, str]:
    """Pick a printer: the cached one if fresh, else the strongest in range.

    Returns:
        (address, name)
    """
    cached = load_cached_printer()
    if cached is not None:
        click.echo(f"Using cached printer {cached.name} [{cached.address}]")
        return cached.address, cached.name

    click.echo(f"Scanning for printers ({config.scan_timeout}s)...")
    info = await D110Printer.scan(
        timeout=config.scan_timeout, name_prefix=config.name_prefix
    )
    if not info:
        raise TransportConnectError(
            f"No printer found with name prefix '{config.name_prefix}'"
        )
    click.echo(f"Found {info[0]}")
    return info[0].address, info[0].name


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
@click.pass_context
def main(ctx, debug):
    """NIIMBOT D110 Label Printer CLI."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@main.command()
@click.option("--timeout", default=10.0, help="Scan timeout in seconds")
@click.option("--prefix", default="D110", help="Advertised name prefix to match")
def scan(timeout, prefix):
    """Scan for D110 printers."""

    async def _scan():
        click.echo(f"Scanning for printers ({timeout}s)...")
        printers = await D110Printer.scan(timeout=timeout, name_prefix=prefix)

        if not printers:
            click.echo("No printers found.")
            return

        click.echo(f"\nFound {len(printers)} printer(s):\n")
        for p in printers:
            click.echo(f"  {p}")

    asyncio.run(_scan())


@main.command("print")
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--address",
    "-a",
    callback=validate_bluetooth_address,
    help="Printer Bluetooth address (if omitted, uses the cached printer or scans)",
)
@click.option("--max-width", type=int, default=None, help="Print width in dots (default 100)")
@click.option("--max-height", type=int, default=None, help="Maximum label length in dots (default 100)")
@click.option("--chunk-size", type=int, default=None, help="Bytes per BLE write (default 160)")
@click.option("--delay-ms", type=float, default=None, help="Pause after each BLE write (default 10)")
@click.pass_context
def print_image(ctx, image, address, max_width, max_height, chunk_size, delay_ms):
    """Print an image file."""
    config = build_config(max_width, max_height, chunk_size, delay_ms)

    async def _print():
        nonlocal address
        name = None
        printer = D110Printer(config)
        printer.set_debug(ctx.obj["debug"])

        try:
            if address is None:
                address, name = await resolve_address(config)

            click.echo(f"Connecting to {address}...")
            await printer.connect(address)

            click.echo(f"Printing {image}...")
            await printer.print_image(image)
            click.echo("Print complete!")
        except PrinterError as e:
            click.echo(describe_error(e), err=True)
            sys.exit(1)
        finally:
            await printer.disconnect()

        save_printer(address, name or config.name_prefix)

    asyncio.run(_print())


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False, writable=True))
@click.option("--max-width", type=int, default=None, help="Print width in dots (default 100)")
@click.option("--max-height", type=int, default=None, help="Maximum label length in dots (default 100)")
def preview(image, output, max_width, max_height):
    """Save the 1-bit label bitmap for IMAGE to OUTPUT."""
    config = build_config(max_width, max_height)

    try:
        label = render_preview(image, config)
    except PrinterError as e:
        click.echo(describe_error(e), err=True)
        sys.exit(1)

    try:
        label.save(output)
    except (ValueError, OSError) as e:
        click.echo(f"Cannot save {output}: {e}", err=True)
        sys.exit(1)
    click.echo(f"Saved {label.width}x{label.height} label to {output}")


@main.command()
def forget():
    """Forget the cached printer."""
    if clear_cache():
        click.echo("Cached printer cleared.")
    else:
        click.echo("No cached printer.")


if __name__ == "__main__":
    main()
