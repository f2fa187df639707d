"""
Last-used printer cache.

Remembers the address of the printer that last completed a print, so the CLI
can skip the BLE scan. Stored as JSON under $XDG_CONFIG_HOME/d110 (default
~/.config/d110) and ignored once older than the TTL.
"""

import json
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

DEFAULT_TTL_SECONDS = 24 * 60 * 60

CACHE_FILENAME = "last_printer.json"


@dataclass
class CachedPrinter:
    """Cached printer information."""

    address: str
    name: str
    last_used: float  # Unix timestamp

    def age(self, now: Optional[float] = None) -> float:
        """Seconds since the printer was last used."""
        return (time.time() if now is None else now) - self.last_used


def cache_dir() -> Path:
    """Directory holding the cache file."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "d110"


def cache_path() -> Path:
    return cache_dir() / CACHE_FILENAME


def load_cached_printer(ttl_seconds: int = DEFAULT_TTL_SECONDS) -> Optional[CachedPrinter]:
    """Return the cached printer, or None if missing, unreadable or stale."""
    path = cache_path()
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text())
        cached = CachedPrinter(
            address=str(data["address"]),
            name=str(data["name"]),
            last_used=float(data["last_used"]),
        )
    except (OSError, ValueError, KeyError, TypeError):
        # Corrupt cache is the same as no cache
        return None

    if cached.age() > ttl_seconds:
        return None
    return cached


def save_printer(address: str, name: str) -> CachedPrinter:
    """Record address as the last-used printer."""
    cached = CachedPrinter(address=address, name=name, last_used=time.time())
    path = cache_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write then rename
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(asdict(cached), indent=2))
    tmp.replace(path)
    return cached


def clear_cache() -> bool:
    """Delete the cache. Returns False if there was nothing to delete."""
    path = cache_path()
    if not path.exists():
        return False
    path.unlink()
    return True
