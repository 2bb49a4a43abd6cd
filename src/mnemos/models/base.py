"""Base helpers shared by Mnemos models."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from uuid import uuid4


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def generate_id(prefix: str, separator: str = "_") -> str:
    """Generate a process-unique id from a millisecond timestamp and a random suffix.

    No counter or other shared state is involved, so any number of engines
    and stores can generate ids in the same process.

    Examples:
        generate_id("mem") -> "mem_1760852400123_3f9a0c2b1"
        generate_id("conflict", "-") -> "conflict-1760852400123-3f9a0c2b1"
    """
    millis = time.time_ns() // 1_000_000
    return f"{prefix}{separator}{millis}{separator}{uuid4().hex[:9]}"


def generate_write_id() -> str:
    """Generate the id shared by one remember() call across both stores."""
    return generate_id("mem")
