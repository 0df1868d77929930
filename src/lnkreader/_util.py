"""Internal utility helpers for GUID and FILETIME formatting."""

import struct
from datetime import UTC, datetime, timedelta

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)


def format_guid(data: bytes, off: int = 0) -> str:
    """Format 16 bytes at *off* as an uppercase UUID string (no braces).

    Windows GUIDs are stored in mixed-endian layout:
    uint32-LE, uint16-LE, uint16-LE, 8 raw bytes.
    """
    if len(data) - off < 16:
        return "?"
    d1, d2, d3 = struct.unpack_from("<IHH", data, off)
    d4 = data[off + 8 : off + 10].hex().upper()
    d5 = data[off + 10 : off + 16].hex().upper()
    return f"{d1:08X}-{d2:04X}-{d3:04X}-{d4}-{d5}"


def filetime_to_datetime(ft: int) -> datetime | None:
    """Convert a FILETIME (100ns ticks since 1601-01-01 UTC) to a datetime.

    Returns ``None`` for zero (unset) or values outside the datetime range.
    """
    if ft == 0:
        return None
    try:
        return _FILETIME_EPOCH + timedelta(microseconds=ft // 10)
    except OverflowError:
        return None
