"""Bounds-checked readers over in-memory buffers and binary streams.

Every decoder in :mod:`lnkreader.parser` reads through a :class:`ByteCursor`;
nothing indexes raw bytes directly, so all bounds checking happens here.
"""

import struct
from abc import ABC, abstractmethod
from typing import BinaryIO

from ._errors import TruncatedDataError

_FIXED_FORMATS = {1: "B", 2: "H", 4: "I", 8: "Q"}


# ---------------------------------------------------------------------------
# Byte sources
# ---------------------------------------------------------------------------
class ByteSource(ABC):
    """Sequential supplier of bytes with a read position."""

    @property
    @abstractmethod
    def position(self) -> int:
        """Number of bytes consumed so far."""

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Return exactly *size* bytes and advance past them."""

    @abstractmethod
    def peek(self, size: int) -> bytes:
        """Return exactly *size* bytes without advancing."""

    @abstractmethod
    def peek_remaining(self) -> bytes:
        """Return everything after the current position without advancing."""

    def _short(self, size: int, available: int) -> TruncatedDataError:
        return TruncatedDataError(
            f"Requested {size} bytes at offset {self.position}, "
            f"only {available} available"
        )


class BufferSource(ByteSource):
    """Byte source over a fully materialized buffer."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def _check(self, size: int) -> None:
        available = len(self._data) - self._pos
        if size < 0 or size > available:
            raise self._short(size, available)

    def read(self, size: int) -> bytes:
        self._check(size)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def peek(self, size: int) -> bytes:
        self._check(size)
        return self._data[self._pos : self._pos + size]

    def peek_remaining(self) -> bytes:
        return self._data[self._pos :]


class StreamSource(ByteSource):
    """Byte source over a binary file object, buffering only what peeks need.

    The stream is not closed by this class; the caller owns the handle.
    """

    __slots__ = ("_fp", "_pending", "_pos")

    def __init__(self, fp: BinaryIO) -> None:
        self._fp = fp
        self._pending = b""
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def _fill(self, size: int) -> None:
        while len(self._pending) < size:
            chunk = self._fp.read(size - len(self._pending))
            if not chunk:
                break
            self._pending += chunk
        if size < 0 or len(self._pending) < size:
            raise self._short(size, len(self._pending))

    def read(self, size: int) -> bytes:
        self._fill(size)
        chunk = self._pending[:size]
        self._pending = self._pending[size:]
        self._pos += size
        return chunk

    def peek(self, size: int) -> bytes:
        self._fill(size)
        return self._pending[:size]

    def peek_remaining(self) -> bytes:
        self._pending += self._fp.read()
        return self._pending


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------
class ByteCursor:
    """Little-endian reader over a :class:`ByteSource`.

    ``read_*`` methods peek, ``eat_*`` methods consume.  Any request larger
    than what is left raises :class:`TruncatedDataError`.
    """

    __slots__ = ("_source",)

    def __init__(self, source: ByteSource | bytes | bytearray | memoryview) -> None:
        if not isinstance(source, ByteSource):
            source = BufferSource(source)
        self._source = source

    @property
    def position(self) -> int:
        return self._source.position

    @property
    def remaining(self) -> int:
        return len(self._source.peek_remaining())

    # -- fixed-width integers --
    @staticmethod
    def _unpack(raw: bytes, width: int, signed: bool) -> int:
        fmt = _FIXED_FORMATS[width]
        if signed:
            fmt = fmt.lower()
        return struct.unpack("<" + fmt, raw)[0]

    def read_fixed(self, width: int, *, signed: bool = False) -> int:
        """Decode a *width*-byte integer at the current position without advancing."""
        return self._unpack(self._source.peek(width), width, signed)

    def eat_fixed(self, width: int, *, signed: bool = False) -> int:
        """Decode a *width*-byte integer and advance past it."""
        return self._unpack(self._source.read(width), width, signed)

    def eat_u16(self) -> int:
        return self.eat_fixed(2)

    def eat_u32(self) -> int:
        return self.eat_fixed(4)

    # -- slices --
    def eat_slice(self, size: int) -> bytes:
        return self._source.read(size)

    def skip(self, size: int) -> None:
        self._source.read(size)

    def eat_cursor(self, size: int) -> "ByteCursor":
        """Consume *size* bytes and return a new cursor confined to them."""
        return ByteCursor(self.eat_slice(size))

    def eat_utf16(self, count: int) -> str:
        """Consume *count* UTF-16LE code units and decode them."""
        return self.eat_slice(count * 2).decode("utf-16-le", errors="replace")

    def at(self, offset: int) -> "ByteCursor":
        """Return a new cursor starting *offset* bytes past the current position."""
        rest = self._source.peek_remaining()
        if offset > len(rest):
            raise TruncatedDataError(
                f"Offset 0x{offset:X} lies outside a {len(rest)}-byte record"
            )
        return ByteCursor(rest[offset:])

    # -- null-terminated strings --
    def read_cstring_ascii(self) -> bytes:
        """Return the 8-bit string up to the next NUL without advancing."""
        rest = self._source.peek_remaining()
        end = rest.find(b"\x00")
        if end < 0:
            raise TruncatedDataError(
                f"Could not read null-terminated string at offset {self.position}"
            )
        return rest[:end]

    def read_cstring_utf16(self) -> str:
        """Return the UTF-16LE string up to the next NUL code unit without advancing.

        A trailing odd byte is ignored.
        """
        rest = self._source.peek_remaining()
        for pos in range(0, len(rest) - 1, 2):
            if rest[pos] == 0 and rest[pos + 1] == 0:
                return rest[:pos].decode("utf-16-le", errors="replace")
        raise TruncatedDataError(
            f"Could not read null-terminated wide string at offset {self.position}"
        )
