"""lnkreader -- decode Windows .lnk files (MS-SHLLINK) and resolve their targets."""

__version__ = "0.1.0"

from ._constants import ShowCommand
from ._cursor import BufferSource, ByteCursor, ByteSource, StreamSource
from ._platform import IDENTITY_PLATFORM, PlatformServices
from .parser import (
    FormatError,
    Header,
    HotKey,
    LinkInfo,
    NetworkLink,
    ShellLink,
    TruncatedDataError,
    Volume,
    parse_lnk,
)
from .resolver import resolve_target

__all__ = [
    "parse_lnk",
    "resolve_target",
    "ShellLink",
    "Header",
    "HotKey",
    "LinkInfo",
    "Volume",
    "NetworkLink",
    "ShowCommand",
    "ByteSource",
    "BufferSource",
    "StreamSource",
    "ByteCursor",
    "PlatformServices",
    "IDENTITY_PLATFORM",
    "FormatError",
    "TruncatedDataError",
    "__version__",
]
