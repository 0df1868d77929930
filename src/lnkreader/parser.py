"""Parse Windows .lnk files (MS-SHLLINK) into read-only structured data."""

import logging
import ntpath
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from ._constants import (
    DRIVE_TYPES,
    HEADER_SIZE,
    HOTKEY_MOD,
    LINK_CLSID,
    LINK_INFO_DEFAULT_HEADER_SIZE,
    LINK_INFO_MIN_EXTENDED_HEADER_SIZE,
    NETWORK_LINK_MIN_SIZE,
    STRING_SECTIONS,
    VK_KEYS,
    VOLUME_MIN_SIZE,
    VOLUME_UNICODE_LABEL_SENTINEL,
    WNNC_NET_TYPES,
    LinkFlags,
    LinkInfoFlags,
    NetworkLinkFlags,
    ShowCommand,
)
from ._cursor import BufferSource, ByteCursor, ByteSource, StreamSource
from ._errors import FormatError, TruncatedDataError
from ._platform import DEFAULT_PLATFORM, PlatformServices
from ._util import filetime_to_datetime, format_guid
from .resolver import resolve_target

logger = logging.getLogger(__name__)

__all__ = [
    "FormatError",
    "TruncatedDataError",
    "HotKey",
    "Header",
    "LinkInfoHeader",
    "Volume",
    "NetworkLink",
    "LinkInfo",
    "StringData",
    "ShellLink",
    "parse_lnk",
]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class HotKey:
    """HotKeyFlags: low byte is the virtual key, high byte the modifiers."""

    vk: int = 0
    modifiers: int = 0

    @classmethod
    def from_raw(cls, raw: int) -> "HotKey":
        return cls(vk=raw & 0xFF, modifiers=(raw >> 8) & 0xFF)

    def __bool__(self) -> bool:
        return bool(self.vk or self.modifiers)

    def __str__(self) -> str:
        mod_parts = [n for b, n in HOTKEY_MOD.items() if self.modifiers & b]
        vk_name = VK_KEYS.get(self.vk, f"0x{self.vk:02X}") if self.vk else ""
        return "+".join(mod_parts + ([vk_name] if vk_name else []))


@dataclass(frozen=True, slots=True)
class Header:
    """ShellLinkHeader, the fixed 76-byte record at the start of every link."""

    header_size: int
    clsid: bytes
    link_flags: LinkFlags
    file_attributes: int
    creation_time: int
    access_time: int
    write_time: int
    file_size: int
    icon_index: int
    raw_show_command: int
    hot_key_raw: int
    reserved1: int = 0
    reserved2: int = 0
    reserved3: int = 0

    @property
    def clsid_str(self) -> str:
        return "{" + format_guid(self.clsid) + "}"

    @property
    def show_command(self) -> ShowCommand:
        return ShowCommand.from_raw(self.raw_show_command)

    @property
    def hot_key(self) -> HotKey:
        return HotKey.from_raw(self.hot_key_raw)


@dataclass(frozen=True, slots=True)
class LinkInfoHeader:
    """Fixed portion of the LinkInfo structure.

    Offsets are relative to the start of the LinkInfo record; 0 means absent.
    """

    info_size: int
    header_size: int
    flags: LinkInfoFlags
    volume_id_offset: int
    local_base_path_offset: int
    network_link_offset: int
    common_path_suffix_offset: int
    local_base_path_offset_unicode: int = 0
    common_path_suffix_offset_unicode: int = 0


@dataclass(frozen=True, slots=True)
class Volume:
    """VolumeID: the drive the target lived on when the link was saved."""

    size: int
    drive_type: int
    serial_number: int
    label_offset: int
    label_offset_unicode: int
    data: bytes = field(repr=False)
    platform: PlatformServices = field(
        default=DEFAULT_PLATFORM, repr=False, compare=False
    )

    @property
    def drive_type_name(self) -> str:
        return DRIVE_TYPES.get(self.drive_type, "?")

    @property
    def label(self) -> str:
        """Volume label, read from :attr:`data` on access.

        Raises:
            TruncatedDataError: the label offset points outside the record
                or the label is unterminated.
        """
        if self.label_offset == VOLUME_UNICODE_LABEL_SENTINEL:
            return _pick_string(
                ByteCursor(self.data), 0, self.label_offset_unicode, self.platform
            )
        return _pick_string(ByteCursor(self.data), self.label_offset, 0, self.platform)


@dataclass(frozen=True, slots=True)
class NetworkLink:
    """CommonNetworkRelativeLink: the share the target lived on."""

    size: int
    flags: NetworkLinkFlags
    net_name_offset: int
    device_name_offset: int
    provider_type: int
    net_name_offset_unicode: int
    device_name_offset_unicode: int
    data: bytes = field(repr=False)
    net_name: str = ""
    platform: PlatformServices = field(
        default=DEFAULT_PLATFORM, repr=False, compare=False
    )

    @property
    def device_name(self) -> str:
        """Mapped device (e.g. ``Z:``), read from :attr:`data` on access."""
        return _pick_string(
            ByteCursor(self.data),
            self.device_name_offset,
            self.device_name_offset_unicode,
            self.platform,
        )

    @property
    def provider_name(self) -> str:
        if not self.flags & NetworkLinkFlags.ValidNetType:
            return ""
        return WNNC_NET_TYPES.get(self.provider_type, f"0x{self.provider_type:08X}")


@dataclass(frozen=True, slots=True)
class LinkInfo:
    header: LinkInfoHeader
    volume: Volume | None = None
    network_link: NetworkLink | None = None
    local_base_path: str = ""
    common_path_suffix: str = ""

    @property
    def net_name(self) -> str:
        return self.network_link.net_name if self.network_link else ""

    @property
    def device_name(self) -> str:
        return self.network_link.device_name if self.network_link else ""


@dataclass(frozen=True, slots=True)
class StringData:
    """The five optional counted UTF-16 strings that follow LinkInfo."""

    description: str = ""
    relative_path: str = ""
    working_dir: str = ""
    arguments: str = ""
    icon_location: str = ""


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------
def _pick_string(
    record: ByteCursor, ansi_off: int, unicode_off: int, platform: PlatformServices
) -> str:
    """Read a NUL-terminated string from *record*, preferring the Unicode copy."""
    if unicode_off:
        return record.at(unicode_off).read_cstring_utf16()
    if ansi_off:
        return platform.decode_ansi(record.at(ansi_off).read_cstring_ascii())
    return ""


# ---------------------------------------------------------------------------
# Record decoders
# ---------------------------------------------------------------------------
def _parse_header(stream: ByteCursor) -> Header:
    """Validate and consume the ShellLinkHeader at the front of *stream*."""
    header_size = stream.read_fixed(4)
    if header_size != HEADER_SIZE:
        raise FormatError(
            f"Invalid header size 0x{header_size:08X} (expected 0x{HEADER_SIZE:02X})"
        )
    cursor = stream.eat_cursor(header_size)
    cursor.skip(4)
    clsid = cursor.eat_slice(16)
    if clsid != LINK_CLSID:
        raise FormatError(f"Invalid link CLSID {{{format_guid(clsid)}}}")

    return Header(
        header_size=header_size,
        clsid=clsid,
        link_flags=LinkFlags(cursor.eat_u32()),
        file_attributes=cursor.eat_u32(),
        creation_time=cursor.eat_fixed(8),
        access_time=cursor.eat_fixed(8),
        write_time=cursor.eat_fixed(8),
        file_size=cursor.eat_u32(),
        icon_index=cursor.eat_fixed(4, signed=True),
        raw_show_command=cursor.eat_u32(),
        hot_key_raw=cursor.eat_u16(),
        reserved1=cursor.eat_u16(),
        reserved2=cursor.eat_u32(),
        reserved3=cursor.eat_u32(),
    )


def _parse_item_id_list(cursor: ByteCursor) -> tuple[bytes, ...]:
    """Split an IDList into its SHITEMID payloads (size prefix stripped)."""
    items = []
    while True:
        item_size = cursor.eat_u16()
        if item_size == 0:
            break
        if item_size < 2:
            raise FormatError(f"ItemID size {item_size} is less than 2")
        items.append(cursor.eat_slice(item_size - 2))
    return tuple(items)


def _parse_link_info_header(record: ByteCursor) -> LinkInfoHeader:
    info_size = record.read_fixed(4)
    header_size = record.at(4).read_fixed(4)

    hdr = record.at(0).eat_cursor(header_size)
    hdr.skip(8)  # LinkInfoSize, LinkInfoHeaderSize
    flags = LinkInfoFlags(hdr.eat_u32())
    volume_id_offset = hdr.eat_u32()
    local_base_path_offset = hdr.eat_u32()
    network_link_offset = hdr.eat_u32()
    common_path_suffix_offset = hdr.eat_u32()

    local_base_path_offset_unicode = 0
    common_path_suffix_offset_unicode = 0
    if header_size == LINK_INFO_DEFAULT_HEADER_SIZE:
        pass
    elif header_size >= LINK_INFO_MIN_EXTENDED_HEADER_SIZE:
        local_base_path_offset_unicode = hdr.eat_u32()
        common_path_suffix_offset_unicode = hdr.eat_u32()
    else:
        raise FormatError(f"Bad LinkInfoHeaderSize 0x{header_size:X}")

    return LinkInfoHeader(
        info_size=info_size,
        header_size=header_size,
        flags=flags,
        volume_id_offset=volume_id_offset,
        local_base_path_offset=local_base_path_offset,
        network_link_offset=network_link_offset,
        common_path_suffix_offset=common_path_suffix_offset,
        local_base_path_offset_unicode=local_base_path_offset_unicode,
        common_path_suffix_offset_unicode=common_path_suffix_offset_unicode,
    )


def _parse_volume(data: bytes, platform: PlatformServices) -> Volume:
    cursor = ByteCursor(data)
    size = cursor.eat_u32()
    drive_type = cursor.eat_u32()
    serial_number = cursor.eat_u32()
    label_offset = cursor.eat_u32()
    label_offset_unicode = 0
    if label_offset == VOLUME_UNICODE_LABEL_SENTINEL:
        # 0x14 marks the Unicode layout; the ANSI label is not meaningful.
        label_offset_unicode = cursor.eat_u32()

    return Volume(
        size=size,
        drive_type=drive_type,
        serial_number=serial_number,
        label_offset=label_offset,
        label_offset_unicode=label_offset_unicode,
        data=data,
        platform=platform,
    )


def _parse_network_link(data: bytes, platform: PlatformServices) -> NetworkLink:
    cursor = ByteCursor(data)
    size = cursor.eat_u32()
    flags = NetworkLinkFlags(cursor.eat_u32())
    net_name_offset = cursor.eat_u32()
    device_name_offset = cursor.eat_u32()
    provider_type = cursor.eat_u32()

    net_name_offset_unicode = 0
    device_name_offset_unicode = 0
    if net_name_offset > NETWORK_LINK_MIN_SIZE:
        net_name_offset_unicode = cursor.eat_u32()
        device_name_offset_unicode = cursor.eat_u32()

    return NetworkLink(
        size=size,
        flags=flags,
        net_name_offset=net_name_offset,
        device_name_offset=device_name_offset,
        provider_type=provider_type,
        net_name_offset_unicode=net_name_offset_unicode,
        device_name_offset_unicode=device_name_offset_unicode,
        data=data,
        net_name=_pick_string(
            ByteCursor(data), net_name_offset, net_name_offset_unicode, platform
        ),
        platform=platform,
    )


def _parse_link_info(data: bytes, platform: PlatformServices) -> LinkInfo:
    record = ByteCursor(data)
    header = _parse_link_info_header(record)
    logger.debug(
        "LinkInfo: size=%d header_size=0x%X flags=%r",
        header.info_size,
        header.header_size,
        header.flags,
    )

    volume = None
    if header.flags & LinkInfoFlags.VolumeIDAndLocalBasePath and header.volume_id_offset:
        vol = record.at(header.volume_id_offset)
        vol_size = vol.read_fixed(4)
        if vol_size <= VOLUME_MIN_SIZE:
            raise FormatError(f"Wrong VolumeID size 0x{vol_size:X}")
        volume = _parse_volume(vol.eat_slice(vol_size), platform)

    network_link = None
    if (
        header.flags & LinkInfoFlags.CommonNetworkRelativeLinkAndPathSuffix
        and header.network_link_offset
    ):
        cnr = record.at(header.network_link_offset)
        cnr_size = cnr.read_fixed(4)
        if cnr_size < NETWORK_LINK_MIN_SIZE:
            raise FormatError(f"Wrong CommonNetworkRelativeLink size 0x{cnr_size:X}")
        network_link = _parse_network_link(cnr.eat_slice(cnr_size), platform)

    local_base_path = _pick_string(
        record,
        header.local_base_path_offset,
        header.local_base_path_offset_unicode,
        platform,
    )
    common_path_suffix = _pick_string(
        record,
        header.common_path_suffix_offset,
        header.common_path_suffix_offset_unicode,
        platform,
    )
    logger.debug(
        "LinkInfo paths: local=%r suffix=%r (unicode=%s)",
        local_base_path,
        common_path_suffix,
        bool(header.local_base_path_offset_unicode),
    )

    return LinkInfo(
        header=header,
        volume=volume,
        network_link=network_link,
        local_base_path=local_base_path,
        common_path_suffix=common_path_suffix,
    )


def _parse_string_data(cursor: ByteCursor, flags: LinkFlags) -> StringData:
    values = {}
    for flag, name in STRING_SECTIONS:
        if flags & flag:
            count = cursor.eat_u16()
            values[name] = cursor.eat_utf16(count)
    return StringData(**values)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ShellLink:
    """A decoded .lnk file.

    Build one with :meth:`from_file`, :meth:`from_bytes` or
    :meth:`from_stream`.  Instances never change after construction.
    """

    header: Header
    item_id_list: tuple[bytes, ...] = ()
    link_info: LinkInfo | None = None
    strings: StringData = field(default_factory=StringData)
    file_name: str | None = None
    platform: PlatformServices = field(
        default=DEFAULT_PLATFORM, repr=False, compare=False
    )

    # -- construction --
    @classmethod
    def from_file(
        cls, path: str | os.PathLike, *, platform: PlatformServices | None = None
    ) -> "ShellLink":
        """Decode the link stored at *path*.

        Raises:
            OSError: the file could not be opened or read.
            FormatError: the data is not a valid shell link.
        """
        with open(path, "rb") as fp:
            return cls.from_stream(fp, os.fspath(path), platform=platform)

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        file_name: str | None = None,
        *,
        platform: PlatformServices | None = None,
    ) -> "ShellLink":
        """Decode a link held in memory.  *file_name* is kept for display only."""
        return cls._decode(BufferSource(data), file_name, platform)

    @classmethod
    def from_stream(
        cls,
        fp: BinaryIO,
        file_name: str | None = None,
        *,
        platform: PlatformServices | None = None,
    ) -> "ShellLink":
        """Decode a link from an open binary stream.  The stream is not closed."""
        return cls._decode(StreamSource(fp), file_name, platform)

    @classmethod
    def _decode(
        cls,
        source: ByteSource,
        file_name: str | None,
        platform: PlatformServices | None,
    ) -> "ShellLink":
        platform = platform or DEFAULT_PLATFORM
        cursor = ByteCursor(source)

        header = _parse_header(cursor)
        flags = header.link_flags
        logger.debug("Header: flags=%r show=%d", flags, header.raw_show_command)

        item_id_list: tuple[bytes, ...] = ()
        if flags & LinkFlags.HasLinkTargetIDList:
            id_list_size = cursor.eat_u16()
            item_id_list = _parse_item_id_list(cursor.eat_cursor(id_list_size))
            logger.debug("IDList: %d bytes, %d items", id_list_size, len(item_id_list))

        link_info = None
        if flags & LinkFlags.HasLinkInfo:
            link_info_size = cursor.read_fixed(4)
            link_info = _parse_link_info(cursor.eat_slice(link_info_size), platform)

        strings = _parse_string_data(cursor, flags)

        return cls(
            header=header,
            item_id_list=item_id_list,
            link_info=link_info,
            strings=strings,
            file_name=file_name,
            platform=platform,
        )

    # -- header fields --
    @property
    def link_flags(self) -> LinkFlags:
        return self.header.link_flags

    @property
    def file_attributes(self) -> int:
        return self.header.file_attributes

    @property
    def file_size(self) -> int:
        return self.header.file_size

    @property
    def creation_time(self) -> datetime | None:
        return filetime_to_datetime(self.header.creation_time)

    @property
    def access_time(self) -> datetime | None:
        return filetime_to_datetime(self.header.access_time)

    @property
    def write_time(self) -> datetime | None:
        return filetime_to_datetime(self.header.write_time)

    @property
    def show_command(self) -> ShowCommand:
        """Requested window state; unrecognized stored values read as NORMAL."""
        return self.header.show_command

    @property
    def hot_key(self) -> HotKey:
        return self.header.hot_key

    # -- LinkInfo fields --
    @property
    def volume(self) -> Volume | None:
        return self.link_info.volume if self.link_info else None

    @property
    def network_link(self) -> NetworkLink | None:
        return self.link_info.network_link if self.link_info else None

    @property
    def local_base_path(self) -> str:
        return self.link_info.local_base_path if self.link_info else ""

    @property
    def common_path_suffix(self) -> str:
        return self.link_info.common_path_suffix if self.link_info else ""

    @property
    def net_name(self) -> str:
        return self.link_info.net_name if self.link_info else ""

    @property
    def device_name(self) -> str:
        return self.link_info.device_name if self.link_info else ""

    # -- StringData fields --
    @property
    def description(self) -> str:
        return self.strings.description

    @property
    def relative_path(self) -> str:
        return self.strings.relative_path

    @property
    def working_directory(self) -> str:
        return self.strings.working_dir

    @property
    def arguments_string(self) -> str:
        """Arguments as stored, one string.  The target path is not included."""
        return self.strings.arguments

    @property
    def arguments(self) -> list[str]:
        """Arguments split the way the target's command line would be."""
        return self.platform.split_command_line(self.strings.arguments)

    @property
    def raw_icon_location(self) -> str:
        return self.strings.icon_location

    @property
    def icon_location(self) -> str:
        """Icon path with ``%VAR%`` references expanded."""
        return self.platform.expand_environment(self.strings.icon_location)

    @property
    def icon_index(self) -> int:
        return self.header.icon_index

    # -- naming --
    @property
    def short_name(self) -> str:
        """Base name of :attr:`file_name` without its extension."""
        if not self.file_name:
            return ""
        return ntpath.splitext(ntpath.basename(self.file_name))[0]

    # -- resolution --
    def resolve(self, exists: Callable[[str], bool] = os.path.exists) -> str:
        """Best-guess target path, or ``""`` when no candidate exists.

        See :func:`lnkreader.resolver.resolve_target` for the order in which
        candidates are tried.
        """
        return resolve_target(
            self.local_base_path,
            self.common_path_suffix,
            self.relative_path,
            self.working_directory,
            self.net_name,
            exists=exists,
        )


def parse_lnk(
    source: str | Path | bytes, *, platform: PlatformServices | None = None
) -> ShellLink:
    """Parse a .lnk file and return a :class:`ShellLink`.

    Args:
        source: A file path (str or Path) or raw bytes of a .lnk file.
    """
    if isinstance(source, (str, Path)):
        return ShellLink.from_file(source, platform=platform)
    return ShellLink.from_bytes(source, platform=platform)
