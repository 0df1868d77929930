"""MS-SHLLINK constants and lookup tables shared by the decoders."""

from enum import IntEnum, IntFlag

# ---------------------------------------------------------------------------
# ANSI code page
# ---------------------------------------------------------------------------
# ANSI string fields are encoded with the "system default code page" of the
# machine that created the link.  CP-1252 covers Western/English Windows and
# is a strict superset of ASCII.
ANSI_CODEPAGE = "cp1252"

# ---------------------------------------------------------------------------
# ShellLinkHeader
# ---------------------------------------------------------------------------
HEADER_SIZE = 0x4C

LINK_CLSID = b"\x01\x14\x02\x00\x00\x00\x00\x00\xc0\x00\x00\x00\x00\x00\x00\x46"


class LinkFlags(IntFlag):
    """LinkFlags bitmask (MS-SHLLINK 2.1.1)."""

    HasLinkTargetIDList = 1 << 0
    HasLinkInfo = 1 << 1
    HasName = 1 << 2
    HasRelativePath = 1 << 3
    HasWorkingDir = 1 << 4
    HasArguments = 1 << 5
    HasIconLocation = 1 << 6
    IsUnicode = 1 << 7
    ForceNoLinkInfo = 1 << 8
    HasExpString = 1 << 9
    RunInSeparateProcess = 1 << 10
    Unused1 = 1 << 11
    HasDarwinID = 1 << 12
    RunAsUser = 1 << 13
    HasExpIcon = 1 << 14
    NoPidlAlias = 1 << 15
    Unused2 = 1 << 16
    RunWithShimLayer = 1 << 17
    ForceNoLinkTrack = 1 << 18
    EnableTargetMetadata = 1 << 19
    DisableLinkPathTracking = 1 << 20
    DisableKnownFolderTracking = 1 << 21
    DisableKnownFolderAlias = 1 << 22
    AllowLinkToLink = 1 << 23
    UnaliasOnSave = 1 << 24
    PreferEnvironmentPath = 1 << 25
    KeepLocalIDListForUNCTarget = 1 << 26


# StringData sections, in the order they appear on disk.
STRING_SECTIONS = (
    (LinkFlags.HasName, "description"),
    (LinkFlags.HasRelativePath, "relative_path"),
    (LinkFlags.HasWorkingDir, "working_dir"),
    (LinkFlags.HasArguments, "arguments"),
    (LinkFlags.HasIconLocation, "icon_location"),
)


class ShowCommand(IntEnum):
    """ShowWindow commands understood by the shell."""

    NORMAL = 0x1
    MAXIMIZED = 0x3
    MIN_NO_ACTIVE = 0x7

    @classmethod
    def from_raw(cls, value: int) -> "ShowCommand":
        """Map a stored value, treating anything unrecognized as NORMAL."""
        try:
            return cls(value)
        except ValueError:
            return cls.NORMAL


SHOW_CMD_NAMES = {
    ShowCommand.NORMAL: "normal",
    ShowCommand.MAXIMIZED: "maximized",
    ShowCommand.MIN_NO_ACTIVE: "minimized",
}

# ---------------------------------------------------------------------------
# LinkInfo
# ---------------------------------------------------------------------------
LINK_INFO_DEFAULT_HEADER_SIZE = 0x1C
LINK_INFO_MIN_EXTENDED_HEADER_SIZE = 0x24


class LinkInfoFlags(IntFlag):
    VolumeIDAndLocalBasePath = 1 << 0
    CommonNetworkRelativeLinkAndPathSuffix = 1 << 1


# VolumeID
VOLUME_MIN_SIZE = 0x10
VOLUME_UNICODE_LABEL_SENTINEL = 0x14

# CommonNetworkRelativeLink
NETWORK_LINK_MIN_SIZE = 0x14


class NetworkLinkFlags(IntFlag):
    ValidDevice = 1 << 0
    ValidNetType = 1 << 1


# ---------------------------------------------------------------------------
# Hotkey modifier masks and virtual key names
# ---------------------------------------------------------------------------
HOTKEY_MOD = {0x01: "SHIFT", 0x02: "CTRL", 0x04: "ALT"}

VK_KEYS = {
    **{k: chr(k) for k in range(0x30, 0x3A)},  # 0-9
    **{k: chr(k) for k in range(0x41, 0x5B)},  # A-Z
    **{k: f"F{k - 0x6F}" for k in range(0x70, 0x88)},  # F1-F24
    0x90: "NUMLOCK",
    0x91: "SCROLL",
}

# ---------------------------------------------------------------------------
# Drive types (VolumeID)
# ---------------------------------------------------------------------------
DRIVE_TYPES = {
    0: "UNKNOWN",
    1: "NO_ROOT_DIR",
    2: "REMOVABLE",
    3: "FIXED",
    4: "REMOTE",
    5: "CDROM",
    6: "RAMDISK",
}

# ---------------------------------------------------------------------------
# WNNC_NET_* Network Provider Types (CommonNetworkRelativeLink)
# ---------------------------------------------------------------------------
WNNC_NET_TYPES = {
    0x00020000: "WNNC_NET_LANMAN",
    0x00030000: "WNNC_NET_NETWARE",
    0x00090000: "WNNC_NET_9TILES",
    0x000B0000: "WNNC_NET_LOCUS",
    0x000D0000: "WNNC_NET_SUN_PC_NFS",
    0x00110000: "WNNC_NET_LANSTEP",
    0x00130000: "WNNC_NET_CLEARCASE",
    0x00140000: "WNNC_NET_FRONTIER",
    0x00150000: "WNNC_NET_BMC",
    0x00160000: "WNNC_NET_DCE",
    0x00170000: "WNNC_NET_AVID",
    0x00180000: "WNNC_NET_DOCUSPACE",
    0x00190000: "WNNC_NET_MANAGEWARE",
    0x001A0000: "WNNC_NET_OBJECT_DIRE",
    0x001B0000: "WNNC_NET_PATHWORKS",
    0x001C0000: "WNNC_NET_EXTENDNET",
    0x002B0000: "WNNC_NET_KNOWARE",
    0x003B0000: "WNNC_NET_DFS",
    0x003D0000: "WNNC_NET_MSFTP",
    0x00430000: "WNNC_NET_MS_NFS",
}
