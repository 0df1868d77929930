"""Exceptions raised while decoding .lnk data."""


class FormatError(Exception):
    """Raised when data does not conform to the MS-SHLLINK format."""


class TruncatedDataError(FormatError):
    """Raised when a read runs past the end of its record or no terminator is found."""
