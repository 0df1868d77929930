"""Host-specific conversions used at the edges of the decoder.

The parser never calls into the OS directly.  Code-page conversion of ANSI
fields, tokenizing the stored argument string, and expanding ``%VAR%``
references in the icon path all go through a :class:`PlatformServices`.
"""

import codecs
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ._constants import ANSI_CODEPAGE

_ENV_REF = re.compile(r"%([^%]+)%")


def split_windows_command_line(text: str) -> list[str]:
    """Split *text* following the ``CommandLineToArgvW`` rules.

    * whitespace separates arguments outside double quotes;
    * ``2n`` backslashes before a quote yield ``n`` backslashes and toggle
      quoting, ``2n+1`` yield ``n`` backslashes and a literal quote;
    * ``""`` inside a quoted run is a literal quote.
    """
    args: list[str] = []
    current: list[str] = []
    in_arg = False
    quoted = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            j = i
            while j < n and text[j] == "\\":
                j += 1
            count = j - i
            if j < n and text[j] == '"':
                current.append("\\" * (count // 2))
                if count % 2:
                    current.append('"')
                    i = j + 1
                else:
                    i = j
            else:
                current.append("\\" * count)
                i = j
            in_arg = True
            continue
        if ch == '"':
            if quoted and i + 1 < n and text[i + 1] == '"':
                current.append('"')
                i += 2
            else:
                quoted = not quoted
                i += 1
            in_arg = True
            continue
        if ch in " \t" and not quoted:
            if in_arg:
                args.append("".join(current))
                current = []
                in_arg = False
            i += 1
            continue
        current.append(ch)
        in_arg = True
        i += 1
    if in_arg:
        args.append("".join(current))
    return args


@dataclass(frozen=True, slots=True)
class PlatformServices:
    """Conversions that depend on the machine that created or reads the link."""

    ansi_codepage: str = ANSI_CODEPAGE
    environ: Mapping[str, str] = field(
        default_factory=lambda: os.environ, hash=False, compare=False
    )
    expand_env: bool = True
    windows_quoting: bool = True

    def __post_init__(self) -> None:
        try:
            codecs.lookup(self.ansi_codepage)
        except LookupError:
            raise ValueError(f"Unknown code page: {self.ansi_codepage!r}") from None

    def decode_ansi(self, raw: bytes) -> str:
        """Convert a legacy 8-bit string, with a fast path for pure ASCII."""
        if raw.isascii():
            return raw.decode("ascii")
        return raw.decode(self.ansi_codepage, errors="replace")

    def split_command_line(self, text: str) -> list[str]:
        if self.windows_quoting:
            return split_windows_command_line(text)
        return text.split()

    def expand_environment(self, text: str) -> str:
        """Replace ``%NAME%`` with its value; unknown names are kept as-is."""
        if not self.expand_env or "%" not in text:
            return text

        lookup = {k.upper(): v for k, v in self.environ.items()}

        def _sub(match: re.Match) -> str:
            return lookup.get(match.group(1).upper(), match.group(0))

        return _ENV_REF.sub(_sub, text)


DEFAULT_PLATFORM = PlatformServices()

# No conversion at all: raw 8-bit strings map byte-for-byte, no expansion,
# arguments split on whitespace.
IDENTITY_PLATFORM = PlatformServices(
    ansi_codepage="latin-1", environ={}, expand_env=False, windows_quoting=False
)
