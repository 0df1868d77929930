"""CLI entry point: ``lnkreader FILE``."""

import argparse
import codecs
import json
import logging
import sys

from ._constants import SHOW_CMD_NAMES, LinkFlags
from ._errors import FormatError
from ._platform import PlatformServices
from .parser import ShellLink


def format_link(link: ShellLink) -> str:
    """Return a human-readable string representation of *link*."""
    lines: list[str] = []
    lines.append(f"Description: {link.description}")
    lines.append(f"Relative path: {link.relative_path}")
    lines.append(f"Working directory: {link.working_directory}")
    lines.append(f"Arguments: {' '.join(link.arguments)}")
    lines.append(
        f"Icon location: {link.icon_location}. Icon index: {link.icon_index}"
    )
    lines.append(f"Window show: {SHOW_CMD_NAMES[link.show_command]}")
    lines.append(f"Hot key: {link.hot_key or 'None'}")
    if link.local_base_path or link.common_path_suffix:
        lines.append(f"Local path: {link.local_base_path}{link.common_path_suffix}")
    if link.volume is not None:
        lines.append(
            f'Volume: "{link.volume.label}" {link.volume.drive_type_name} '
            f"serial=0x{link.volume.serial_number:08X}"
        )
    if link.net_name:
        lines.append(f"Network share: {link.net_name}")
    if link.device_name:
        lines.append(f"Device name: {link.device_name}")
    lines.append(f"Resolve: {link.resolve() or '(not found)'}")
    return "\n".join(lines)


def _serialize_link(link: ShellLink) -> dict:
    """Convert a ShellLink to a JSON-friendly dict."""
    times = {
        "creation_time": link.creation_time,
        "access_time": link.access_time,
        "write_time": link.write_time,
    }
    return {
        "file_name": link.file_name,
        "short_name": link.short_name,
        "link_flags": [f.name for f in LinkFlags if f in link.link_flags],
        "file_attributes": link.file_attributes,
        "file_size": link.file_size,
        **{k: v.isoformat() if v else None for k, v in times.items()},
        "description": link.description,
        "relative_path": link.relative_path,
        "working_directory": link.working_directory,
        "arguments_string": link.arguments_string,
        "arguments": link.arguments,
        "icon_location": link.icon_location,
        "icon_index": link.icon_index,
        "show_command": SHOW_CMD_NAMES[link.show_command],
        "hot_key": str(link.hot_key),
        "item_count": len(link.item_id_list),
        "local_base_path": link.local_base_path,
        "common_path_suffix": link.common_path_suffix,
        "net_name": link.net_name,
        "device_name": link.device_name,
        "volume_label": link.volume.label if link.volume else None,
        "resolved": link.resolve(),
    }


def _parse_codepage(val: str) -> str:
    """Check *val* names a codec Python knows, e.g. ``cp1251``."""
    try:
        return codecs.lookup(val).name
    except LookupError:
        raise argparse.ArgumentTypeError(f"Unknown code page: {val!r}") from None


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="lnkreader",
        description="Read Windows .lnk files (MS-SHLLINK)",
    )
    parser.add_argument("file", nargs="?", help="LNK file to read")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--codepage",
        type=_parse_codepage,
        default=None,
        help="Code page for ANSI path fields (default: cp1252)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding steps to stderr"
    )

    args = parser.parse_args(argv)
    if args.file is None:
        print("Expected input file", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    platform = PlatformServices(ansi_codepage=args.codepage) if args.codepage else None
    try:
        link = ShellLink.from_file(args.file, platform=platform)
        if args.json:
            text = json.dumps(_serialize_link(link), indent=2)
        else:
            text = format_link(link)
    except (OSError, FormatError) as e:
        print(f"error: {args.file}: {e}", file=sys.stderr)
        sys.exit(1)
    print(text)


if __name__ == "__main__":
    main()
