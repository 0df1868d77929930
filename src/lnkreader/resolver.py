"""Best-guess filesystem target for a decoded link."""

import logging
import ntpath
import os
import posixpath
from collections.abc import Callable

logger = logging.getLogger(__name__)


def is_absolute(path: str) -> bool:
    """True for POSIX absolute paths and Windows drive-rooted or UNC paths."""
    return posixpath.isabs(path) or ntpath.isabs(path)


def _candidates(
    local_base_path: str,
    common_path_suffix: str,
    relative_path: str,
    working_dir: str,
    net_name: str,
    pathmod,
):
    if local_base_path and common_path_suffix:
        yield "local+suffix", local_base_path + common_path_suffix
    if local_base_path and is_absolute(local_base_path):
        yield "local", local_base_path
    if relative_path and working_dir:
        yield "working_dir+relative", pathmod.join(working_dir, relative_path)
    if net_name and common_path_suffix:
        yield "net+suffix", net_name + "\\" + common_path_suffix
    if net_name and is_absolute(net_name):
        yield "net", net_name


def resolve_target(
    local_base_path: str = "",
    common_path_suffix: str = "",
    relative_path: str = "",
    working_dir: str = "",
    net_name: str = "",
    *,
    exists: Callable[[str], bool] = os.path.exists,
    pathmod=os.path,
) -> str:
    """Return the first existing candidate path, normalized, or ``""``.

    Candidates are tried in order:

    1. ``local_base_path + common_path_suffix``
    2. ``local_base_path`` when it is absolute
    3. ``working_dir`` joined with ``relative_path``
    4. ``net_name + "\\" + common_path_suffix``
    5. ``net_name`` when it is absolute

    A candidate rejected by *exists* falls through to the next one.
    """
    for step, candidate in _candidates(
        local_base_path,
        common_path_suffix,
        relative_path,
        working_dir,
        net_name,
        pathmod,
    ):
        if exists(candidate):
            logger.debug("Resolved target via %s: %r", step, candidate)
            return pathmod.normpath(candidate)
        logger.debug("Candidate %s does not exist: %r", step, candidate)
    return ""
