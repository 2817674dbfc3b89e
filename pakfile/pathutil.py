from __future__ import annotations

import os
from typing import List

from .errors import EntryNameError


def _member_parts(name: str) -> List[str]:
    # Either separator is accepted; '.' and empty segments carry no meaning
    parts = [seg for seg in name.replace("\\", "/").split("/") if seg not in ("", ".")]
    if ".." in parts:
        raise EntryNameError(f"Member name may not contain '..': {name!r}")
    if not parts:
        raise EntryNameError(f"Member name is empty: {name!r}")
    return parts


def norm_member_name(name: str) -> str:
    """Return ``name`` in the stored '/'-separated form."""
    return "/".join(_member_parts(name))


def member_to_host_path(dest_root: str, name: str) -> str:
    """Join a stored member name onto ``dest_root`` using host separators.

    Absolute names (leading separator or drive letter) are refused so
    extraction stays under ``dest_root``.
    """
    if name[:1] in ("/", "\\") or (name[1:2] == ":" and name[:1].isalpha()):
        raise EntryNameError(f"Refusing absolute member name: {name!r}")
    return os.path.join(dest_root, *_member_parts(name))


def relative_member_name(fs_path: str, source_root: str) -> str:
    rel = os.path.relpath(fs_path, start=source_root)
    return "/".join(_member_parts(rel.replace(os.sep, "/")))
