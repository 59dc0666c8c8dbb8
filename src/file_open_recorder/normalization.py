"""Utilities to normalize file paths and aggregation prefixes."""

from __future__ import annotations

from pathlib import PurePosixPath, PurePath
from typing import Optional, Union

from .models import INACTIVE_FILE

PathLike = Union[str, PurePath]


def to_file_identity(path: Optional[PathLike], workspace_root: PathLike) -> str:
    """Turn a focused path into the key used by the ledger.

    Paths below the workspace root become root-relative, relative paths lose
    a leading ``./`` and anything else is kept as given. No path means focus
    is on something that is not a file.
    """
    if path is None or str(path) == "":
        return INACTIVE_FILE

    candidate = PurePosixPath(PurePath(path).as_posix())
    root = PurePosixPath(PurePath(workspace_root).as_posix())
    if candidate.is_absolute():
        try:
            relative = candidate.relative_to(root)
        except ValueError:
            return candidate.as_posix()
        return relative.as_posix() if relative.parts else INACTIVE_FILE
    return _strip_dot_slash(str(path).replace("\\", "/"))


def normalize_prefix(prefix: str) -> str:
    normalized = _strip_dot_slash(prefix)
    if not normalized.endswith("/"):
        normalized += "/"
    return normalized


def _strip_dot_slash(value: str) -> str:
    return value[2:] if value.startswith("./") else value
