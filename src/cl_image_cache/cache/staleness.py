"""Cache freshness check."""

from os import PathLike
from pathlib import Path

from ..common.errors import UnreadableSource


def must_create(src_path: str | PathLike[str], dest_path: str | PathLike[str]) -> bool:
    """True when the destination is missing or not strictly newer than the source.

    Equal timestamps count as stale. Only existence and mtime are compared.

    Raises:
        UnreadableSource: If the source cannot be stat'ed
    """
    try:
        src_mtime = Path(src_path).stat().st_mtime_ns
    except OSError as exc:
        raise UnreadableSource(f"Image at {src_path} is not readable: {exc}") from exc

    try:
        dest_mtime = Path(dest_path).stat().st_mtime_ns
    except FileNotFoundError:
        return True
    return dest_mtime <= src_mtime
