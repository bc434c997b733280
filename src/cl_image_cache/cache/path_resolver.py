"""Source and destination path derivation for cache entries."""

import hashlib
import os
import re
from os import PathLike
from pathlib import Path, PurePosixPath

from ..common.config import CacheSettings, FilenamePolicy
from ..common.errors import UnreadableSource
from ..common.schemas import ResolvedPaths

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


class PathResolver:
    """
    Derives cache paths from a source image and its cache key material.

    Layout:
        repo_base/
            <cache_dir>/
                <dest_filename>
    """

    def __init__(self, settings: CacheSettings | None = None):
        self.settings: CacheSettings = settings if settings is not None else CacheSettings()

    @property
    def cache_dir(self) -> str:
        return self.settings.cache_dir_posix

    def resolve(
        self,
        repo_base: str | PathLike[str],
        img_path: str,
        cache_key: str,
        output_format: str | None = None,
    ) -> ResolvedPaths:
        """
        Resolve all paths for one request.

        Args:
            repo_base: Site source root
            img_path: Image path as written in the template
            cache_key: Canonical option string for this transform
            output_format: Extension override, e.g. "webp"

        Returns:
            ResolvedPaths for the cache entry

        Raises:
            UnreadableSource: If the source is not a readable regular file
        """
        base = Path(repo_base)
        src_path = self.source_path(base, img_path)

        if not src_path.is_file() or not os.access(src_path, os.R_OK):
            raise UnreadableSource(f"Image at {src_path} is not readable")

        dest_dir = base / self.cache_dir
        dest_filename = self.dest_filename(src_path, cache_key, output_format)

        return ResolvedPaths(
            src_path=src_path,
            dest_dir=dest_dir,
            dest_filename=dest_filename,
            dest_path=dest_dir / dest_filename,
            dest_path_relative=str(PurePosixPath(self.cache_dir, dest_filename)),
        )

    def source_path(self, base: Path, img_path: str) -> Path:
        """Join the image path onto the root, redirecting cached artifacts by filename."""
        relative = img_path.replace("\\", "/").lstrip("/")
        src_path = base / relative
        if f"{self.cache_dir}/" in relative:
            # Chained transform of a cached artifact: only the filename is meaningful.
            src_path = base / self.cache_dir / src_path.name
        return src_path

    def dest_filename(self, src_path: Path, cache_key: str, output_format: str | None) -> str:
        base_name = src_path.stem
        ext = f".{output_format}" if output_format else src_path.suffix

        if self.settings.filename_policy is FilenamePolicy.SLUG:
            return f"{base_name}_{_NON_ALNUM_RE.sub('', cache_key)}{ext}"

        digest = hashlib.sha1(f"{base_name}_{cache_key}{ext}".encode("utf-8")).hexdigest()
        return f"{digest[: self.settings.hash_length]}{ext}"
