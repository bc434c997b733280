"""ImageMagick command-line wrapper for raw transform requests.

ImageMagick must be installed separately: https://imagemagick.org/
Version 7 ships `magick`; version 6 ships `convert`.
"""

import shutil
import subprocess
from os import PathLike
from pathlib import Path

from loguru import logger

from ..cache.writer import atomic_output
from ..common.errors import ToolInvocationError
from ..utils.profiling import timed


def detect_magick_command() -> list[str] | None:
    """Prefer ImageMagick 7's `magick`, then legacy `convert`."""
    magick = shutil.which("magick")
    if magick:
        return [magick]
    convert = shutil.which("convert")
    if convert:
        return [convert]
    return None


class ImageMagickTool:
    """Runs `<magick> <src> <args...> <dest>` with the destination written atomically."""

    def __init__(self, command: list[str] | None = None, timeout: float = 120.0) -> None:
        self._command: list[str] | None = list(command) if command else None
        self.timeout: float = timeout

    @property
    def command(self) -> list[str]:
        if self._command is None:
            self._command = detect_magick_command()
        if self._command is None:
            raise ToolInvocationError("ImageMagick is not installed or not found in PATH.")
        return self._command

    @timed
    def run(
        self,
        src_path: str | PathLike[str],
        dest_path: str | PathLike[str],
        args: list[str],
    ) -> Path:
        """
        Invoke ImageMagick on one image.

        Args:
            src_path: Source image
            dest_path: Cache destination
            args: Tool arguments placed between source and destination

        Returns:
            Destination path

        Raises:
            ToolInvocationError: If the tool cannot start, fails, times out
                or produces no output
        """
        dest = Path(dest_path)

        with atomic_output(dest) as tmp_path:
            # mkstemp leaves an empty file; an output-less run must not publish it
            tmp_path.unlink()
            command = [*self.command, str(src_path), *args, str(tmp_path)]
            logger.debug(" ".join(command))

            try:
                process = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise ToolInvocationError(
                    f"ImageMagick timed out after {self.timeout}s on {src_path}"
                ) from exc
            except (OSError, ValueError, subprocess.SubprocessError) as exc:
                raise ToolInvocationError(f"Failed to start ImageMagick: {exc}") from exc

            if process.returncode != 0:
                stderr = process.stderr.strip()
                logger.error(f"ImageMagick failed for {src_path}: {stderr}")
                raise ToolInvocationError(
                    f"ImageMagick exited with status {process.returncode}: {stderr}"
                )

            if not tmp_path.exists():
                raise ToolInvocationError(f"ImageMagick produced no output for {src_path}")

        return dest
