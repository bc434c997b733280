"""Pydantic schemas for transform specs and resolved cache paths."""

from abc import abstractmethod
from pathlib import Path
from typing import ClassVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..pipeline.algo.geometry import CropSpec, Gravity, ResizeGeometry, parse_crop, parse_resize
from .errors import InvalidInput

QUALITY_MIN = 1
QUALITY_MAX = 100


# ─────────────────────────────────────────────────────────────
# Transform spec
# ─────────────────────────────────────────────────────────────


class TransformSpec(BaseModel):
    """Typed parameters for one transform request.

    Each transform kind subclasses this and fills only the fields it
    accepts. Empty fields are no-ops in the pipeline.
    """

    kind: ClassVar[str] = "transform"

    geometry: ResizeGeometry | None = Field(default=None, description="Resize geometry")
    format: str | None = Field(default=None, description="Target format name, e.g. webp")
    quality: int | None = Field(
        default=None,
        ge=QUALITY_MIN,
        le=QUALITY_MAX,
        description="Encoder quality",
    )
    crop: CropSpec | None = Field(default=None, description="Crop geometry")
    gravity: Gravity | None = Field(default=None, description="Crop anchor")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    @abstractmethod
    def from_options(cls, options: str) -> "TransformSpec":
        """Parse the option string handed over by the templating layer."""
        ...

    def key_fields(self) -> list[str]:
        """Canonical option fields, positional, for cache key derivation."""
        return [
            str(self.geometry) if self.geometry is not None else "",
            self.format or "",
            str(self.quality) if self.quality is not None else "",
            str(self.crop) if self.crop is not None else "",
            self.gravity.value if self.gravity is not None else "",
        ]

    def cache_key(self) -> str:
        """Kind-prefixed canonical option string; equal specs give equal keys."""
        return f"{self.kind}:" + ",".join(self.key_fields()).rstrip(",")

    def output_format(self) -> str | None:
        """Extension override for the destination file."""
        return self.format


# ─────────────────────────────────────────────────────────────
# Option field parsers
# ─────────────────────────────────────────────────────────────


def split_options(options: str, count: int) -> list[str]:
    """
    Split a comma-separated option string into `count` positional fields.

    Missing fields are empty strings, surplus fields are dropped, and
    whitespace around each field is removed.

    Raises:
        InvalidInput: If every field is blank
    """
    fields = [field.strip() for field in options.split(",")]
    if not any(fields):
        raise InvalidInput("`options` must contain at least one non-empty field")
    if len(fields) > count:
        logger.debug(f"Ignoring surplus option fields: {fields[count:]}")
    fields = fields[:count]
    return fields + [""] * (count - len(fields))


def parse_geometry_field(text: str) -> ResizeGeometry | None:
    if not text:
        return None
    geometry = parse_resize(text)
    if geometry is None:
        logger.warning(f"Ignoring unrecognised resize geometry {text!r}")
    return geometry


def parse_format_field(text: str) -> str | None:
    return text.lower().lstrip(".") or None


def parse_quality_field(text: str) -> int | None:
    """Quality as an int in [1, 100]; anything else is ignored."""
    if not text:
        return None
    try:
        quality = int(text)
    except ValueError:
        logger.debug(f"Ignoring non-numeric quality {text!r}")
        return None
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        logger.debug(f"Ignoring out of range quality {quality}")
        return None
    return quality


def parse_crop_field(text: str) -> CropSpec | None:
    return parse_crop(text) if text else None


def parse_gravity_field(text: str) -> Gravity | None:
    return Gravity.parse(text) if text else None


# ─────────────────────────────────────────────────────────────
# Resolved cache paths
# ─────────────────────────────────────────────────────────────


class ResolvedPaths(BaseModel):
    """Filesystem locations for one cache entry."""

    src_path: Path = Field(..., description="Readable source image")
    dest_dir: Path = Field(..., description="Cache directory")
    dest_filename: str = Field(..., description="Derived destination filename")
    dest_path: Path = Field(..., description="dest_dir / dest_filename")
    dest_path_relative: str = Field(
        ..., description="Destination path relative to the source root, posix separators"
    )

    model_config = ConfigDict(frozen=True)
