"""Fixed-order image transform pipeline."""

from collections.abc import Callable
from functools import partial
from os import PathLike
from pathlib import Path

from loguru import logger

from ..cache.writer import atomic_output
from ..common.schemas import TransformSpec
from ..utils.profiling import timed
from .algo.stages import (
    Rendition,
    apply_quality,
    auto_orient,
    convert_format,
    crop_image,
    load_image,
    resize_image,
    strip_metadata,
    write_image,
)

Stage = Callable[[Rendition], Rendition]


def build_stages(spec: TransformSpec) -> list[Stage]:
    """Stages in application order: orient, crop, resize, format, quality, strip."""
    return [
        auto_orient,
        partial(crop_image, crop=spec.crop, gravity=spec.gravity),
        partial(resize_image, geometry=spec.geometry),
        partial(convert_format, format=spec.format),
        partial(apply_quality, quality=spec.quality),
        strip_metadata,
    ]


class ImageTransformPipeline:
    """Decode, transform and atomically write one cache entry with Pillow."""

    @timed
    def apply(
        self,
        src_path: str | PathLike[str],
        dest_path: str | PathLike[str],
        spec: TransformSpec,
    ) -> Path:
        """
        Run every stage on the source image and write the result.

        Args:
            src_path: Source image
            dest_path: Cache destination; its extension picks the default encoder
            spec: Transform parameters

        Returns:
            Destination path

        Raises:
            DecodeError: If the source cannot be decoded
            MalformedCrop, DegenerateCrop: If the crop cannot be applied
            EncodeError: If the result cannot be encoded
        """
        dest = Path(dest_path)
        rendition = load_image(src_path)

        for stage in build_stages(spec):
            rendition = stage(rendition)

        with atomic_output(dest) as tmp_path:
            _ = write_image(rendition, tmp_path, default_format=dest.suffix)

        logger.debug(f"Wrote {rendition.image.width}x{rendition.image.height} image to {dest}")
        return dest
