"""Pure image stages.

Each stage takes a Rendition and returns a new one; a stage whose
parameter is absent returns its input unchanged. Only `load_image` and
`write_image` touch the filesystem.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

from ...common.errors import DecodeError, EncodeError
from .geometry import CropSpec, Gravity, ResizeGeometry, crop_box, resolve_crop

# Modes JPEG can store without conversion
_JPEG_MODES = {"RGB", "L", "CMYK"}

# Info entries that describe pixels rather than metadata
_KEPT_INFO = {"transparency"}


@dataclass(frozen=True)
class Rendition:
    """Image plus the encoding decisions taken so far."""

    image: Image.Image
    format: str | None = None
    quality: int | None = None
    # Pillow format name the source was decoded as
    source_format: str | None = None


def get_pil_format(format_str: str) -> str | None:
    """Convert format string or extension to PIL format name.

    Uses Pillow's registered extensions, so "jpg", ".jfif" and "tif" all
    resolve. Unregistered names are upper-cased; blank input gives None.
    """
    key = format_str.lower().lstrip(".")
    if not key:
        return None
    return Image.registered_extensions().get(f".{key}", key.upper())


def load_image(src_path: str | Path) -> Rendition:
    """
    Decode the source image fully into memory.

    Raises:
        DecodeError: If Pillow cannot identify or decode the file
    """
    try:
        with Image.open(src_path) as img:
            img.load()
            # detach from the file handle
            image = img.copy()
            source_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise DecodeError(f"Cannot decode image {src_path}: {exc}") from exc
    return Rendition(image=image, source_format=source_format)


def auto_orient(rendition: Rendition) -> Rendition:
    """Bake EXIF orientation into the pixel data."""
    oriented = ImageOps.exif_transpose(rendition.image)
    if oriented is None:
        return rendition
    return replace(rendition, image=oriented)


def crop_image(rendition: Rendition, crop: CropSpec | None, gravity: Gravity | None = None) -> Rendition:
    if crop is None:
        if gravity is not None:
            logger.debug(f"Ignoring gravity {gravity} without a crop")
        return rendition

    width, height = rendition.image.size
    geometry = resolve_crop(crop, width, height)
    box = crop_box(geometry, gravity, width, height)
    logger.debug(f"Cropping {width}x{height} with {crop} -> {geometry}, box {box}")
    return replace(rendition, image=rendition.image.crop(box))


def resize_image(rendition: Rendition, geometry: ResizeGeometry | None) -> Rendition:
    if geometry is None:
        return rendition

    size = geometry.target_size(*rendition.image.size)
    if size == rendition.image.size:
        return rendition
    return replace(rendition, image=rendition.image.resize(size, Image.Resampling.LANCZOS))


def convert_format(rendition: Rendition, format: str | None) -> Rendition:
    if not format:
        return rendition
    return replace(rendition, format=format.lower())


def apply_quality(rendition: Rendition, quality: int | None) -> Rendition:
    if quality is None or not 1 <= quality <= 100:
        return rendition
    return replace(rendition, quality=quality)


def strip_metadata(rendition: Rendition) -> Rendition:
    """Drop EXIF, ICC profile and any other ancillary info."""
    stripped = rendition.image.copy()
    stripped.info = {key: value for key, value in stripped.info.items() if key in _KEPT_INFO}
    return replace(rendition, image=stripped)


def write_image(rendition: Rendition, output_path: str | Path, default_format: str) -> Path:
    """
    Encode the rendition to `output_path`.

    Args:
        rendition: Image and pending encoding decisions
        output_path: File to create or overwrite
        default_format: Format or extension used when the rendition carries
            none. When it is blank the source format is kept

    Raises:
        EncodeError: If Pillow cannot encode the image in the target format
    """
    output_path = Path(output_path)
    pil_format = get_pil_format(rendition.format or default_format) or rendition.source_format
    if pil_format is None:
        raise EncodeError(f"No output format for {output_path}: no target, extension or source format")

    image = rendition.image
    # JPEG does not support alpha channel
    if pil_format == "JPEG" and image.mode not in _JPEG_MODES:
        image = image.convert("RGB")

    save_kwargs: dict[str, object] = {}
    if rendition.quality is not None:
        save_kwargs["quality"] = rendition.quality

    try:
        image.save(output_path, format=pil_format, **save_kwargs)
    except (KeyError, ValueError, OSError) as exc:
        raise EncodeError(f"Cannot encode {pil_format} image to {output_path}: {exc}") from exc
    return output_path
