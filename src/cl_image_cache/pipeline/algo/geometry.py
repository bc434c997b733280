"""Crop and resize geometry.

Geometry strings follow the ImageMagick conventions used in templates:

    crop:    WxH+X+Y, W%xH%+X+Y, W+X+Y, or the aspect-ratio form W:H+X+Y
    resize:  W, xH, WxH, with optional ! < > ^ % @ modifiers

Aspect-ratio crops have no pixel size of their own; `normalize_crop` turns
them into a concrete rectangle for a given source image.
"""

import math
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import override

from ...common.errors import DegenerateCrop, MalformedCrop

_OFFSET = r"([+-]\d+)([+-]\d+)"
_ASPECT_CROP_RE = re.compile(r"^(\d+(?:\.\d+)?):(\d+(?:\.\d+)?)" + _OFFSET + r"$")
_PIXEL_CROP_RE = re.compile(r"^(\d+)(%?)(?:x(\d+)(%?))?" + _OFFSET + r"$")
_RESIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)?(%?)(?:x(\d+(?:\.\d+)?)(%?))?([!<>^@%]*)$")

CROP_FORMAT_HINT = "use the format {geometry}+{x}+{y} or {w}:{h}+{x}+{y}"


# ─────────────────────────────────────────────────────────────
# Gravity
# ─────────────────────────────────────────────────────────────


class Gravity(StrEnum):
    """Anchor a crop offset is measured from."""

    NORTH_WEST = "NorthWest"
    NORTH = "North"
    NORTH_EAST = "NorthEast"
    WEST = "West"
    CENTER = "Center"
    EAST = "East"
    SOUTH_WEST = "SouthWest"
    SOUTH = "South"
    SOUTH_EAST = "SouthEast"

    @classmethod
    def parse(cls, text: str) -> "Gravity":
        """Parse `north-west`, `NorthWest`, `north_west`, ... into a Gravity."""
        key = re.sub(r"[\s_-]", "", text).lower()
        for gravity in cls:
            if gravity.value.lower() == key:
                return gravity
        raise MalformedCrop(f"Unknown crop gravity {text!r}")

    @property
    def horizontal(self) -> float:
        if self.value.endswith("West"):
            return 0.0
        if self.value.endswith("East"):
            return 1.0
        return 0.5

    @property
    def vertical(self) -> float:
        if self.value.startswith("North"):
            return 0.0
        if self.value.startswith("South"):
            return 1.0
        return 0.5


# ─────────────────────────────────────────────────────────────
# Crop geometry
# ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CropGeometry:
    """Concrete pixel rectangle: size plus offset."""

    width: int
    height: int
    x: int = 0
    y: int = 0

    @override
    def __str__(self) -> str:
        return f"{self.width}x{self.height}{self.x:+d}{self.y:+d}"


@dataclass(frozen=True)
class AspectCrop:
    aspect_w: float
    aspect_h: float
    x: int = 0
    y: int = 0

    @override
    def __str__(self) -> str:
        return f"{self.aspect_w:g}:{self.aspect_h:g}{self.x:+d}{self.y:+d}"


@dataclass(frozen=True)
class PixelCrop:
    width: int
    height: int
    x: int = 0
    y: int = 0
    percent: bool = False

    def resolve(self, image_width: int, image_height: int) -> CropGeometry:
        if not self.percent:
            return CropGeometry(self.width, self.height, self.x, self.y)
        return CropGeometry(
            round(image_width * self.width / 100),
            round(image_height * self.height / 100),
            self.x,
            self.y,
        )

    @override
    def __str__(self) -> str:
        unit = "%" if self.percent else ""
        return f"{self.width}{unit}x{self.height}{unit}{self.x:+d}{self.y:+d}"


CropSpec = AspectCrop | PixelCrop


def parse_crop(text: str) -> CropSpec:
    """Parse a crop option.

    Raises:
        MalformedCrop: If the offset marker is missing or the text is not a geometry
    """
    value = text.strip()
    if "+" not in value:
        raise MalformedCrop(f"Crop {value!r} has no offset; {CROP_FORMAT_HINT}")

    match = _ASPECT_CROP_RE.match(value)
    if match:
        return AspectCrop(
            aspect_w=float(match.group(1)),
            aspect_h=float(match.group(2)),
            x=int(match.group(3)),
            y=int(match.group(4)),
        )

    match = _PIXEL_CROP_RE.match(value)
    if match:
        width = int(match.group(1))
        height = int(match.group(3)) if match.group(3) is not None else width
        return PixelCrop(
            width=width,
            height=height,
            x=int(match.group(5)),
            y=int(match.group(6)),
            percent=bool(match.group(2) or match.group(4)),
        )

    raise MalformedCrop(f"Cannot parse crop {value!r}; {CROP_FORMAT_HINT}")


def normalize_crop(crop: AspectCrop | str, image_width: int, image_height: int) -> CropGeometry:
    """
    Resolve an aspect-ratio crop against the actual image size.

    The largest rectangle with the requested ratio that shares one full
    dimension with the image is kept; the offset is carried over unchanged.

    Args:
        crop: AspectCrop, or its `W:H+X+Y` text
        image_width: Source width in pixels
        image_height: Source height in pixels

    Returns:
        Concrete crop geometry

    Raises:
        MalformedCrop: If `crop` is text that is not an aspect-ratio crop
        DegenerateCrop: If the ratio or image size yields an empty rectangle
    """
    if isinstance(crop, str):
        parsed = parse_crop(crop)
        if not isinstance(parsed, AspectCrop):
            raise MalformedCrop(f"Crop {crop!r} is not an aspect ratio crop")
        crop = parsed

    if image_width <= 0 or image_height <= 0:
        raise DegenerateCrop(f"Cannot crop an image of {image_width}x{image_height}")
    if crop.aspect_w <= 0 or crop.aspect_h <= 0:
        raise DegenerateCrop(f"Crop ratio {crop} must be positive")

    width = image_width
    height = image_height
    old_ratio = width / height
    new_ratio = crop.aspect_w / crop.aspect_h

    if new_ratio > old_ratio:
        # same width, shorter height
        height = math.floor(width / new_ratio)
    elif new_ratio < old_ratio:
        # shorter width, same height
        width = math.floor(height * new_ratio)

    if width <= 0 or height <= 0:
        raise DegenerateCrop(
            f"Crop ratio {crop} yields {width}x{height} on a {image_width}x{image_height} image"
        )

    return CropGeometry(width, height, crop.x, crop.y)


def resolve_crop(crop: CropSpec, image_width: int, image_height: int) -> CropGeometry:
    if isinstance(crop, AspectCrop):
        return normalize_crop(crop, image_width, image_height)
    return crop.resolve(image_width, image_height)


def crop_box(
    geometry: CropGeometry,
    gravity: Gravity | None,
    image_width: int,
    image_height: int,
) -> tuple[int, int, int, int]:
    """
    Place a crop rectangle on the canvas and clip it to the image.

    Without gravity the offset is measured from the top-left corner. With
    gravity it is measured from the anchor, inward from the anchored edges.

    Returns:
        (left, top, right, bottom) box for `PIL.Image.crop`

    Raises:
        DegenerateCrop: If the clipped rectangle is empty
    """
    if gravity is None:
        left = geometry.x
        top = geometry.y
    else:
        x_sign = -1 if gravity.horizontal == 1.0 else 1
        y_sign = -1 if gravity.vertical == 1.0 else 1
        left = round((image_width - geometry.width) * gravity.horizontal) + x_sign * geometry.x
        top = round((image_height - geometry.height) * gravity.vertical) + y_sign * geometry.y

    right = min(image_width, left + geometry.width)
    bottom = min(image_height, top + geometry.height)
    left = max(0, left)
    top = max(0, top)

    if right <= left or bottom <= top:
        raise DegenerateCrop(
            f"Crop {geometry} lies outside the {image_width}x{image_height} image"
        )
    return (left, top, right, bottom)


# ─────────────────────────────────────────────────────────────
# Resize geometry
# ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ResizeGeometry:
    text: str
    width: float | None = None
    height: float | None = None
    percent: bool = False
    exact: bool = False
    fill: bool = False
    area: bool = False
    shrink_only: bool = False
    enlarge_only: bool = False

    @override
    def __str__(self) -> str:
        return self.text

    def target_size(self, image_width: int, image_height: int) -> tuple[int, int]:
        """Size the image should be resized to; the current size when no change applies."""
        size = self._scaled_size(image_width, image_height)
        new_width, new_height = max(1, size[0]), max(1, size[1])

        if self.shrink_only and not (new_width < image_width or new_height < image_height):
            return (image_width, image_height)
        if self.enlarge_only and not (new_width > image_width or new_height > image_height):
            return (image_width, image_height)
        return (new_width, new_height)

    def _scaled_size(self, image_width: int, image_height: int) -> tuple[int, int]:
        if self.area:
            limit = self.width if self.width is not None else self.height
            if limit is None:
                return (image_width, image_height)
            scale = math.sqrt(limit / (image_width * image_height))
            return (round(image_width * scale), round(image_height * scale))

        if self.percent:
            scale_x = (self.width if self.width is not None else self.height or 100) / 100
            scale_y = (self.height if self.height is not None else self.width or 100) / 100
            return (round(image_width * scale_x), round(image_height * scale_y))

        if self.width is not None and self.height is not None:
            if self.exact:
                return (round(self.width), round(self.height))
            scale_x = self.width / image_width
            scale_y = self.height / image_height
            scale = max(scale_x, scale_y) if self.fill else min(scale_x, scale_y)
            return (round(image_width * scale), round(image_height * scale))

        if self.width is not None:
            return (round(self.width), round(image_height * self.width / image_width))

        if self.height is not None:
            return (round(image_width * self.height / image_height), round(self.height))

        return (image_width, image_height)


def parse_resize(text: str) -> ResizeGeometry | None:
    """Parse a resize geometry; None when the text is blank or not a geometry."""
    value = text.strip()
    if not value:
        return None

    match = _RESIZE_RE.match(value)
    if not match:
        return None

    width = float(match.group(1)) if match.group(1) else None
    height = float(match.group(3)) if match.group(3) else None
    width = width or None
    height = height or None
    if width is None and height is None:
        return None

    flags = match.group(5)
    return ResizeGeometry(
        text=value,
        width=width,
        height=height,
        percent=bool(match.group(2) or match.group(4) or "%" in flags),
        exact="!" in flags,
        fill="^" in flags,
        area="@" in flags,
        shrink_only=">" in flags,
        enlarge_only="<" in flags,
    )
