"""Resize transform parameters schema."""

from typing import ClassVar, override

from ...common.schemas import (
    TransformSpec,
    parse_crop_field,
    parse_format_field,
    parse_geometry_field,
    parse_gravity_field,
    parse_quality_field,
    split_options,
)


class ResizeParams(TransformSpec):
    """Parameters for the resize transform.

    Option string: `geometry[,format[,quality[,crop[,gravity]]]]`,
    e.g. `800x800>,webp,80` or `400x400^,,,1:1+0+0,center`.

    Attributes:
        geometry: Resize geometry (W, xH, WxH with ! < > ^ % @ modifiers)
        format: Target format; also the destination extension
        quality: Encoder quality 1-100, anything else ignored
        crop: Crop applied before resizing
        gravity: Anchor for the crop offset
    """

    kind: ClassVar[str] = "resize"

    @classmethod
    @override
    def from_options(cls, options: str) -> "ResizeParams":
        geometry, format, quality, crop, gravity = split_options(options, 5)
        return cls(
            geometry=parse_geometry_field(geometry),
            format=parse_format_field(format),
            quality=parse_quality_field(quality),
            crop=parse_crop_field(crop),
            gravity=parse_gravity_field(gravity),
        )
