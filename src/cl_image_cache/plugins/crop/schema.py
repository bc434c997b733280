"""Crop transform parameters schema."""

from typing import ClassVar, override

from ...common.schemas import (
    TransformSpec,
    parse_crop_field,
    parse_gravity_field,
    split_options,
)


class CropParams(TransformSpec):
    """Parameters for the crop transform.

    Option string: `crop[,gravity]`, e.g. `300x300+0+0`, `16:9+0+0,center`.
    The crop must carry a `+x+y` offset.
    """

    kind: ClassVar[str] = "crop"

    @classmethod
    @override
    def from_options(cls, options: str) -> "CropParams":
        crop, gravity = split_options(options, 2)
        return cls(crop=parse_crop_field(crop), gravity=parse_gravity_field(gravity))

    @override
    def key_fields(self) -> list[str]:
        return [
            str(self.crop) if self.crop is not None else "",
            self.gravity.value if self.gravity is not None else "",
        ]
