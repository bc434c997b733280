"""Quality transform parameters schema."""

from typing import ClassVar, override

from ...common.schemas import TransformSpec, parse_quality_field, split_options


class QualityParams(TransformSpec):
    """Parameters for the quality transform.

    Option string: `quality`, an integer 1-100. Other values are ignored
    and the image is re-encoded with the encoder default.
    """

    kind: ClassVar[str] = "quality"

    @classmethod
    @override
    def from_options(cls, options: str) -> "QualityParams":
        (quality,) = split_options(options, 1)
        return cls(quality=parse_quality_field(quality))

    @override
    def key_fields(self) -> list[str]:
        return [str(self.quality) if self.quality is not None else ""]
