"""Raw ImageMagick transform parameters schema."""

from typing import ClassVar, override

from pydantic import Field

from ...common.errors import InvalidInput
from ...common.schemas import TransformSpec


class RawToolParams(TransformSpec):
    """Parameters for a raw ImageMagick invocation.

    Option string: whitespace-separated ImageMagick arguments, placed
    between the source and destination paths, e.g. `-resize 50% -sepia-tone 80%`.

    Attributes:
        args: Tool arguments, passed through unchanged
    """

    kind: ClassVar[str] = "image_magick"

    args: list[str] = Field(default_factory=list, description="ImageMagick arguments")

    @classmethod
    @override
    def from_options(cls, options: str) -> "RawToolParams":
        args = options.split()
        if not args:
            raise InvalidInput("`options` must contain at least one ImageMagick argument")
        return cls(args=args)

    @override
    def key_fields(self) -> list[str]:
        return [" ".join(self.args)]
