"""Format conversion parameters schema."""

from typing import ClassVar, override

from ...common.schemas import TransformSpec, parse_format_field, split_options


class FormatParams(TransformSpec):
    """Parameters for the format transform.

    Option string: `format`, e.g. `webp`. Converting a cached artifact is
    supported by passing its returned reference as the source.
    """

    kind: ClassVar[str] = "format"

    @classmethod
    @override
    def from_options(cls, options: str) -> "FormatParams":
        (format,) = split_options(options, 1)
        return cls(format=parse_format_field(format))

    @override
    def key_fields(self) -> list[str]:
        return [self.format or ""]
