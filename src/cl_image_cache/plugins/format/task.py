"""Format conversion transform implementation."""

from typing import override

from ...common.transform_module import TransformModule
from .schema import FormatParams


class FormatTransform(TransformModule[FormatParams]):
    """Re-encode an image in another format."""

    schema: type[FormatParams] = FormatParams

    @property
    @override
    def kind(self) -> str:
        return "format"

    @property
    @override
    def action(self) -> str:
        return "Reformatting"
