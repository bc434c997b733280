"""Quality transform implementation."""

from typing import override

from ...common.transform_module import TransformModule
from .schema import QualityParams


class QualityTransform(TransformModule[QualityParams]):
    schema: type[QualityParams] = QualityParams

    @property
    @override
    def kind(self) -> str:
        return "quality"

    @property
    @override
    def action(self) -> str:
        return "Re-encoding"
