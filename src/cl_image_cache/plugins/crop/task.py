"""Crop transform implementation."""

from typing import override

from ...common.transform_module import TransformModule
from .schema import CropParams


class CropTransform(TransformModule[CropParams]):
    schema: type[CropParams] = CropParams

    @property
    @override
    def kind(self) -> str:
        return "crop"

    @property
    @override
    def action(self) -> str:
        return "Cropping"
