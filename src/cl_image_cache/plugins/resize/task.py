"""Resize transform implementation."""

from typing import override

from ...common.transform_module import TransformModule
from .schema import ResizeParams


class ResizeTransform(TransformModule[ResizeParams]):
    """Resize, with optional crop, format and quality in the same pass."""

    schema: type[ResizeParams] = ResizeParams

    @property
    @override
    def kind(self) -> str:
        return "resize"

    @property
    @override
    def action(self) -> str:
        return "Resizing"
