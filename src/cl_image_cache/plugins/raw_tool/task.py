"""Raw ImageMagick transform implementation."""

from typing import override

from ...common.schemas import ResolvedPaths
from ...common.transform_module import TransformContext, TransformModule
from .schema import RawToolParams


class RawToolTransform(TransformModule[RawToolParams]):
    """Hands the arguments to ImageMagick instead of the Pillow pipeline.

    Still goes through path resolution, the staleness check and the
    atomic write.
    """

    schema: type[RawToolParams] = RawToolParams

    @property
    @override
    def kind(self) -> str:
        return "image_magick"

    @property
    @override
    def action(self) -> str:
        return "Running ImageMagick on"

    @override
    def produce(self, paths: ResolvedPaths, params: RawToolParams, context: TransformContext) -> None:
        _ = context.tool.run(paths.src_path, paths.dest_path, params.args)
