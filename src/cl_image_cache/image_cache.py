"""ImageCache - entry points the templating layer calls."""

from importlib.metadata import entry_points
from typing import cast

from .cache.path_resolver import PathResolver
from .common.config import CacheSettings
from .common.errors import InvalidInput
from .common.schemas import TransformSpec
from .common.site import SiteContext
from .common.transform_module import TransformContext, TransformModule
from .pipeline.pipeline import ImageTransformPipeline
from .pipeline.raw_tool import ImageMagickTool

ENTRY_POINT_GROUP = "cl_image_cache.transforms"


def get_transform_registry() -> dict[str, TransformModule[TransformSpec]]:
    """Dynamically load all transform kinds from entry points.

    Discovers transforms from [project.entry-points."cl_image_cache.transforms"]
    in pyproject.toml.

    Returns:
        Dict mapping kind -> TransformModule instance

    Raises:
        RuntimeError: If a plugin fails to load
    """
    registry: dict[str, TransformModule[TransformSpec]] = {}
    eps = entry_points(group=ENTRY_POINT_GROUP)

    for ep in eps:
        try:
            transform_class = cast(type[TransformModule[TransformSpec]], ep.load())
            transform: TransformModule[TransformSpec] = transform_class()
            registry[transform.kind] = transform
        except Exception as e:
            # Plugin dependency missing = exception (fail fast)
            raise RuntimeError(f"Failed to load transform '{ep.name}': {e}") from e

    return registry


class ImageCache:
    """Transform cache bound to one site.

    Responsibilities:
    - Maintains the transform registry (auto-discovered from entry points)
    - Owns the path resolver, Pillow pipeline and ImageMagick tool
    - Dispatches each request to its TransformModule

    Example:
        site = LocalSite("./site", url="/blog")
        images = ImageCache(site)

        src = images.resize("photos/cat.jpg", "400x400>,webp,80")
        # "/blog/cache/resize/<hash>.webp"
    """

    def __init__(
        self,
        site: SiteContext,
        settings: CacheSettings | None = None,
        registry: dict[str, TransformModule[TransformSpec]] | None = None,
        pipeline: ImageTransformPipeline | None = None,
        tool: ImageMagickTool | None = None,
    ):
        """Initialize the cache.

        Args:
            site: Host collaborator supplying root, base URL and file registry
            settings: Cache settings. If None, read from the environment.
            registry: Optional custom registry. If None, auto-discovers from entry points.
            pipeline: Optional Pillow pipeline replacement
            tool: Optional ImageMagick wrapper replacement
        """
        self.settings: CacheSettings = settings if settings is not None else CacheSettings()
        self.registry: dict[str, TransformModule[TransformSpec]] = (
            registry if registry is not None else get_transform_registry()
        )
        self.context: TransformContext = TransformContext(
            site=site,
            resolver=PathResolver(self.settings),
            pipeline=pipeline if pipeline is not None else ImageTransformPipeline(),
            tool=(
                tool
                if tool is not None
                else ImageMagickTool(self.settings.magick_command, self.settings.tool_timeout)
            ),
        )

    def get_supported_kinds(self) -> list[str]:
        return sorted(self.registry)

    def transform(self, kind: str, source: str, options: str) -> str:
        """
        Serve one request of the given kind.

        Returns:
            Reference path for embedding into generated markup

        Raises:
            InvalidInput: If the kind is unknown or the inputs are invalid
            ImageCacheError: Any other failure of the request
        """
        module = self.registry.get(kind)
        if module is None:
            raise InvalidInput(
                f"Unknown transform {kind!r}; supported: {', '.join(self.get_supported_kinds())}"
            ).with_request(source, options)
        return module.execute(source, options, self.context)

    def resize(self, source: str, options: str) -> str:
        """options: `geometry[,format[,quality[,crop[,gravity]]]]`, e.g. "800x800>"."""
        return self.transform("resize", source, options)

    def format(self, source: str, options: str) -> str:
        """options: target format, e.g. "webp"."""
        return self.transform("format", source, options)

    def crop(self, source: str, options: str) -> str:
        """options: `crop[,gravity]`, e.g. "300x300+0+0" or "1:1+0+0,center"."""
        return self.transform("crop", source, options)

    def quality(self, source: str, options: str) -> str:
        """options: quality 1-100, e.g. "80"."""
        return self.transform("quality", source, options)

    def image_magick(self, source: str, options: str) -> str:
        """options: whitespace-separated ImageMagick arguments, e.g. "-resize 50%"."""
        return self.transform("image_magick", source, options)
