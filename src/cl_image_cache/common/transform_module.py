"""TransformModule - Abstract base class for transform kinds."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from loguru import logger

from ..cache.path_resolver import PathResolver
from ..cache.staleness import must_create
from ..cache.writer import destination_lock
from ..pipeline.pipeline import ImageTransformPipeline
from ..pipeline.raw_tool import ImageMagickTool
from .errors import EncodeError, ImageCacheError, InvalidInput
from .schemas import ResolvedPaths, TransformSpec
from .site import SiteContext, join_url

P = TypeVar("P", bound=TransformSpec)


@dataclass(frozen=True)
class TransformContext:
    """Collaborators shared by every request of one ImageCache."""

    site: SiteContext
    resolver: PathResolver
    pipeline: ImageTransformPipeline
    tool: ImageMagickTool


def validate_request(source: object, options: object) -> None:
    """
    Raises:
        InvalidInput: If source or options is not a non-empty string
    """
    if not isinstance(source, str):
        raise InvalidInput(f"`source` must be a string - got: {type(source).__name__}")
    if not source:
        raise InvalidInput("`source` may not be empty")
    if not isinstance(options, str):
        raise InvalidInput(f"`options` must be a string - got: {type(options).__name__}")
    if not options:
        raise InvalidInput("`options` may not be empty")


class TransformModule(ABC, Generic[P]):
    """
    Stateless, template-method based transform kind.

    - Options are parsed once into the schema and passed through
    - execute() owns path resolution, staleness, locking and registration
    - produce() only writes the destination file
    """

    schema: type[P]

    @property
    @abstractmethod
    def kind(self) -> str: ...

    @property
    def action(self) -> str:
        """Verb used in cache-miss log lines."""
        return "Transforming"

    def parse(self, options: str) -> P:
        return self.schema.from_options(options)  # pyright: ignore[reportReturnType]

    def produce(self, paths: ResolvedPaths, params: P, context: TransformContext) -> None:
        """Write the destination file. Default: the Pillow pipeline."""
        _ = context.pipeline.apply(paths.src_path, paths.dest_path, params)

    def execute(self, source: str, options: str, context: TransformContext) -> str:
        """
        Serve one request.

        Returns:
            base_url joined with the cache-relative destination path

        Raises:
            ImageCacheError: Any failure, annotated with source and options
        """
        try:
            validate_request(source, options)
            logger.debug(f"{self.kind} request: source={source!r} options={options!r}")

            params = self.parse(options)
            paths = context.resolver.resolve(
                context.site.source_root,
                source,
                params.cache_key(),
                params.output_format(),
            )
            try:
                paths.dest_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise EncodeError(f"Cannot create cache directory {paths.dest_dir}: {exc}") from exc

            created = False
            with destination_lock(paths.dest_path):
                if must_create(paths.src_path, paths.dest_path):
                    logger.info(
                        f"{self.action} '{source}' to '{paths.dest_path_relative}'"
                        + f" - using {self.kind} options: '{options}'"
                    )
                    self.produce(paths, params, context)
                    created = True
                    logger.info(f"Wrote {paths.dest_path}")
                else:
                    logger.debug(f"Cache hit for '{source}': {paths.dest_path_relative}")

        except ImageCacheError as exc:
            _ = exc.with_request(source, options)
            raise

        if created:
            context.site.register_generated_file(
                context.site.source_root,
                context.resolver.cache_dir,
                paths.dest_filename,
            )

        return join_url(context.site.base_url, paths.dest_path_relative)
