"""cl_image_cache - Content-addressed image transform cache for static site builds."""

from .cache.path_resolver import PathResolver
from .cache.staleness import must_create
from .common.config import CacheSettings, FilenamePolicy
from .common.errors import (
    DecodeError,
    DegenerateCrop,
    EncodeError,
    ImageCacheError,
    InvalidInput,
    MalformedCrop,
    ToolInvocationError,
    UnreadableSource,
)
from .common.schemas import ResolvedPaths, TransformSpec
from .common.site import GeneratedFile, LocalSite, SiteContext
from .common.transform_module import TransformModule
from .image_cache import ImageCache, get_transform_registry
from .pipeline.algo.geometry import Gravity, normalize_crop
from .pipeline.pipeline import ImageTransformPipeline

__version__ = "0.1.0"

__all__ = [
    "ImageCache",
    "get_transform_registry",
    "CacheSettings",
    "FilenamePolicy",
    "SiteContext",
    "LocalSite",
    "GeneratedFile",
    "PathResolver",
    "ResolvedPaths",
    "must_create",
    "TransformSpec",
    "TransformModule",
    "ImageTransformPipeline",
    "Gravity",
    "normalize_crop",
    "ImageCacheError",
    "InvalidInput",
    "UnreadableSource",
    "MalformedCrop",
    "DegenerateCrop",
    "DecodeError",
    "EncodeError",
    "ToolInvocationError",
    "__version__",
]
