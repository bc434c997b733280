"""Test configuration and fixtures for cl_image_cache.

This module provides:
- Pytest configuration (markers, dependency checks)
- Function-scoped fixtures (site roots, synthetic images, cache instances)
"""

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import override

import pytest
from PIL import Image, ImageDraw

from cl_image_cache import CacheSettings, ImageCache, ImageTransformPipeline, LocalSite
from cl_image_cache.common.schemas import TransformSpec
from cl_image_cache.common.transform_module import TransformModule
from cl_image_cache.pipeline.raw_tool import detect_magick_command
from cl_image_cache.plugins.crop import CropTransform
from cl_image_cache.plugins.format import FormatTransform
from cl_image_cache.plugins.quality import QualityTransform
from cl_image_cache.plugins.raw_tool import RawToolTransform
from cl_image_cache.plugins.resize import ResizeTransform

# Source files are back-dated so a freshly written artifact is strictly newer
SOURCE_AGE_SECONDS = 3600

ImageFactory = Callable[..., Path]


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "requires_imagemagick: requires ImageMagick (magick or convert) to be installed",
    )


def pytest_runtest_setup(item):
    """Skip ImageMagick tests when the tool is missing."""
    if item.get_closest_marker("requires_imagemagick") and detect_magick_command() is None:
        pytest.skip(
            "ImageMagick not installed. "
            "Install: brew install imagemagick (macOS) or apt-get install imagemagick (Linux)"
        )


# ============================================================================
# Helpers
# ============================================================================


def set_mtime(path: Path, seconds_from_now: float) -> None:
    stamp = time.time() + seconds_from_now
    os.utime(path, (stamp, stamp))


class CountingPipeline(ImageTransformPipeline):
    """Pillow pipeline that counts how often it actually ran."""

    def __init__(self) -> None:
        self.calls: int = 0

    @override
    def apply(self, src_path, dest_path, spec):
        self.calls += 1
        return super().apply(src_path, dest_path, spec)


# ============================================================================
# Function-Scoped Fixtures (Run Per Test)
# ============================================================================


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Provide clean temporary directory for test outputs."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Provide an empty site source root."""
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def site(site_root: Path) -> LocalSite:
    return LocalSite(site_root, url="/blog")


@pytest.fixture
def settings() -> CacheSettings:
    return CacheSettings(cache_dir="cache/resize", hash_length=32)


@pytest.fixture
def image_factory(site_root: Path) -> ImageFactory:
    """Create synthetic images inside the site root.

    Usage:
        path = image_factory("photo.jpg", size=(1000, 500))
    """

    def create(
        name: str,
        size: tuple[int, int] = (800, 600),
        color: tuple[int, ...] = (73, 109, 137),
        mode: str = "RGB",
        exif_orientation: int | None = None,
        age: float = SOURCE_AGE_SECONDS,
        format: str | None = None,
    ) -> Path:
        path = site_root / name
        path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.new(mode, size, color=color)
        if mode == "RGB":
            draw = ImageDraw.Draw(img)
            width, height = size
            # Red top-left corner makes orientation and crops observable
            draw.rectangle([0, 0, width // 10, height // 10], fill=(255, 0, 0))
            draw.line([(0, height // 2), (width, height // 2)], fill=(255, 255, 255))

        save_kwargs: dict[str, object] = {}
        if exif_orientation is not None:
            exif = Image.Exif()
            exif[0x0112] = exif_orientation
            save_kwargs["exif"] = exif.tobytes()
        img.save(path, format=format, **save_kwargs)

        set_mtime(path, -age)
        return path

    return create


@pytest.fixture
def synthetic_image(image_factory: ImageFactory) -> Path:
    """cat.jpg, 800x600, last modified an hour ago."""
    return image_factory("cat.jpg", size=(800, 600))


@pytest.fixture
def registry() -> dict[str, TransformModule[TransformSpec]]:
    """Built-in transforms without going through entry points."""
    transforms: list[TransformModule[TransformSpec]] = [
        ResizeTransform(),  # pyright: ignore[reportAssignmentType]
        FormatTransform(),  # pyright: ignore[reportAssignmentType]
        CropTransform(),  # pyright: ignore[reportAssignmentType]
        QualityTransform(),  # pyright: ignore[reportAssignmentType]
        RawToolTransform(),  # pyright: ignore[reportAssignmentType]
    ]
    return {transform.kind: transform for transform in transforms}


@pytest.fixture
def pipeline() -> CountingPipeline:
    return CountingPipeline()


@pytest.fixture
def image_cache(
    site: LocalSite,
    settings: CacheSettings,
    registry: dict[str, TransformModule[TransformSpec]],
    pipeline: CountingPipeline,
) -> ImageCache:
    """ImageCache on a temporary site with a counting pipeline."""
    return ImageCache(site, settings=settings, registry=registry, pipeline=pipeline)
