"""Unit tests for the pipeline stages and ImageTransformPipeline.

Tests each stage in isolation, the fixed stage order and a full apply().
"""

from pathlib import Path

import pytest
from PIL import Image

from cl_image_cache import DecodeError, DegenerateCrop, EncodeError, Gravity
from cl_image_cache.pipeline.algo.geometry import AspectCrop, PixelCrop, parse_resize
from cl_image_cache.pipeline.algo.stages import (
    Rendition,
    apply_quality,
    auto_orient,
    convert_format,
    crop_image,
    get_pil_format,
    load_image,
    resize_image,
    strip_metadata,
    write_image,
)
from cl_image_cache.pipeline.pipeline import ImageTransformPipeline, build_stages
from cl_image_cache.plugins.resize import ResizeParams

RED = (255, 0, 0)
BLUE = (0, 0, 255)


@pytest.fixture
def split_rendition() -> Rendition:
    """1000x500, left half red, right half blue."""
    img = Image.new("RGB", (1000, 500), color=RED)
    img.paste(BLUE, (500, 0, 1000, 500))
    return Rendition(image=img)


# ============================================================================
# LOAD / ORIENT / STRIP
# ============================================================================


def test_load_image_rejects_garbage(tmp_path: Path):
    bogus = tmp_path / "bogus.jpg"
    _ = bogus.write_text("not an image")

    with pytest.raises(DecodeError, match="bogus.jpg"):
        _ = load_image(bogus)


def test_auto_orient_bakes_rotation(image_factory):
    source = image_factory("rotated.jpg", size=(200, 100), exif_orientation=6)

    loaded = load_image(source)
    oriented = auto_orient(loaded)

    assert loaded.image.size == (200, 100)
    assert oriented.image.size == (100, 200)


def test_auto_orient_without_exif_keeps_size(split_rendition: Rendition):
    assert auto_orient(split_rendition).image.size == (1000, 500)


def test_strip_metadata_drops_exif_and_icc(image_factory):
    source = image_factory("tagged.jpg", size=(64, 48), exif_orientation=1)
    rendition = load_image(source)
    rendition.image.info["icc_profile"] = b"fake-profile"
    assert "exif" in rendition.image.info

    stripped = strip_metadata(rendition)

    assert "exif" not in stripped.image.info
    assert "icc_profile" not in stripped.image.info
    # input rendition is left untouched
    assert "exif" in rendition.image.info


# ============================================================================
# CROP
# ============================================================================


def test_crop_without_spec_is_noop(split_rendition: Rendition):
    assert crop_image(split_rendition, None, Gravity.CENTER) is split_rendition


def test_ratio_crop_uses_top_left_offset(split_rendition: Rendition):
    cropped = crop_image(split_rendition, AspectCrop(1, 1, 0, 0))

    assert cropped.image.size == (500, 500)
    assert cropped.image.getpixel((499, 0)) == RED


def test_gravity_applies_to_normalised_rectangle(split_rendition: Rendition):
    cropped = crop_image(split_rendition, AspectCrop(1, 1, 0, 0), Gravity.CENTER)

    assert cropped.image.size == (500, 500)
    assert cropped.image.getpixel((0, 0)) == RED
    assert cropped.image.getpixel((499, 0)) == BLUE


def test_pixel_crop_with_east_gravity(split_rendition: Rendition):
    cropped = crop_image(split_rendition, PixelCrop(100, 100, 0, 0), Gravity.EAST)

    assert cropped.image.size == (100, 100)
    assert cropped.image.getpixel((50, 50)) == BLUE


def test_crop_outside_image_is_degenerate(split_rendition: Rendition):
    with pytest.raises(DegenerateCrop):
        _ = crop_image(split_rendition, PixelCrop(100, 100, 2000, 0))


# ============================================================================
# RESIZE / FORMAT / QUALITY
# ============================================================================


def test_resize_without_geometry_is_noop(split_rendition: Rendition):
    assert resize_image(split_rendition, None) is split_rendition


def test_resize_fits_box(split_rendition: Rendition):
    resized = resize_image(split_rendition, parse_resize("200x200"))

    assert resized.image.size == (200, 100)


def test_convert_format_records_lowercase_target(split_rendition: Rendition):
    assert convert_format(split_rendition, "WEBP").format == "webp"
    assert convert_format(split_rendition, None) is split_rendition


@pytest.mark.parametrize("quality", [None, 0, 101, 150])
def test_quality_out_of_range_is_ignored(split_rendition: Rendition, quality: int | None):
    assert apply_quality(split_rendition, quality).quality is None


def test_quality_in_range_is_applied(split_rendition: Rendition):
    assert apply_quality(split_rendition, 80).quality == 80


# ============================================================================
# WRITE
# ============================================================================


def test_get_pil_format():
    assert get_pil_format("jpg") == "JPEG"
    assert get_pil_format(".JPEG") == "JPEG"
    assert get_pil_format("webp") == "WEBP"
    assert get_pil_format("tif") == "TIFF"
    assert get_pil_format(".jfif") == "JPEG"
    assert get_pil_format("jpe") == "JPEG"
    assert get_pil_format("") is None


def test_write_image_converts_alpha_for_jpeg(tmp_path: Path):
    rgba = Rendition(image=Image.new("RGBA", (10, 10), (0, 255, 0, 128)), format="jpg")

    output = write_image(rgba, tmp_path / "out.jpg", default_format=".png")

    with Image.open(output) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"


def test_write_image_unknown_format(tmp_path: Path, split_rendition: Rendition):
    with pytest.raises(EncodeError, match="NOSUCHFORMAT"):
        _ = write_image(split_rendition, tmp_path / "out.x", default_format="nosuchformat")


def test_write_image_falls_back_to_source_format(tmp_path: Path, split_rendition: Rendition):
    rendition = Rendition(image=split_rendition.image, source_format="PNG")

    output = write_image(rendition, tmp_path / "photo", default_format="")

    with Image.open(output) as img:
        assert img.format == "PNG"


def test_write_image_without_any_format(tmp_path: Path, split_rendition: Rendition):
    with pytest.raises(EncodeError, match="No output format"):
        _ = write_image(split_rendition, tmp_path / "photo", default_format="")


def test_load_image_records_source_format(image_factory):
    source = image_factory("photo", size=(20, 10), format="PNG")

    assert load_image(source).source_format == "PNG"


# ============================================================================
# PIPELINE
# ============================================================================


def test_stage_order():
    stages = build_stages(ResizeParams.from_options("200x200"))

    assert len(stages) == 6
    assert stages[0] is auto_orient
    assert [stage.func for stage in stages[1:5]] == [  # pyright: ignore[reportFunctionMemberAccess]
        crop_image,
        resize_image,
        convert_format,
        apply_quality,
    ]
    assert stages[-1] is strip_metadata


def test_pipeline_apply(synthetic_image: Path, temp_output_dir: Path):
    dest = temp_output_dir / "cat.webp"

    result = ImageTransformPipeline().apply(
        synthetic_image, dest, ResizeParams.from_options("400x400>,webp,80")
    )

    assert result == dest
    with Image.open(dest) as img:
        assert img.format == "WEBP"
        assert img.size == (400, 300)
    assert [p.name for p in temp_output_dir.iterdir()] == ["cat.webp"]


def test_pipeline_crop_then_resize(image_factory, tmp_path: Path):
    source = image_factory("wide.png", size=(1000, 500))
    dest = tmp_path / "wide.png"

    _ = ImageTransformPipeline().apply(source, dest, ResizeParams.from_options("100x100,,,1:1+0+0"))

    with Image.open(dest) as img:
        assert img.size == (100, 100)
        assert not img.getexif()


def test_pipeline_orients_and_strips(image_factory, tmp_path: Path):
    source = image_factory("rotated.jpg", size=(200, 100), exif_orientation=6)
    dest = tmp_path / "rotated.jpg"

    _ = ImageTransformPipeline().apply(source, dest, ResizeParams.from_options("50%"))

    with Image.open(dest) as img:
        assert img.size == (50, 100)
        assert len(img.getexif()) == 0
