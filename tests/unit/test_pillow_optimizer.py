import io

import pytest
from PIL import Image

from folio.adapters.images import PillowImageOptimizer, optimize_bytes
from folio.core.ports.images import ImageProcessingError, fit_within


def encode(size, fmt="PNG", mode="RGB"):
    buf = io.BytesIO()
    Image.new(mode, size, color="red").save(buf, format=fmt)
    return buf.getvalue()


@pytest.mark.parametrize(
    "size, expected",
    [
        ((2400, 1200), (1200, 600)),
        ((1000, 3000), (400, 1200)),
        ((1500, 1500), (1200, 1200)),
        ((800, 600), (800, 600)),
    ],
)
def test_fit_within(size, expected):
    assert fit_within(*size, 1200, 1200) == expected


def test_fit_within_respects_both_bounds():
    assert fit_within(1000, 1100, 800, 1200) == (800, 880)
    assert fit_within(900, 1000, 1200, 500) == (450, 500)


def test_fit_within_rejects_empty_image():
    with pytest.raises(ValueError):
        fit_within(0, 10, 1200, 1200)


def test_landscape_png_is_downscaled_and_stays_png():
    result = optimize_bytes(encode((2400, 1200)))

    assert (result.width, result.height) == (1200, 600)
    assert result.content_type == "image/png"
    with Image.open(io.BytesIO(result.data)) as img:
        assert img.size == (1200, 600)
        assert img.format == "PNG"


def test_jpeg_keeps_format():
    result = optimize_bytes(encode((600, 2400), fmt="JPEG"), quality=0.5)

    assert result.image_format == "JPEG"
    assert result.content_type == "image/jpeg"
    assert (result.width, result.height) == (300, 1200)


def test_small_image_keeps_dimensions():
    result = optimize_bytes(encode((320, 200), fmt="WEBP"))
    assert (result.width, result.height) == (320, 200)
    assert result.content_type == "image/webp"


def test_garbage_bytes_raise():
    with pytest.raises(ImageProcessingError):
        optimize_bytes(b"definitely not an image")


def test_oversized_pixel_count_raises():
    buf = io.BytesIO()
    Image.new("1", (14000, 14000)).save(buf, format="PNG")

    with pytest.raises(ImageProcessingError):
        optimize_bytes(buf.getvalue())


def test_quality_out_of_range_raises():
    with pytest.raises(ImageProcessingError):
        optimize_bytes(encode((10, 10)), quality=1.5)


@pytest.mark.asyncio
async def test_async_optimizer_runs_off_loop():
    result = await PillowImageOptimizer().optimize(encode((100, 2000)), max_height=500)
    assert (result.width, result.height) == (25, 500)
