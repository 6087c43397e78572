import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import imagestack
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from imagestack.loading import ImageInput


def encode_image(
    size=(200, 100),
    fmt: str = "PNG",
    mode: str = "RGB",
    color="white",
) -> bytes:
    """Encode a solid-color test image."""
    img = Image.new(mode, size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


# Common test fixtures
@pytest.fixture
def png_input():
    """A 200x100 PNG input."""
    return ImageInput("wide.png", encode_image((200, 100), "PNG"), "image/png")


@pytest.fixture
def jpeg_input():
    """A 100x200 JPEG input."""
    return ImageInput("tall.jpg", encode_image((100, 200), "JPEG"), "image/jpeg")


@pytest.fixture
def rgba_input():
    """A half-transparent 50x50 PNG input."""
    data = encode_image((50, 50), "PNG", mode="RGBA", color=(255, 0, 0, 128))
    return ImageInput("alpha.png", data, "image/png")


@pytest.fixture
def image_inputs(png_input, jpeg_input):
    """Four valid inputs of mixed formats."""
    gif = ImageInput("anim.gif", encode_image((80, 40), "GIF", mode="P", color=1), "image/gif")
    bmp = ImageInput("square.bmp", encode_image((30, 30), "BMP"), "image/bmp")
    return [png_input, jpeg_input, gif, bmp]


@pytest.fixture
def sample_image(tmp_path: Path):
    """Write a simple test image to disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
