# Test fixtures and configuration
import io
import struct
import sys
import zlib
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from atelier.config import AtelierConfig, SimulationConfig  # noqa: E402
from atelier.models import ImageAsset, IncomingFile  # noqa: E402


def make_png(width: int, height: int, color=(200, 30, 30, 255)) -> bytes:
    """PNG bytes of a solid-color image."""
    output = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(output, format="PNG")
    return output.getvalue()


def make_oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """A small PNG whose header claims dimensions past Pillow's pixel limit."""
    data = bytearray(make_png(10, 10))
    data[16:24] = struct.pack(">II", width, height)
    data[29:33] = struct.pack(">I", zlib.crc32(bytes(data[12:29])) & 0xffffffff)
    return bytes(data)


def make_asset(width: int, height: int, color=(200, 30, 30, 255), name="image.png") -> ImageAsset:
    return ImageAsset.from_bytes(make_png(width, height, color), filename=name)


@pytest.fixture
def png_bytes():
    """A small valid PNG image."""
    return make_png(40, 60)


@pytest.fixture
def image_file(png_bytes):
    return IncomingFile(filename="muse.png", content_type="image/png", data=png_bytes)


@pytest.fixture
def muse_assets():
    """Three distinctly colored muse images of different shapes."""
    return [
        make_asset(300, 400, (255, 0, 0, 255), "muse0.png"),
        make_asset(500, 250, (0, 255, 0, 255), "muse1.png"),
        make_asset(100, 100, (0, 0, 255, 255), "muse2.png"),
    ]


@pytest.fixture
def garment_assets():
    """Three distinctly colored garment images."""
    return [
        make_asset(200, 300, (255, 255, 0, 255), "garment0.png"),
        make_asset(320, 320, (0, 255, 255, 255), "garment1.png"),
        make_asset(150, 90, (255, 0, 255, 255), "garment2.png"),
    ]


@pytest.fixture
def fast_simulation():
    """Simulation delays disabled."""
    return SimulationConfig(photo_delay=0, video_delay=0, fallback_delay=0)


@pytest.fixture
def offline_config(fast_simulation):
    """Config without a credential, so generation is simulated."""
    return AtelierConfig(gemini_api_key=None, simulation=fast_simulation, _env_file=None)


@pytest.fixture
def online_config(fast_simulation):
    """Config with a (fake) credential, so generation hits the transport."""
    return AtelierConfig(gemini_api_key="test-key", simulation=fast_simulation, _env_file=None)
