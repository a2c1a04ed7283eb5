# Test fixtures and configuration
import asyncio
import base64
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stylemorph.errors import ServiceError
from stylemorph.models import Angle, Pose


class FakeSynthesisService:
    """In-memory stand-in for the external synthesis service.

    Records every call; angles in ``failing_angles`` raise ServiceError,
    and ``gate`` (when set) holds every call until it is released.
    """

    def __init__(self, descriptions=None, failing_angles=(), fail_analysis=False, fail_clothing=False):
        self.descriptions = descriptions if descriptions is not None else ["red wool coat"]
        self.failing_angles = set(failing_angles)
        self.fail_analysis = fail_analysis
        self.fail_clothing = fail_clothing
        self.gate: asyncio.Event | None = None
        self.analysis_calls: list[str] = []
        self.clothing_calls: list[str] = []
        self.tryon_calls: list[tuple[str, str, Pose, Angle]] = []

    async def _wait(self):
        if self.gate is not None:
            await self.gate.wait()

    async def analyze_clothing_image(self, image):
        self.analysis_calls.append(image)
        await self._wait()
        if self.fail_analysis:
            raise ServiceError("analysis unavailable", operation="analyze_clothing_image")
        return list(self.descriptions)

    async def generate_clothing_from_text(self, description):
        self.clothing_calls.append(description)
        await self._wait()
        if self.fail_clothing:
            raise ServiceError("generation unavailable", operation="generate_clothing_from_text")
        return f"generated://{len(self.clothing_calls)}"

    async def generate_tryon_result(self, model_image, clothing_image, pose, angle):
        self.tryon_calls.append((model_image, clothing_image, pose, angle))
        await self._wait()
        if angle in self.failing_angles:
            raise ServiceError(f"{angle.value} failed", operation="generate_tryon_result", failed_angles=[angle])
        return f"result://{pose.value}/{angle.value}"


@pytest.fixture
def fake_service():
    return FakeSynthesisService()


@pytest.fixture
def studio(fake_service):
    from stylemorph import TryOnStudio
    return TryOnStudio(fake_service)


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
        0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
        0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
        0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
        0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
        0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
    ])


@pytest.fixture
def png_data_url(minimal_png_bytes):
    return f"data:image/png;base64,{base64.b64encode(minimal_png_bytes).decode()}"
