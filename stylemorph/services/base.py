from __future__ import annotations

from typing import Protocol

from ..models import Angle, ImageHandle, Pose


class ImageSynthesisService(Protocol):
    """External generative service the studio depends on.

    Every method raises ``ServiceError`` when the call fails.
    """

    async def analyze_clothing_image(self, image: ImageHandle) -> list[str]: ...

    async def generate_clothing_from_text(self, description: str) -> ImageHandle: ...

    async def generate_tryon_result(
        self,
        model_image: ImageHandle,
        clothing_image: ImageHandle,
        pose: Pose,
        angle: Angle,
    ) -> ImageHandle: ...
