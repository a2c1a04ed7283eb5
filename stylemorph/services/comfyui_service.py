"""Production synthesis backend: Azure vision agent + ComfyUI FLUX workflows."""

import logging

from ..config import StudioConfig
from ..errors import ServiceError
from ..models import Angle, ImageHandle, Pose
from .clothing_analyzer import ClothingAnalyzer
from .comfyui_client import ComfyUIClient
from .images import encode_data_url, load_image
from .prompts import build_clothing_prompt, build_tryon_prompt

logger = logging.getLogger(__name__)


class ComfyUISynthesisService:
    """Implements ``ImageSynthesisService`` on top of ComfyUI.

    Every failure below this boundary is re-raised as ``ServiceError``.
    """

    def __init__(self, config: StudioConfig):
        self.config = config
        self.comfyui = ComfyUIClient(
            config=config.comfyui,
            generation=config.generation,
            timeout=config.request_timeout,
        )
        self.analyzer = ClothingAnalyzer(
            endpoint=config.azure_openai_endpoint,
            deployment_name=config.azure_openai_deployment,
        )

    async def check_connection(self) -> bool:
        return await self.comfyui.check_connection()

    async def analyze_clothing_image(self, image: ImageHandle) -> list[str]:
        try:
            image_bytes = await load_image(image, self.comfyui.client)
            descriptions = await self.analyzer.describe(image_bytes)
        except Exception as e:
            raise ServiceError(
                f"Clothing analysis failed: {e}", operation="analyze_clothing_image"
            ) from e

        if not descriptions:
            raise ServiceError(
                "No clothing could be identified in the image",
                operation="analyze_clothing_image",
            )
        return descriptions

    async def generate_clothing_from_text(self, description: str) -> ImageHandle:
        prompt = build_clothing_prompt(description)
        try:
            result = await self.comfyui.generate_from_text(prompt)
        except Exception as e:
            raise ServiceError(
                f"Clothing generation failed: {e}", operation="generate_clothing_from_text"
            ) from e
        return encode_data_url(result)

    async def generate_tryon_result(
        self,
        model_image: ImageHandle,
        clothing_image: ImageHandle,
        pose: Pose,
        angle: Angle,
    ) -> ImageHandle:
        prompt = build_tryon_prompt(pose, angle)
        try:
            model_bytes = await load_image(model_image, self.comfyui.client)
            clothing_bytes = await load_image(clothing_image, self.comfyui.client)
            result = await self.comfyui.generate_tryon(
                model_image=model_bytes,
                clothing_image=clothing_bytes,
                prompt=prompt,
            )
        except Exception as e:
            raise ServiceError(
                f"Try-on generation failed ({pose.value}, {angle.value}): {e}",
                operation="generate_tryon_result",
                failed_angles=[angle],
            ) from e
        return encode_data_url(result)

    async def close(self):
        await self.comfyui.close()
