"""External services for the StyleMorph studio."""

from .base import ImageSynthesisService
from .clothing_analyzer import ClothingAnalyzer
from .comfyui_client import ComfyUIClient
from .comfyui_service import ComfyUISynthesisService

__all__ = [
    "ClothingAnalyzer",
    "ComfyUIClient",
    "ComfyUISynthesisService",
    "ImageSynthesisService",
]
