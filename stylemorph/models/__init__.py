"""Data models for the StyleMorph try-on studio."""

from .assets import (
    Angle,
    ClothingAsset,
    ClothingDraft,
    ClothingOrigin,
    GenerationRecord,
    ImageHandle,
    ModelAsset,
    Pose,
    new_id,
    preset_clothes,
)
from .session import SessionSnapshot

__all__ = [
    "Angle",
    "ClothingAsset",
    "ClothingDraft",
    "ClothingOrigin",
    "GenerationRecord",
    "ImageHandle",
    "ModelAsset",
    "Pose",
    "SessionSnapshot",
    "new_id",
    "preset_clothes",
]
