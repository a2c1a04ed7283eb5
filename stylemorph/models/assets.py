"""Asset, draft and generation record models."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Opaque reference to image content: a base64 data URL or an http(s) URL.
ImageHandle = str


def new_id() -> str:
    """Generate a session-unique identifier."""
    return uuid.uuid4().hex


class Pose(str, Enum):
    """Body pose requested for a try-on result. Exactly one is active."""
    STANDING = "standing"
    SITTING = "sitting"
    WALKING = "walking"
    RUNNING = "running"
    FASHION_POSE = "fashion-pose"


class Angle(str, Enum):
    """Camera angle requested for a try-on result. Several may be active."""
    FRONT = "front"
    SIDE = "side"
    BACK = "back"
    THREE_QUARTER = "three-quarter"


class ClothingOrigin(str, Enum):
    UPLOADED = "uploaded"
    PRESET = "preset"
    GENERATED = "generated"


class ModelAsset(BaseModel):
    """A photo of the person who will wear the clothing."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    image: ImageHandle
    created_at: datetime = Field(default_factory=datetime.now)


class ClothingAsset(BaseModel):
    """A clothing image available for try-on."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    image: ImageHandle
    origin: ClothingOrigin
    display_name: str | None = None
    source_description: str | None = Field(
        default=None, description="Text the image was generated from, if any"
    )


class ClothingDraft(BaseModel):
    """Editable clothing description awaiting synthesis."""

    id: str = Field(default_factory=new_id)
    text: str
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class GenerationRecord(BaseModel):
    """A completed try-on generation.

    Stores image handles by value, so a record stays viewable after the
    model or clothing asset it was made from is deleted.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str = Field(default_factory=new_id)
    model_image: ImageHandle
    clothing_image: ImageHandle
    result_image: ImageHandle
    created_at: datetime = Field(default_factory=datetime.now)
    pose: Pose
    angle: Angle


def preset_clothes() -> list[ClothingAsset]:
    """Clothing assets available when a session starts."""
    return [
        ClothingAsset(
            id="p1",
            image="https://picsum.photos/id/10/400/400",
            origin=ClothingOrigin.PRESET,
            display_name="Forest dress",
            source_description="Forest style green dress",
        ),
        ClothingAsset(
            id="p2",
            image="https://picsum.photos/id/20/400/400",
            origin=ClothingOrigin.PRESET,
            display_name="Minimal white tee",
            source_description="Minimalist white t-shirt",
        ),
        ClothingAsset(
            id="p3",
            image="https://picsum.photos/id/30/400/400",
            origin=ClothingOrigin.PRESET,
            display_name="Vintage denim jacket",
            source_description="Vintage denim jacket",
        ),
        ClothingAsset(
            id="p4",
            image="https://picsum.photos/id/40/400/400",
            origin=ClothingOrigin.PRESET,
            display_name="Business suit",
            source_description="Business suit",
        ),
    ]
