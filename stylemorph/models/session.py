"""Read-only view of the session handed to the presentation layer."""

from pydantic import BaseModel, ConfigDict, computed_field

from .assets import (
    Angle,
    ClothingAsset,
    ClothingDraft,
    GenerationRecord,
    ImageHandle,
    ModelAsset,
    Pose,
)


class SessionSnapshot(BaseModel):
    """Point-in-time copy of the studio session."""

    model_config = ConfigDict(protected_namespaces=())

    version: int
    step: int

    # Libraries, most recent first
    models: list[ModelAsset]
    clothing: list[ClothingAsset]
    drafts: list[ClothingDraft]
    history: list[GenerationRecord]

    # Selection
    selected_model: ModelAsset | None = None
    selected_clothing: ClothingAsset | None = None
    current_result_preview: ImageHandle | None = None
    selected_pose: Pose
    selected_angles: list[Angle]

    # In-flight flags
    analyzing: bool = False
    synthesizing_draft_id: str | None = None
    batch_in_progress: bool = False
    failed_angles: list[Angle] = []  # angles dropped by the last settle-all batch

    @computed_field
    @property
    def is_ready(self) -> bool:
        """Whether both a model and a clothing item are selected."""
        return self.selected_model is not None and self.selected_clothing is not None
