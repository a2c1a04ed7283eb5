"""The try-on studio controller.

``TryOnStudio`` owns the session state and is its only writer. Every user
action maps to one named method; the presentation layer reads the session
through ``snapshot()``.
"""

import logging

from .config import BatchPolicy, StudioConfig
from .errors import NotFoundError, ValidationError
from .models import (
    Angle,
    ClothingAsset,
    ClothingDraft,
    ClothingOrigin,
    GenerationRecord,
    ImageHandle,
    ModelAsset,
    Pose,
    SessionSnapshot,
)
from .pipeline import BatchTryOnOrchestrator, DraftPipeline, SynthesisPipeline
from .services.base import ImageSynthesisService
from .state import STEPS, SessionState

logger = logging.getLogger(__name__)


class TryOnStudio:
    """Session controller for the three-step try-on wizard.

    Steps: 1 = pick a model, 2 = build or pick clothing, 3 = pose/angle
    synthesis.
    """

    def __init__(
        self,
        service: ImageSynthesisService,
        config: StudioConfig | None = None,
        state: SessionState | None = None,
    ):
        self.config = config or StudioConfig()
        self.service = service
        self.state = state or SessionState()

        self.drafts = DraftPipeline(self.state, service)
        self.synthesis = SynthesisPipeline(self.state, service)
        self.batch = BatchTryOnOrchestrator(
            self.state,
            service,
            policy=BatchPolicy(self.config.batch_policy),
        )

    def snapshot(self) -> SessionSnapshot:
        return self.state.snapshot()

    # --- Models ---

    def upload_model(self, image: ImageHandle) -> ModelAsset:
        """Add a model photo to the library and select it."""
        asset = self.state.models.insert_front(ModelAsset(image=image))
        self.state.selected_model = asset
        self.state.touch()
        logger.info("Uploaded model %s", asset.id)
        return asset

    def select_model(self, model_id: str) -> ModelAsset:
        asset = self.state.models.find(model_id)
        if asset is None:
            raise NotFoundError(f"Model {model_id} not found")

        self.state.selected_model = asset
        if self.state.step == 1:
            self.state.step = 2
        self.state.touch()
        return asset

    def delete_model(self, model_id: str) -> ModelAsset | None:
        removed = self.state.remove_model(model_id)
        if removed is not None:
            self.state.touch()
        return removed

    # --- Clothing ---

    def upload_clothing(self, image: ImageHandle, display_name: str | None = None) -> ClothingAsset:
        """Add an uploaded clothing photo to the library and select it."""
        asset = self.state.clothing.insert_front(
            ClothingAsset(image=image, origin=ClothingOrigin.UPLOADED, display_name=display_name)
        )
        self.state.selected_clothing = asset
        self.state.touch()
        logger.info("Uploaded clothing %s", asset.id)
        return asset

    def select_clothing(self, clothing_id: str) -> ClothingAsset:
        asset = self.state.clothing.find(clothing_id)
        if asset is None:
            raise NotFoundError(f"Clothing {clothing_id} not found")

        self.state.selected_clothing = asset
        self.state.touch()
        return asset

    def delete_clothing(self, clothing_id: str) -> ClothingAsset | None:
        removed = self.state.remove_clothing(clothing_id)
        if removed is not None:
            self.state.touch()
        return removed

    # --- Drafts ---

    async def analyze_clothing(self, image: ImageHandle) -> list[ClothingDraft]:
        return await self.drafts.analyze(image)

    def update_draft(self, draft_id: str, text: str) -> ClothingDraft:
        draft = self.state.drafts.find(draft_id)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")

        updated = draft.model_copy(update={"text": text})
        self.state.drafts.replace(updated)
        self.state.touch()
        return updated

    def delete_draft(self, draft_id: str) -> ClothingDraft | None:
        removed = self.state.remove_draft(draft_id)
        if removed is not None:
            self.state.touch()
        return removed

    async def synthesize_from_draft(self, draft_id: str) -> ClothingAsset | None:
        draft = self.state.drafts.find(draft_id)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")
        return await self.synthesis.synthesize_from_draft(draft)

    # --- Synthesis parameters ---

    def select_pose(self, pose: Pose) -> Pose:
        self.state.selected_pose = pose
        self.state.touch()
        return pose

    def toggle_angle(self, angle: Angle) -> list[Angle]:
        """Add or remove an angle. The last remaining angle cannot be removed."""
        angles = self.state.selected_angles
        if angle in angles:
            if len(angles) == 1:
                return list(angles)
            self.state.selected_angles = [a for a in angles if a != angle]
        else:
            self.state.selected_angles = [*angles, angle]

        self.state.touch()
        return list(self.state.selected_angles)

    def set_step(self, step: int) -> int:
        if step not in STEPS:
            raise ValidationError(f"Step must be one of {STEPS}, got {step}")

        self.state.step = step
        self.state.touch()
        return step

    # --- Try-on ---

    async def synthesize_batch(self) -> list[GenerationRecord]:
        """Run a batch for the current model, clothing, pose and angles."""
        return await self.batch.synthesize_batch(
            model=self.state.selected_model,
            clothing=self.state.selected_clothing,
            pose=self.state.selected_pose,
            angles=list(self.state.selected_angles),
        )

    def delete_history(self, record_id: str) -> GenerationRecord | None:
        removed = self.state.history.remove(record_id)
        if removed is not None:
            self.state.touch()
        return removed
