"""The mutable session aggregate."""

from dataclasses import dataclass, field

from ..models import (
    Angle,
    ClothingAsset,
    ClothingDraft,
    ImageHandle,
    ModelAsset,
    Pose,
    SessionSnapshot,
    preset_clothes,
)
from .history import HistoryLedger
from .library import AssetLibrary
from .selection import AssetKind, SelectionGuard

STEPS = (1, 2, 3)


@dataclass
class SessionState:
    """Everything the studio knows for the lifetime of the process.

    Only the studio controller and its pipelines write to this object,
    and only between awaits on the event loop.
    """

    models: AssetLibrary[ModelAsset] = field(default_factory=AssetLibrary)
    clothing: AssetLibrary[ClothingAsset] = field(
        default_factory=lambda: AssetLibrary(preset_clothes())
    )
    drafts: AssetLibrary[ClothingDraft] = field(default_factory=AssetLibrary)
    history: HistoryLedger = field(default_factory=HistoryLedger)

    step: int = 1
    selected_model: ModelAsset | None = None
    selected_clothing: ClothingAsset | None = None
    current_result_preview: ImageHandle | None = None
    selected_pose: Pose = Pose.STANDING
    selected_angles: list[Angle] = field(default_factory=lambda: [Angle.FRONT])

    analyzing: bool = False
    synthesizing_draft_id: str | None = None
    batch_in_progress: bool = False
    failed_angles: list[Angle] = field(default_factory=list)

    version: int = 0

    def __post_init__(self):
        self.guard = SelectionGuard(self)

    def touch(self) -> int:
        """Mark a committed mutation."""
        self.version += 1
        return self.version

    def remove_model(self, model_id: str) -> ModelAsset | None:
        removed = self.models.remove(model_id)
        self.guard.on_asset_removed(AssetKind.MODEL, removed)
        return removed

    def remove_clothing(self, clothing_id: str) -> ClothingAsset | None:
        removed = self.clothing.remove(clothing_id)
        self.guard.on_asset_removed(AssetKind.CLOTHING, removed)
        return removed

    def remove_draft(self, draft_id: str) -> ClothingDraft | None:
        return self.drafts.remove(draft_id)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            version=self.version,
            step=self.step,
            models=self.models.list(),
            clothing=self.clothing.list(),
            drafts=[draft.model_copy() for draft in self.drafts.list()],
            history=self.history.list(),
            selected_model=self.selected_model,
            selected_clothing=self.selected_clothing,
            current_result_preview=self.current_result_preview,
            selected_pose=self.selected_pose,
            selected_angles=list(self.selected_angles),
            analyzing=self.analyzing,
            synthesizing_draft_id=self.synthesizing_draft_id,
            batch_in_progress=self.batch_in_progress,
            failed_angles=list(self.failed_angles),
        )
