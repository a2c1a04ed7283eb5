"""Clothing draft -> generated clothing asset."""

import logging

from ..errors import BusyError, ServiceError
from ..models import ClothingAsset, ClothingDraft, ClothingOrigin
from ..services.base import ImageSynthesisService
from ..state import SessionState

logger = logging.getLogger(__name__)

DISPLAY_NAME_LENGTH = 15


def display_name_for(text: str) -> str:
    """Short library label for a generated item."""
    return text[:DISPLAY_NAME_LENGTH] + "..."


class SynthesisPipeline:
    """Generates one clothing asset from a draft at a time.

    ``state.synthesizing_draft_id`` is the gate: while it is set, every
    other submission is rejected rather than queued.
    """

    def __init__(self, state: SessionState, service: ImageSynthesisService):
        self.state = state
        self.service = service

    @property
    def busy(self) -> bool:
        return self.state.synthesizing_draft_id is not None

    async def synthesize_from_draft(self, draft: ClothingDraft) -> ClothingAsset | None:
        """Generate, store and select a clothing asset for ``draft``.

        Returns None without calling the service when the draft is blank.
        """
        # Snapshot now; later edits to the draft must not leak into the asset.
        text = draft.text
        if draft.is_blank:
            logger.debug("Ignoring blank draft %s", draft.id)
            return None

        if self.busy:
            raise BusyError(
                f"Draft {self.state.synthesizing_draft_id} is already being synthesized"
            )

        self.state.synthesizing_draft_id = draft.id
        self.state.touch()
        try:
            image = await self.service.generate_clothing_from_text(text)
        except ServiceError as e:
            logger.warning("Clothing synthesis for draft %s failed: %s", draft.id, e)
            raise
        except Exception as e:
            logger.warning("Clothing synthesis for draft %s failed: %s", draft.id, e)
            raise ServiceError(
                f"Clothing generation failed: {e}",
                operation="generate_clothing_from_text",
            ) from e
        finally:
            self.state.synthesizing_draft_id = None
            self.state.touch()

        asset = ClothingAsset(
            image=image,
            origin=ClothingOrigin.GENERATED,
            display_name=display_name_for(text),
            source_description=text,
        )
        self.state.clothing.insert_front(asset)
        self.state.selected_clothing = asset
        self.state.touch()

        logger.info("Generated clothing %s from draft %s", asset.id, draft.id)
        return asset
