"""Reference image -> editable clothing drafts."""

import logging

from ..errors import ServiceError
from ..models import ClothingDraft, ImageHandle
from ..services.base import ImageSynthesisService
from ..state import SessionState

logger = logging.getLogger(__name__)


class DraftPipeline:
    """Runs clothing analysis and files the results as drafts.

    Concurrent analyses are allowed to race; each commits its own batch.
    """

    def __init__(self, state: SessionState, service: ImageSynthesisService):
        self.state = state
        self.service = service

    async def analyze(self, image: ImageHandle) -> list[ClothingDraft]:
        """Analyze an image and prepend one draft per description found."""
        self.state.analyzing = True
        self.state.touch()
        try:
            descriptions = await self.service.analyze_clothing_image(image)
        except ServiceError as e:
            logger.warning("Clothing analysis failed: %s", e)
            raise
        except Exception as e:
            logger.warning("Clothing analysis failed: %s", e)
            raise ServiceError(
                f"Clothing analysis failed: {e}",
                operation="analyze_clothing_image",
            ) from e
        finally:
            self.state.analyzing = False
            self.state.touch()

        drafts = [ClothingDraft(text=text) for text in descriptions]
        self.state.drafts.insert_batch_front(drafts)
        self.state.touch()

        logger.info("Added %d draft(s) from analysis", len(drafts))
        return drafts
