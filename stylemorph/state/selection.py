"""Keeps the current selection consistent with the asset libraries."""

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..models import ClothingAsset, ModelAsset

if TYPE_CHECKING:
    from .session import SessionState

logger = logging.getLogger(__name__)


class AssetKind(str, Enum):
    MODEL = "model"
    CLOTHING = "clothing"


class SelectionGuard:
    """Clears a selection whose asset has just been removed.

    Matching is by image handle, not by id: the selection refers to image
    content, so removing an asset only clears the selection when the very
    same handle is selected.
    """

    def __init__(self, state: "SessionState"):
        self.state = state

    def on_asset_removed(
        self,
        kind: AssetKind,
        removed: ModelAsset | ClothingAsset | None,
    ) -> bool:
        """Return True when a selection was cleared."""
        if removed is None:
            return False

        if kind is AssetKind.MODEL:
            selected = self.state.selected_model
            if selected is not None and selected.image == removed.image:
                self.state.selected_model = None
                logger.info("Model %s deleted; model selection cleared", removed.id)
                return True
        elif kind is AssetKind.CLOTHING:
            selected = self.state.selected_clothing
            if selected is not None and selected.image == removed.image:
                self.state.selected_clothing = None
                logger.info("Clothing %s deleted; clothing selection cleared", removed.id)
                return True
        return False
