"""Multi-angle try-on batches."""

import asyncio
import logging
from typing import Sequence

from ..config import BatchPolicy
from ..errors import BusyError, ServiceError, ValidationError
from ..models import (
    Angle,
    ClothingAsset,
    GenerationRecord,
    ImageHandle,
    ModelAsset,
    Pose,
)
from ..services.base import ImageSynthesisService
from ..state import SessionState

logger = logging.getLogger(__name__)


class BatchTryOnOrchestrator:
    """Fans out one try-on call per angle and records the results.

    Under ``ALL_OR_NOTHING`` a single failed angle discards the whole batch,
    including angles that succeeded. ``SETTLE_ALL`` keeps the successful
    angles and reports the failed ones in ``state.failed_angles``.
    """

    def __init__(
        self,
        state: SessionState,
        service: ImageSynthesisService,
        policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING,
    ):
        self.state = state
        self.service = service
        self.policy = policy

    async def synthesize_batch(
        self,
        model: ModelAsset | None,
        clothing: ClothingAsset | None,
        pose: Pose,
        angles: Sequence[Angle],
    ) -> list[GenerationRecord]:
        """Generate one record per angle, newest batch first in history.

        Records keep the order of ``angles``; the first one becomes the
        preview.
        """
        if model is None or clothing is None:
            raise ValidationError("Select a model and a clothing item first")
        if not angles:
            raise ValidationError("At least one angle is required")
        if self.state.batch_in_progress:
            raise BusyError("A try-on batch is already running")

        angles = list(angles)
        model_image, clothing_image = model.image, clothing.image

        self.state.batch_in_progress = True
        self.state.current_result_preview = None
        self.state.failed_angles = []
        self.state.touch()

        logger.info(
            "Starting try-on batch: pose=%s angles=%s",
            pose.value, ", ".join(a.value for a in angles),
        )
        try:
            if self.policy is BatchPolicy.SETTLE_ALL:
                results, failed = await self._settle_all(model_image, clothing_image, pose, angles)
            else:
                results, failed = await self._all_or_nothing(model_image, clothing_image, pose, angles)

            records = [
                GenerationRecord(
                    model_image=model_image,
                    clothing_image=clothing_image,
                    result_image=result,
                    pose=pose,
                    angle=angle,
                )
                for angle, result in results
            ]
            self.state.history.append(records)
            self.state.current_result_preview = records[0].result_image
            self.state.failed_angles = failed
        finally:
            self.state.batch_in_progress = False
            self.state.touch()

        logger.info("Try-on batch committed %d record(s)", len(records))
        return records

    async def _all_or_nothing(
        self,
        model_image: ImageHandle,
        clothing_image: ImageHandle,
        pose: Pose,
        angles: list[Angle],
    ) -> tuple[list[tuple[Angle, ImageHandle]], list[Angle]]:
        try:
            results = await asyncio.gather(*(
                self._generate(model_image, clothing_image, pose, angle) for angle in angles
            ))
        except ServiceError as e:
            logger.warning("Try-on batch aborted, no results kept: %s", e)
            raise
        return list(zip(angles, results)), []

    async def _settle_all(
        self,
        model_image: ImageHandle,
        clothing_image: ImageHandle,
        pose: Pose,
        angles: list[Angle],
    ) -> tuple[list[tuple[Angle, ImageHandle]], list[Angle]]:
        outcomes = await asyncio.gather(
            *(self._generate(model_image, clothing_image, pose, angle) for angle in angles),
            return_exceptions=True,
        )

        results: list[tuple[Angle, ImageHandle]] = []
        failed: list[Angle] = []
        for angle, outcome in zip(angles, outcomes):
            if isinstance(outcome, ServiceError):
                logger.warning("Angle %s failed: %s", angle.value, outcome)
                failed.append(angle)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append((angle, outcome))

        if not results:
            self.state.failed_angles = failed
            raise ServiceError(
                "Every angle in the batch failed",
                operation="generate_tryon_result",
                failed_angles=failed,
            )
        return results, failed

    async def _generate(
        self,
        model_image: ImageHandle,
        clothing_image: ImageHandle,
        pose: Pose,
        angle: Angle,
    ) -> ImageHandle:
        try:
            return await self.service.generate_tryon_result(model_image, clothing_image, pose, angle)
        except ServiceError:
            raise
        except Exception as e:
            raise ServiceError(
                f"Try-on generation failed for {angle.value}: {e}",
                operation="generate_tryon_result",
                failed_angles=[angle],
            ) from e
