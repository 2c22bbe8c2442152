"""Orchestrates validation, planning, generation and aggregation of an icon set."""

import time
from typing import Optional

from termcolor import colored

from iconset.config.options import Options, get_options
from iconset.config.settings import Settings, get_settings
from iconset.handlers.error_handler import InsufficientResultsError, ValidationError
from iconset.models.generate import (
    BatchState,
    GenerateIconsRequest,
    GenerateIconsResponse,
)
from iconset.services.backend_service.base import ImageBackend
from iconset.services.backend_service.main import BackendFactory
from iconset.services.icon_generation_service.aggregator import aggregate
from iconset.services.icon_generation_service.planner import VariationPlanner
from iconset.services.icon_generation_service.runner import SleepFn, TaskRunner
from iconset.services.icon_generation_service.seed import derive_seed
from iconset.services.icon_generation_service.validator import RequestValidator
from iconset.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class IconSetGeneration:
    """Coordinate one icon set request end to end.

    Validates the payload, derives the base seed, plans the four variations,
    runs them concurrently against the backend and aggregates the outcomes.
    Holds no state between requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        options: Optional[Options] = None,
        backend: Optional[ImageBackend] = None,
        sleep: Optional[SleepFn] = None,
    ):
        """Wire the pipeline; the backend is built lazily after validation."""
        self.settings = settings or get_settings()
        self.options = options or get_options()
        self.validator = RequestValidator(self.options.styles)
        self.planner = VariationPlanner(self.options)
        self._backend = backend
        self._sleep = sleep

    @property
    def backend(self) -> ImageBackend:
        if self._backend is None:
            self._backend = BackendFactory.create(self.settings)
        return self._backend

    def _runner(self) -> TaskRunner:
        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return TaskRunner(
            self.backend,
            max_retries=self.settings.max_retries,
            base_delay_s=self.settings.retry_base_delay_ms / 1000,
            task_timeout_s=self.settings.task_timeout_s,
            **kwargs,
        )

    def _transition(self, state: BatchState, seed: Optional[int] = None) -> None:
        logger.debug(f"batch {seed if seed is not None else '-'} -> {state.value}")

    async def generate_icon_set(
        self, payload: GenerateIconsRequest
    ) -> GenerateIconsResponse:
        """Generate the icon set for a raw request payload."""
        start = time.time()
        self._transition(BatchState.VALIDATING)
        result = self.validator.validate(
            payload.prompt, payload.style, payload.brand_colors
        )
        if not result.ok:
            self._transition(BatchState.FAILED)
            raise ValidationError(result.errors)
        request = result.request

        self._transition(BatchState.PLANNING)
        base_seed = derive_seed(request.prompt, request.style)
        tasks = self.planner.plan(request, base_seed)
        logger.info(
            f'Generating {len(tasks)} icons for prompt: "{request.prompt}" '
            f"with style {request.style}, base seed: {base_seed}"
        )

        self._transition(BatchState.RUNNING, base_seed)
        outcomes = await self._runner().run(tasks)

        self._transition(BatchState.AGGREGATING, base_seed)
        try:
            batch = aggregate(
                outcomes,
                min_success=self.settings.min_success,
                expected_count=len(tasks),
            )
        except InsufficientResultsError as e:
            self._transition(BatchState.FAILED, base_seed)
            logger.error(colored(f"Icon set failed: {e.details}", "red"))
            raise

        final_state = (
            BatchState.PARTIAL_SUCCEEDED if batch.partial else BatchState.SUCCEEDED
        )
        self._transition(final_state, base_seed)
        logger.info(
            f"Generated {len(batch.icons)}/{len(tasks)} icons successfully "
            f"in {time.time() - start:.3f} seconds"
        )
        return GenerateIconsResponse(
            success=True,
            icons=batch.icons,
            partial=batch.partial,
            errors=batch.errors,
        )
