"""Replicate-hosted FLUX backend."""

import asyncio
from typing import Any, Optional

import replicate

from iconset.handlers.error_handler import MapExceptions
from iconset.services.backend_service.base import (
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
    aspect_ratio,
)
from iconset.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class ReplicateBackend:
    """Run a Replicate text-to-image model with a fixed seed.

    The synchronous client is shared read-only and each call runs in a
    worker thread so sibling calls overlap on the event loop.
    """

    provider = "replicate"

    def __init__(
        self,
        api_token: str,
        model: str = "black-forest-labs/flux-schnell",
        client: Optional[Any] = None,
    ):
        self.model = model
        self.client = client or replicate.Client(api_token=api_token)
        self.exceptions = MapExceptions()

    def build_input(
        self,
        prompt: str,
        seed: int,
        width: int,
        height: int,
        output_format: str,
        quality: int,
    ) -> dict:
        return {
            "prompt": prompt,
            "num_outputs": 1,
            "aspect_ratio": aspect_ratio(width, height),
            "output_format": output_format,
            "output_quality": quality,
            "go_fast": True,
            "seed": seed,
        }

    async def generate(
        self,
        prompt: str,
        seed: int,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> Any:
        payload = self.build_input(prompt, seed, width, height, output_format, quality)
        logger.debug("Replicate run model=%s seed=%s", self.model, seed)
        try:
            return await asyncio.to_thread(self.client.run, self.model, input=payload)
        except Exception as e:
            raise self.exceptions.map_replicate_exception(e) from e
