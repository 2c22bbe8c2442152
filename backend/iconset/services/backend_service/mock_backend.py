"""Offline backend used in mock run mode and local UI work."""

import asyncio
import random

from PIL import Image, ImageDraw

from iconset.services.backend_service.base import (
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
)
from iconset.utility.logger import AppLogger
from iconset.utility.utils import Helper

logger = AppLogger.get_logger(__name__)


class MockBackend:
    """
    Render a placeholder icon instead of calling a hosted model, so the UI
    can be exercised without credentials. The same seed always yields the
    same image.
    """

    provider = "mock"

    def __init__(self, latency_s: float = 0.0):
        self.latency_s = latency_s
        self.helper = Helper()

    def render(self, seed: int, width: int, height: int) -> Image.Image:
        """Draw a seeded colored disc on a white square."""
        rng = random.Random(seed)
        color = tuple(rng.randint(40, 220) for _ in range(3))
        img = Image.new("RGBA", (width, height), (255, 255, 255, 255))
        draw = ImageDraw.Draw(img)
        margin = min(width, height) // 6
        draw.ellipse(
            (margin, margin, width - margin, height - margin),
            fill=color + (255,),
        )
        return img

    async def generate(
        self,
        prompt: str,
        seed: int,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> bytes:
        logger.info(f"generating mock icon for seed {seed}")
        if self.latency_s:
            await asyncio.sleep(self.latency_s)
        img = self.render(seed, width, height)
        return self.helper.encode_image(img, fmt=output_format, quality=quality)
