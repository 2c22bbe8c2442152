"""Gemini image model backend."""

from io import BytesIO
from typing import Any, Optional

from google import genai
from google.genai import types
from PIL import Image

from iconset.handlers.error_handler import BackendError, MapExceptions
from iconset.models.generate import FailureKind
from iconset.services.backend_service.base import (
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
)
from iconset.utility.logger import AppLogger
from iconset.utility.utils import Helper

logger = AppLogger.get_logger(__name__)


class GeminiBackend:
    """Generate icons with a Gemini image model.

    Gemini answers with inline image bytes at its own resolution; they are
    resized and re-encoded to the requested square format before returning.
    """

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-image",
        client: Optional[Any] = None,
    ):
        self.model = model
        self.client = client or genai.Client(api_key=api_key)
        self.helper = Helper()
        self.exceptions = MapExceptions()

    def _first_inline_image(self, resp: Any) -> Optional[bytes]:
        """Return bytes of the first inline image part, if any."""
        candidates = getattr(resp, "candidates", []) or []
        for candidate in candidates:
            content = getattr(candidate, "content", None)
            parts = getattr(content, "parts", []) if content is not None else []
            for part in parts or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and getattr(inline, "data", None):
                    return inline.data
        return None

    async def generate(
        self,
        prompt: str,
        seed: int,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> bytes:
        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[prompt],
                config=types.GenerateContentConfig(
                    seed=seed,
                    response_modalities=["IMAGE"],
                ),
            )
        except Exception as e:
            raise self.exceptions.map_gemini_exception(e) from e

        raw = self._first_inline_image(resp)
        if raw is None:
            raise BackendError(
                provider=self.provider,
                message="Gemini returned no image data.",
                kind=FailureKind.UNKNOWN,
            )

        img = Image.open(BytesIO(raw)).convert("RGBA")
        if img.size != (width, height):
            img = img.resize((width, height), Image.LANCZOS)
        return self.helper.encode_image(img, fmt=output_format, quality=quality)
