"""OpenAI Images API backend."""

from typing import Any, Optional

from openai import AsyncOpenAI

from iconset.handlers.error_handler import BackendError, MapExceptions
from iconset.models.generate import FailureKind
from iconset.services.backend_service.base import (
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
)
from iconset.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class OpenAIBackend:
    """Generate icons with the OpenAI Images API.

    The Images API takes no seed, so sets from this backend are not
    reproducible; the seed is only logged.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "dall-e-2",
        client: Optional[Any] = None,
    ):
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.exceptions = MapExceptions()

    async def generate(
        self,
        prompt: str,
        seed: int,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> Any:
        logger.debug("OpenAI images.generate model=%s (seed %s ignored)", self.model, seed)
        try:
            resp = await self.client.images.generate(
                model=self.model,
                prompt=prompt,
                size=f"{width}x{height}",
                n=1,
            )
        except Exception as e:
            raise self.exceptions.map_openai_exception(e) from e

        data = getattr(resp, "data", None) or []
        if not data:
            raise BackendError(
                provider=self.provider,
                message="OpenAI returned no image data.",
                kind=FailureKind.UNKNOWN,
            )
        item = data[0]
        if getattr(item, "url", None):
            return item.url
        if getattr(item, "b64_json", None):
            return f"data:image/{output_format};base64,{item.b64_json}"
        raise BackendError(
            provider=self.provider,
            message="Unrecognized OpenAI image response format.",
            kind=FailureKind.UNKNOWN,
        )
