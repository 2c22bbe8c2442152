"""Factory selecting the image backend from settings."""

from iconset.config.settings import PROVIDERS, Settings
from iconset.handlers.error_handler import BackendConfigurationError
from iconset.services.backend_service.base import ImageBackend
from iconset.services.backend_service.gemini_backend import GeminiBackend
from iconset.services.backend_service.mock_backend import MockBackend
from iconset.services.backend_service.openai_backend import OpenAIBackend
from iconset.services.backend_service.replicate_backend import ReplicateBackend
from iconset.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class BackendFactory:
    """Build the configured ImageBackend, failing fast on missing credentials."""

    @staticmethod
    def create(settings: Settings) -> ImageBackend:
        provider = settings.effective_provider
        if provider not in PROVIDERS:
            raise BackendConfigurationError(
                f"Unknown IMAGE_PROVIDER '{provider}'. Valid values: {list(PROVIDERS)}"
            )

        if provider == "mock":
            return MockBackend()

        if provider == "replicate":
            if not settings.replicate_api_token:
                logger.error("REPLICATE_API_TOKEN not found")
                raise BackendConfigurationError("REPLICATE_API_TOKEN is not set.")
            return ReplicateBackend(
                api_token=settings.replicate_api_token, model=settings.replicate_model
            )

        if provider == "gemini":
            if not settings.gemini_api_key:
                logger.error("GEMINI API Key not Found")
                raise BackendConfigurationError("GEMINI_API_KEY is not set.")
            return GeminiBackend(
                api_key=settings.gemini_api_key, model=settings.gemini_image_model
            )

        if not settings.openai_api_key:
            logger.error("OPENAI_API_KEY not found")
            raise BackendConfigurationError("OPENAI_API_KEY is not set.")
        return OpenAIBackend(
            api_key=settings.openai_api_key, model=settings.openai_image_model
        )
