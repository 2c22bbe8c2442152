"""Factories for icon generation dependencies."""

from iconset.config.options import Options, get_options
from iconset.config.settings import get_settings
from iconset.services.icon_generation_service.generate import IconSetGeneration


class IconGeneration:
    """Expose dependency providers for FastAPI route handlers."""

    @staticmethod
    def get_icon_generation() -> IconSetGeneration:
        """Provide a fresh orchestrator per request."""
        return IconSetGeneration(settings=get_settings(), options=get_options())

    @staticmethod
    def get_style_options() -> Options:
        """Return the shared style catalog."""
        return get_options()
