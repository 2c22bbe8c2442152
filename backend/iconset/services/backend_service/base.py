"""Contract shared by every image-generation backend."""

from typing import Any, Protocol, runtime_checkable

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512
DEFAULT_FORMAT = "png"
DEFAULT_QUALITY = 90


@runtime_checkable
class ImageBackend(Protocol):
    """Asynchronous text-to-image capability.

    `generate` returns one image reference (URL string, object with a `.url`,
    or raw bytes) or a sequence of them. It may raise, hang or rate-limit;
    callers own retries. A seed makes output reproducible on a best-effort
    basis only.
    """

    provider: str

    async def generate(
        self,
        prompt: str,
        seed: int,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> Any: ...


def aspect_ratio(width: int, height: int) -> str:
    """Reduce a width/height pair to an `a:b` ratio string."""
    a, b = width, height
    while b:
        a, b = b, a % b
    return f"{width // a}:{height // a}"
