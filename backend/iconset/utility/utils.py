"""Shared helper utilities for template loading and image references."""

import io
import base64
from typing import Any, Dict

import yaml
from PIL import Image

from iconset.utility.path_finder import Finder


class Helper:
    """Provide reusable utilities for templates and image serialization.

    Loads the YAML prompt tables, encodes raw image bytes into data URLs
    and normalizes whatever a backend returns into a plain string reference.
    """

    def __init__(self):
        """Initialize the helper with access to configured paths."""
        self.path = Finder()

    def load_templates(self, filename: str = "templates.yml") -> Dict[str, Any]:
        """Parse the prompt template file into its top-level tables."""
        full_path = self.path.get_directory("config") / filename
        with open(full_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def to_data_url(self, raw: bytes, fmt: str = "png") -> str:
        """Encode raw image bytes as a base64 data URL."""
        encoded = base64.b64encode(raw).decode("utf-8")
        return f"data:image/{fmt.lower()};base64,{encoded}"

    def encode_image(
        self, img: Image.Image, fmt: str = "png", quality: int = 90
    ) -> bytes:
        """Serialize a PIL image to bytes in the requested format."""
        fmt = fmt.upper()
        if fmt in ("JPG", "JPEG"):
            fmt = "JPEG"
            img = img.convert("RGB")
        buf = io.BytesIO()
        if fmt in ("JPEG", "WEBP"):
            img.save(buf, format=fmt, quality=quality)
        else:
            img.save(buf, format=fmt, optimize=True)
        return buf.getvalue()

    def normalize_reference(self, output: Any, fmt: str = "png") -> str:
        """Reduce a backend response to the textual reference of its first image."""
        if isinstance(output, (list, tuple)):
            if not output:
                raise ValueError("Backend returned an empty output list")
            output = output[0]
        if output is None:
            raise ValueError("Backend returned no output")
        if isinstance(output, (bytes, bytearray)):
            return self.to_data_url(bytes(output), fmt)
        url = getattr(output, "url", None)
        if isinstance(url, str) and url:
            return url
        reference = str(output)
        if not reference:
            raise ValueError("Backend returned an empty image reference")
        return reference
