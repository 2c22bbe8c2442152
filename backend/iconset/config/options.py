"""Immutable style and variation tables used to build icon prompts."""

from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from iconset.models.generate import StyleProfile
from iconset.utility.utils import Helper


class Options:
    """Expose the prompt tables loaded from templates.yml.

    Style profiles are keyed by their integer id, variations keep file order.
    Both are read-only and shared by every request in the process.
    """

    TABLES = ("STYLE_PROFILES", "ICON_VARIATIONS", "COLOR_INSTRUCTION", "RENDER_SUFFIX")

    def __init__(self, helper: Optional[Helper] = None):
        """Load style profiles, variation descriptors and prompt fragments."""
        helper = helper or Helper()
        tables = helper.load_templates()
        missing = [key for key in self.TABLES if key not in tables]
        if missing:
            raise KeyError(f"Templates {missing} missing in templates.yml")

        profiles = [StyleProfile(**raw) for raw in tables["STYLE_PROFILES"]]
        self.styles: Mapping[int, StyleProfile] = MappingProxyType(
            {profile.id: profile for profile in profiles}
        )
        self.variations: Tuple[str, ...] = tuple(tables["ICON_VARIATIONS"])
        self.color_instruction: str = tables["COLOR_INSTRUCTION"]
        self.render_suffix: str = tables["RENDER_SUFFIX"]

    def get_options(self) -> list[dict]:
        """Return the style picker entries for clients."""
        return [
            {"id": p.id, "name": p.name, "description": p.description}
            for p in self.styles.values()
        ]


@lru_cache(maxsize=1)
def get_options() -> Options:
    """Process-wide prompt tables, loaded on first use."""
    return Options()
