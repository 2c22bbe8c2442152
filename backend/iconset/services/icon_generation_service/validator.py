"""Input validation for icon set requests."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from iconset.models.generate import GenerationRequest

MAX_PROMPT_LENGTH = 200
MAX_BRAND_COLORS = 5


@dataclass(frozen=True)
class ValidationResult:
    """Either a sanitized request or the list of violated rules."""

    request: Optional[GenerationRequest] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class RequestValidator:
    """Check raw request fields against the style table and size limits.

    Every rule is evaluated so callers see all violations at once. Malformed
    input is reported, never raised.
    """

    def __init__(self, styles: Mapping[int, Any]):
        if not styles:
            raise ValueError("RequestValidator requires a non-empty style table")
        self.styles = styles

    def _is_known_style(self, style: Any) -> bool:
        # bool is an int subclass; True must not match style 1
        if isinstance(style, bool) or not isinstance(style, int):
            return False
        return style in self.styles

    def validate(
        self, prompt: Any, style: Any, brand_colors: Any = None
    ) -> ValidationResult:
        errors: List[str] = []

        trimmed = prompt.strip() if isinstance(prompt, str) else ""
        if not trimmed:
            errors.append("Prompt is required and must be a non-empty string")
        elif len(trimmed) > MAX_PROMPT_LENGTH:
            errors.append(f"Prompt must be less than {MAX_PROMPT_LENGTH} characters")

        if not self._is_known_style(style):
            errors.append("Invalid style selection")

        colors = ()
        if brand_colors is not None:
            if not isinstance(brand_colors, (list, tuple)):
                errors.append("Brand colors must be an array")
            else:
                if len(brand_colors) > MAX_BRAND_COLORS:
                    errors.append(f"Maximum {MAX_BRAND_COLORS} brand colors allowed")
                if not all(isinstance(c, str) for c in brand_colors):
                    errors.append("Brand colors must be strings")
                colors = tuple(brand_colors)

        if errors:
            return ValidationResult(errors=errors)
        return ValidationResult(
            request=GenerationRequest(prompt=trimmed, style=style, brand_colors=colors)
        )
