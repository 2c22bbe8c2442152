"""Expand one validated request into per-variation generation tasks."""

from typing import Tuple

from iconset.config.options import Options
from iconset.models.generate import GenerationRequest, GenerationTask
from iconset.services.backend_service.base import DEFAULT_HEIGHT, DEFAULT_WIDTH


class VariationPlanner:
    """Build the ordered task list for a batch.

    Prompt layout: "<prompt> icon", variation, style descriptor, optional
    color clause, render suffix; joined with ", ". Seeds are base_seed + index.
    """

    def __init__(
        self,
        options: Options,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ):
        self.options = options
        self.width = width
        self.height = height

    def build_prompt(self, request: GenerationRequest, variation: str) -> str:
        parts = [
            f"{request.prompt} icon",
            variation,
            self.options.styles[request.style].prompt,
        ]
        if request.brand_colors:
            parts.append(
                self.options.color_instruction.format(
                    colors=", ".join(request.brand_colors)
                )
            )
        parts.append(
            self.options.render_suffix.format(width=self.width, height=self.height)
        )
        return ", ".join(parts)

    def plan(
        self, request: GenerationRequest, base_seed: int
    ) -> Tuple[GenerationTask, ...]:
        return tuple(
            GenerationTask(
                index=index,
                full_prompt=self.build_prompt(request, variation),
                seed=base_seed + index,
            )
            for index, variation in enumerate(self.options.variations)
        )
