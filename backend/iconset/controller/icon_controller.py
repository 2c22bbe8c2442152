"""API routes for icon set generation and the style catalog."""

from typing import List

from fastapi import APIRouter, Depends

from iconset.config.options import Options
from iconset.handlers.error_handler import EscapedJSONResponse
from iconset.models.generate import (
    GenerateIconsRequest,
    GenerateIconsResponse,
    StyleOption,
)
from iconset.services.icon_generation_service.generate import IconSetGeneration
from iconset.services.icon_generation_service.main import IconGeneration as ig
from iconset.utility.logger import AppLogger

router = APIRouter(tags=["Icons"], default_response_class=EscapedJSONResponse)
logger = AppLogger.get_logger(__name__)


@router.get("/styles", response_model=List[StyleOption])
async def get_styles(
    service: Options = Depends(ig.get_style_options),
) -> List[StyleOption]:
    """Return the style presets clients can offer."""
    return [StyleOption(**option) for option in service.get_options()]


@router.post(
    "/generate-icons",
    response_model=GenerateIconsResponse,
    response_model_exclude_none=True,
)
async def generate_icons(
    payload: GenerateIconsRequest,
    service: IconSetGeneration = Depends(ig.get_icon_generation),
) -> EscapedJSONResponse:
    """Generate four style-consistent icon variations for a prompt.

    Validation failures, too few successful variations and backend
    configuration problems are raised as IconSetError and rendered by the
    registered exception handler.
    """
    result = await service.generate_icon_set(payload)
    # Dumped in python mode; echoed prompts may carry unpaired surrogates
    return EscapedJSONResponse(content=result.model_dump(exclude_none=True))
