"""Pydantic models for icon set requests, generation tasks, and responses."""

from enum import Enum
from typing import Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why a task or a batch failed. Drives the HTTP status of error responses."""

    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    UNAUTHENTICATED = "unauthenticated"
    TIMED_OUT = "timed_out"
    INSUFFICIENT_RESULTS = "insufficient_results"
    UNKNOWN = "unknown"


class BatchState(str, Enum):
    """Lifecycle of one icon set request."""

    VALIDATING = "validating"
    PLANNING = "planning"
    RUNNING = "running"
    AGGREGATING = "aggregating"
    SUCCEEDED = "succeeded"
    PARTIAL_SUCCEEDED = "partial_succeeded"
    FAILED = "failed"


class StyleProfile(BaseModel):
    """A named style preset and the descriptor text it adds to prompts."""

    model_config = {"frozen": True}

    id: int
    name: str
    description: str = ""
    prompt: str


class GenerateIconsRequest(BaseModel):
    """Raw request body. Field types are checked by RequestValidator, not here."""

    prompt: Any = None
    style: Any = None
    brand_colors: Any = Field(default=None, alias="brandColors")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class GenerationRequest(BaseModel):
    """A validated, sanitized icon set request."""

    model_config = {"frozen": True}

    prompt: str
    style: int
    brand_colors: Tuple[str, ...] = ()


class GenerationTask(BaseModel):
    """One backend call: a fully resolved prompt and its seed."""

    model_config = {"frozen": True}

    index: int = Field(ge=0)
    full_prompt: str
    seed: int = Field(ge=0)


class TaskSuccess(BaseModel):
    model_config = {"frozen": True}

    status: Literal["success"] = "success"
    index: int
    url: str
    full_prompt: str
    seed: int


class TaskFailure(BaseModel):
    model_config = {"frozen": True}

    status: Literal["failure"] = "failure"
    index: int
    reason: str
    kind: FailureKind = FailureKind.UNKNOWN


TaskOutcome = Union[TaskSuccess, TaskFailure]


class GeneratedIcon(BaseModel):
    """A generated icon as returned to clients."""

    url: str
    prompt: str
    seed: int


class IconError(BaseModel):
    """Failure reason for one variation index."""

    index: int
    error: str


class BatchResult(BaseModel):
    """Aggregated outcome of a batch that met the success threshold."""

    icons: List[GeneratedIcon] = Field(default_factory=list)
    partial: bool = False
    errors: Optional[List[IconError]] = None


class GenerateIconsResponse(BaseModel):
    """Response envelope for a successful or partially successful icon set."""

    success: bool = True
    icons: List[GeneratedIcon] = Field(default_factory=list)
    partial: bool = False
    errors: Optional[List[IconError]] = None


class StyleOption(BaseModel):
    """Style picker entry exposed to clients."""

    id: int
    name: str
    description: str = ""
