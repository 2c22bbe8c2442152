"""Turn per-task outcomes into an icon set or a batch failure."""

from typing import Sequence

from iconset.handlers.error_handler import InsufficientResultsError
from iconset.models.generate import (
    BatchResult,
    GeneratedIcon,
    IconError,
    TaskFailure,
    TaskOutcome,
    TaskSuccess,
)

DEFAULT_MIN_SUCCESS = 2
DEFAULT_EXPECTED_COUNT = 4


def aggregate(
    outcomes: Sequence[TaskOutcome],
    min_success: int = DEFAULT_MIN_SUCCESS,
    expected_count: int = DEFAULT_EXPECTED_COUNT,
) -> BatchResult:
    """
    Sort outcomes by index and decide the batch result.

    Raises InsufficientResultsError when fewer than `min_success` tasks
    succeeded. Otherwise `partial` is set when fewer than `expected_count`
    succeeded and `errors` lists the failed indices, if any.
    """
    if len(outcomes) > expected_count:
        raise ValueError(
            f"Got {len(outcomes)} outcomes for a batch of {expected_count}"
        )

    ordered = sorted(outcomes, key=lambda o: o.index)
    successes = [o for o in ordered if isinstance(o, TaskSuccess)]
    failures = [o for o in ordered if isinstance(o, TaskFailure)]

    if len(successes) < min_success:
        raise InsufficientResultsError(
            succeeded=len(successes), expected=expected_count, failures=failures
        )

    return BatchResult(
        icons=[
            GeneratedIcon(url=s.url, prompt=s.full_prompt, seed=s.seed)
            for s in successes
        ],
        partial=len(successes) < expected_count,
        errors=[IconError(index=f.index, error=f.reason) for f in failures] or None,
    )
