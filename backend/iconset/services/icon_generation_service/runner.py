"""Concurrent execution of generation tasks with per-task retry."""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from termcolor import colored

from iconset.handlers.error_handler import MapExceptions
from iconset.models.generate import (
    GenerationTask,
    TaskFailure,
    TaskOutcome,
    TaskSuccess,
)
from iconset.services.backend_service.base import (
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
    ImageBackend,
)
from iconset.utility.logger import AppLogger
from iconset.utility.utils import Helper

logger = AppLogger.get_logger(__name__)

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[None]]


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 2,
    base_delay_s: float = 1.0,
    sleep: SleepFn = asyncio.sleep,
    label: str = "task",
) -> T:
    """
    Await `fn`, retrying up to `max_retries` times. Before retry k the call
    waits `base_delay_s * 2**k`. The last error is re-raised once attempts
    run out.
    """
    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as e:
            if attempt == max_retries:
                raise
            delay = base_delay_s * (2**attempt)
            logger.warning(
                f"{label}: attempt {attempt + 1} failed ({e}), retrying in {delay * 1000:.0f}ms"
            )
            await sleep(delay)
    raise RuntimeError("unreachable")


class TaskRunner:
    """Run every task of a batch against the backend at the same time.

    Each task retries on its own and ends as a TaskSuccess or TaskFailure;
    no task's error reaches its siblings or the caller.
    """

    def __init__(
        self,
        backend: ImageBackend,
        max_retries: int = 2,
        base_delay_s: float = 1.0,
        task_timeout_s: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        output_format: str = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.backend = backend
        self.max_retries = max_retries
        self.base_delay_s = base_delay_s
        self.task_timeout_s = task_timeout_s
        self.max_concurrency = max_concurrency
        self.width = width
        self.height = height
        self.output_format = output_format
        self.quality = quality
        self.sleep = sleep
        self.helper = Helper()
        self.exceptions = MapExceptions()

    async def _call_backend(self, task: GenerationTask) -> str:
        output = await self.backend.generate(
            task.full_prompt,
            task.seed,
            width=self.width,
            height=self.height,
            output_format=self.output_format,
            quality=self.quality,
        )
        return self.helper.normalize_reference(output, self.output_format)

    async def _run_one(
        self, task: GenerationTask, semaphore: asyncio.Semaphore, total: int
    ) -> TaskOutcome:
        label = f"icon {task.index + 1}/{total}"
        async with semaphore:
            start = time.time()
            logger.info(f"Generating {label} with seed {task.seed}...")
            attempt = retry_with_backoff(
                lambda: self._call_backend(task),
                max_retries=self.max_retries,
                base_delay_s=self.base_delay_s,
                sleep=self.sleep,
                label=label,
            )
            try:
                if self.task_timeout_s:
                    url = await asyncio.wait_for(attempt, timeout=self.task_timeout_s)
                else:
                    url = await attempt
            except Exception as e:
                mapped = self.exceptions.map_exception(
                    getattr(self.backend, "provider", "backend"), e
                )
                logger.error(f"Failed to generate {label}: {mapped}")
                return TaskFailure(
                    index=task.index, reason=mapped.message, kind=mapped.kind
                )

        logger.info(
            f"{label} {colored('completed', 'green')} in {time.time() - start:.2f}s"
        )
        return TaskSuccess(
            index=task.index, url=url, full_prompt=task.full_prompt, seed=task.seed
        )

    async def run(self, tasks: Sequence[GenerationTask]) -> List[TaskOutcome]:
        """Run all tasks concurrently; one outcome per task, in completion-independent order."""
        if not tasks:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency or len(tasks))
        return list(
            await asyncio.gather(
                *(self._run_one(task, semaphore, len(tasks)) for task in tasks)
            )
        )
