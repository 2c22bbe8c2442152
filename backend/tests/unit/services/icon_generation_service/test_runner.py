"""Tests for concurrent task execution and retry with backoff."""

import asyncio

import pytest

from iconset.models.generate import FailureKind, GenerationTask, TaskFailure, TaskSuccess
from iconset.services.icon_generation_service.runner import TaskRunner, retry_with_backoff


def make_tasks(base_seed=500):
    return [
        GenerationTask(
            index=i,
            full_prompt=f"Toys icon, variation {i + 1}, style",
            seed=base_seed + i,
        )
        for i in range(4)
    ]


class TestRetryWithBackoff:
    def test_fails_twice_then_succeeds(self, recording_sleep):
        calls = []

        async def flaky():
            calls.append(1)
            if len(calls) <= 2:
                raise RuntimeError("not yet")
            return "ok"

        result = asyncio.run(
            retry_with_backoff(flaky, max_retries=2, base_delay_s=1.0, sleep=recording_sleep)
        )

        assert result == "ok"
        assert len(calls) == 3
        assert recording_sleep.delays == [1.0, 2.0]
        assert recording_sleep.delays == sorted(recording_sleep.delays)

    def test_reraises_last_error_after_exhausting(self, recording_sleep):
        calls = []

        async def always_fails():
            calls.append(1)
            raise ValueError(f"failure {len(calls)}")

        with pytest.raises(ValueError, match="failure 3"):
            asyncio.run(
                retry_with_backoff(always_fails, max_retries=2, sleep=recording_sleep)
            )
        assert len(calls) == 3
        assert len(recording_sleep.delays) == 2

    def test_no_retries_when_disabled(self, recording_sleep):
        async def fails():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(retry_with_backoff(fails, max_retries=0, sleep=recording_sleep))
        assert recording_sleep.delays == []


class TestTaskRunner:
    def test_all_tasks_succeed(self, fake_backend_cls, recording_sleep):
        backend = fake_backend_cls()
        runner = TaskRunner(backend, sleep=recording_sleep)

        outcomes = asyncio.run(runner.run(make_tasks()))

        assert len(outcomes) == 4
        assert all(isinstance(o, TaskSuccess) for o in outcomes)
        assert sorted(o.index for o in outcomes) == [0, 1, 2, 3]
        # sequence responses contribute their first element
        assert {o.url for o in outcomes} == {
            f"https://images.example.com/{500 + i}.png" for i in range(4)
        }

    def test_passes_fixed_output_parameters(self, fake_backend_cls, recording_sleep):
        backend = fake_backend_cls()
        asyncio.run(TaskRunner(backend, sleep=recording_sleep).run(make_tasks()))

        for call in backend.calls:
            assert call["width"] == 512
            assert call["height"] == 512
            assert call["output_format"] == "png"
            assert call["quality"] == 90

    def test_failure_is_isolated(self, fake_backend_cls, recording_sleep):
        backend = fake_backend_cls(fail_indices={3})
        runner = TaskRunner(backend, max_retries=2, sleep=recording_sleep)

        outcomes = asyncio.run(runner.run(make_tasks()))
        failures = [o for o in outcomes if isinstance(o, TaskFailure)]

        assert len(outcomes) == 4
        assert len(failures) == 1
        assert failures[0].index == 3
        assert "backend exploded" in failures[0].reason
        # index 3 tried 1 + 2 retries, others once
        assert len(backend.calls) == 3 + 3

    def test_transient_failures_are_retried(self, fake_backend_cls, recording_sleep):
        backend = fake_backend_cls(flaky={1: 2})
        runner = TaskRunner(backend, max_retries=2, base_delay_s=1.0, sleep=recording_sleep)

        outcomes = asyncio.run(runner.run(make_tasks()))

        assert all(isinstance(o, TaskSuccess) for o in outcomes)
        assert recording_sleep.delays == [1.0, 2.0]

    def test_timeout_becomes_failure(self, recording_sleep):
        class SlowBackend:
            provider = "slow"

            async def generate(self, prompt, seed, **kwargs):
                if "variation 2," in prompt:
                    await asyncio.sleep(5)
                return f"https://images.example.com/{seed}.png"

        runner = TaskRunner(
            SlowBackend(), max_retries=0, task_timeout_s=0.05, sleep=recording_sleep
        )
        outcomes = asyncio.run(runner.run(make_tasks()))
        by_index = {o.index: o for o in outcomes}

        assert isinstance(by_index[1], TaskFailure)
        assert by_index[1].kind == FailureKind.TIMED_OUT
        assert all(isinstance(by_index[i], TaskSuccess) for i in (0, 2, 3))

    def test_tasks_run_concurrently(self):
        active = []
        peak = []

        class CountingBackend:
            provider = "counting"

            async def generate(self, prompt, seed, **kwargs):
                active.append(seed)
                peak.append(len(active))
                await asyncio.sleep(0.01)
                active.remove(seed)
                return f"https://images.example.com/{seed}.png"

        asyncio.run(TaskRunner(CountingBackend()).run(make_tasks()))
        assert max(peak) == 4

    def test_empty_task_list(self, fake_backend_cls):
        assert asyncio.run(TaskRunner(fake_backend_cls()).run([])) == []
