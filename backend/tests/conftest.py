"""Shared fakes for icon generation tests."""

import pytest

from iconset.config.options import Options
from iconset.config.settings import Settings


class FakeBackend:
    """In-memory backend that fails for chosen variation indices.

    Indices are recovered from the "variation N" fragment of the prompt.
    `flaky` maps an index to the number of leading calls that raise.
    """

    provider = "fake"

    def __init__(self, fail_indices=(), flaky=None, error=None):
        self.fail_indices = set(fail_indices)
        self.flaky = dict(flaky or {})
        self.error = error
        self.calls = []

    @staticmethod
    def index_of(prompt: str) -> int:
        for i in range(4):
            if f"variation {i + 1}," in prompt:
                return i
        raise AssertionError(f"no variation marker in {prompt!r}")

    async def generate(self, prompt, seed, width=512, height=512, output_format="png", quality=90):
        self.calls.append(
            {
                "prompt": prompt,
                "seed": seed,
                "width": width,
                "height": height,
                "output_format": output_format,
                "quality": quality,
            }
        )
        index = self.index_of(prompt)
        if index in self.fail_indices:
            raise self.error or RuntimeError(f"backend exploded on {index}")
        if self.flaky.get(index, 0) > 0:
            self.flaky[index] -= 1
            raise RuntimeError("transient failure")
        return [f"https://images.example.com/{seed}.png"]


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_backend_cls():
    return FakeBackend


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture(scope="session")
def options():
    return Options()


@pytest.fixture
def settings():
    return Settings(provider="mock", max_retries=2, retry_base_delay_ms=1000)
