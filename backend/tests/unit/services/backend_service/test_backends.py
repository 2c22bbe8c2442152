"""Tests for image backends and the backend factory, using fake SDK clients."""

import asyncio
from io import BytesIO
from types import SimpleNamespace

import pytest
from PIL import Image

from iconset.config.settings import Settings
from iconset.handlers.error_handler import BackendConfigurationError, BackendError
from iconset.models.generate import FailureKind
from iconset.services.backend_service.base import ImageBackend, aspect_ratio
from iconset.services.backend_service.gemini_backend import GeminiBackend
from iconset.services.backend_service.main import BackendFactory
from iconset.services.backend_service.mock_backend import MockBackend
from iconset.services.backend_service.openai_backend import OpenAIBackend
from iconset.services.backend_service.replicate_backend import ReplicateBackend


def png_bytes(size=(64, 64)):
    buf = BytesIO()
    Image.new("RGB", size, (200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()


def test_aspect_ratio_reduces():
    assert aspect_ratio(512, 512) == "1:1"
    assert aspect_ratio(1920, 1080) == "16:9"


class TestReplicateBackend:
    class FakeClient:
        def __init__(self, result=None, error=None):
            self.result = result
            self.error = error
            self.calls = []

        def run(self, model, input):
            self.calls.append((model, input))
            if self.error:
                raise self.error
            return self.result

    def test_build_input_fixed_parameters(self):
        backend = ReplicateBackend("token", client=self.FakeClient())
        payload = backend.build_input("Toys icon", 42, 512, 512, "png", 90)

        assert payload == {
            "prompt": "Toys icon",
            "num_outputs": 1,
            "aspect_ratio": "1:1",
            "output_format": "png",
            "output_quality": 90,
            "go_fast": True,
            "seed": 42,
        }

    def test_generate_runs_model(self):
        client = self.FakeClient(result=["https://replicate.delivery/a.png"])
        backend = ReplicateBackend("token", model="owner/model", client=client)

        result = asyncio.run(backend.generate("Toys icon", 7))

        assert result == ["https://replicate.delivery/a.png"]
        assert client.calls[0][0] == "owner/model"
        assert client.calls[0][1]["seed"] == 7

    def test_generate_maps_timeout(self):
        backend = ReplicateBackend("token", client=self.FakeClient(error=TimeoutError()))
        with pytest.raises(BackendError) as info:
            asyncio.run(backend.generate("Toys icon", 7))
        assert info.value.kind == FailureKind.TIMED_OUT


class TestGeminiBackend:
    def make_client(self, response):
        calls = []

        async def generate_content(**kwargs):
            calls.append(kwargs)
            return response

        models = SimpleNamespace(generate_content=generate_content)
        return SimpleNamespace(aio=SimpleNamespace(models=models)), calls

    def test_inline_image_is_resized(self):
        part = SimpleNamespace(inline_data=SimpleNamespace(data=png_bytes((64, 32))))
        response = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))]
        )
        client, calls = self.make_client(response)
        backend = GeminiBackend("key", client=client)

        raw = asyncio.run(backend.generate("Toys icon", 11, width=128, height=128))

        assert Image.open(BytesIO(raw)).size == (128, 128)
        assert calls[0]["config"].seed == 11

    def test_missing_image_is_backend_error(self):
        client, _ = self.make_client(SimpleNamespace(candidates=[]))
        with pytest.raises(BackendError):
            asyncio.run(GeminiBackend("key", client=client).generate("Toys icon", 1))


class TestOpenAIBackend:
    def make_client(self, item):
        async def generate(**kwargs):
            return SimpleNamespace(data=[item] if item else [])

        return SimpleNamespace(images=SimpleNamespace(generate=generate))

    def test_returns_url(self):
        client = self.make_client(SimpleNamespace(url="https://oai/a.png", b64_json=None))
        result = asyncio.run(OpenAIBackend("key", client=client).generate("Toys icon", 1))
        assert result == "https://oai/a.png"

    def test_returns_data_url_for_b64(self):
        client = self.make_client(SimpleNamespace(url=None, b64_json="QUJD"))
        result = asyncio.run(OpenAIBackend("key", client=client).generate("Toys icon", 1))
        assert result == "data:image/png;base64,QUJD"

    def test_empty_response_is_backend_error(self):
        with pytest.raises(BackendError):
            asyncio.run(OpenAIBackend("key", client=self.make_client(None)).generate("x", 1))


class TestMockBackend:
    def test_same_seed_same_image(self):
        backend = MockBackend()
        first = asyncio.run(backend.generate("Toys icon", 99))
        second = asyncio.run(backend.generate("Other prompt", 99))
        assert first == second

    def test_different_seed_different_image(self):
        backend = MockBackend()
        assert asyncio.run(backend.generate("x", 1)) != asyncio.run(backend.generate("x", 2))

    def test_is_image_backend(self):
        assert isinstance(MockBackend(), ImageBackend)


class TestBackendFactory:
    def test_mock_run_mode_overrides_provider(self):
        backend = BackendFactory.create(Settings(run_mode="mock", provider="replicate"))
        assert isinstance(backend, MockBackend)

    def test_unknown_provider(self):
        with pytest.raises(BackendConfigurationError):
            BackendFactory.create(Settings(provider="stable-diffusion"))

    @pytest.mark.parametrize("provider", ["replicate", "gemini", "openai"])
    def test_missing_credentials(self, provider):
        with pytest.raises(BackendConfigurationError) as info:
            BackendFactory.create(Settings(provider=provider))
        assert info.value.status_code == 503

    def test_replicate_with_token(self):
        backend = BackendFactory.create(
            Settings(provider="replicate", replicate_api_token="r8_test")
        )
        assert isinstance(backend, ReplicateBackend)
        assert backend.model == "black-forest-labs/flux-schnell"
