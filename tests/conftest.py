"""Pytest configuration and fake provider collaborators."""

from typing import Any, Callable

import pytest

from textcheck.core.config import Config, DetectorConfig, HuggingFaceConfig, OpenAIConfig
from textcheck.core.exceptions import ClassifierInvocationError, GenerativeProviderError
from textcheck.services.detection_service import DetectionService

HUMAN_TEXT = "The river bends past the old mill near our house."
AI_CANDIDATES = [{"label": "ChatGPT", "score": 0.8}, {"label": "Human", "score": 0.2}]


def human_candidates(score: float) -> list[dict]:
    return [{"label": "Human", "score": score}]


class FakeClassifier:
    """Returns canned responses per model; exceptions are raised, callables get the chunk."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, str]] = []

    async def classify(self, model: str, text: str) -> Any:
        self.calls.append((model, text))
        response = self._responses[model]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(text)
        return response


class FakeGenerator:
    """Returns a canned structured answer or raises the configured exception."""

    def __init__(self, answer: dict | Exception | None = None, model: str = "fake-gpt") -> None:
        self._answer = answer
        self.model = model
        self.calls: list[dict] = []

    async def generate(self, prompt: str, response_model, temperature: float):
        self.calls.append({"prompt": prompt, "temperature": temperature})
        if isinstance(self._answer, Exception):
            raise self._answer
        if self._answer is None:
            raise GenerativeProviderError("no answer configured")
        return response_model.model_validate(self._answer)


def make_config(
    models: tuple[str, ...] = ("model-a", "model-b"),
    hf_key: str | None = "hf-test",
    provider: str | None = None,
    **detector_overrides: Any,
) -> Config:
    return Config(
        detector=DetectorConfig(provider=provider, **detector_overrides),
        huggingface=HuggingFaceConfig(huggingface_api_key=hf_key, model_ids=",".join(models)),
        openai=OpenAIConfig(api_key="sk-test"),
    )


@pytest.fixture
def build_service() -> Callable[..., DetectionService]:
    """Factory wiring a DetectionService with fakes."""

    def _build(
        classifier: FakeClassifier,
        generator: FakeGenerator | None = None,
        **config_overrides: Any,
    ) -> DetectionService:
        return DetectionService(
            classifier,
            generator or FakeGenerator(),
            make_config(**config_overrides),
        )

    return _build


@pytest.fixture
def failing_model() -> ClassifierInvocationError:
    return ClassifierInvocationError("model-a", "HTTP 503")
