"""Tests for the provider HTTP clients using httpx mock transports."""

import asyncio
import json

import httpx
import pytest

from textcheck.core.config import DetectorConfig, HuggingFaceConfig, OpenAIConfig
from textcheck.core.exceptions import ClassifierInvocationError, GenerativeProviderError
from textcheck.services.classifier_client import HuggingFaceClassifier
from textcheck.services.generative_client import (
    GenerativeVerdict,
    OpenAIStructuredClient,
    build_json_schema_response_format,
)


def run_classifier(handler, hf_config: HuggingFaceConfig, detector_config: DetectorConfig | None = None):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            classifier = HuggingFaceClassifier(client, hf_config, detector_config or DetectorConfig())
            return await classifier.classify("org/detector", "some chunk of text")

    return asyncio.run(_run())


def run_generator(handler, openai_config: OpenAIConfig):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            generator = OpenAIStructuredClient(client, openai_config)
            return await generator.generate("prompt", GenerativeVerdict, temperature=0.1)

    return asyncio.run(_run())


def completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


class TestHuggingFaceClassifier:
    def test_posts_to_model_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[[{"label": "Human", "score": 0.9}]])

        config = HuggingFaceConfig(huggingface_api_key="hf-key", inference_url="https://hf.test/models/")
        result = run_classifier(handler, config, DetectorConfig(use_cache=True))

        assert result == [[{"label": "Human", "score": 0.9}]]
        assert seen["url"] == "https://hf.test/models/org/detector"
        assert seen["auth"] == "Bearer hf-key"
        assert seen["body"] == {
            "inputs": "some chunk of text",
            "options": {"wait_for_model": True, "use_cache": True},
        }

    def test_custom_endpoint_overrides_model_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[])

        config = HuggingFaceConfig(huggingface_api_key="k", endpoint_url="https://endpoint.test/classify")
        run_classifier(handler, config)

        assert seen["url"] == "https://endpoint.test/classify"

    def test_http_error_raises(self):
        config = HuggingFaceConfig(huggingface_api_key="k")

        with pytest.raises(ClassifierInvocationError, match="HTTP 503"):
            run_classifier(lambda request: httpx.Response(503, json={"error": "loading"}), config)

    def test_non_json_body_raises(self):
        config = HuggingFaceConfig(huggingface_api_key="k")

        with pytest.raises(ClassifierInvocationError):
            run_classifier(lambda request: httpx.Response(200, content=b"<html>"), config)


class TestOpenAIStructuredClient:
    def test_returns_validated_object(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return completion(json.dumps({"label": "likely_ai", "confidence": 81, "explanation": "Even tone."}))

        config = OpenAIConfig(api_key="sk", model="gpt-test", base_url="https://llm.test/v1")
        result = run_generator(handler, config)

        assert result == GenerativeVerdict(label="likely_ai", confidence=81, explanation="Even tone.")
        assert seen["url"] == "https://llm.test/v1/chat/completions"
        assert seen["body"]["model"] == "gpt-test"
        assert seen["body"]["temperature"] == 0.1
        assert seen["body"]["response_format"]["json_schema"]["name"] == "GenerativeVerdict"

    def test_schema_mismatch_raises(self):
        content = json.dumps({"label": "likely_ai", "confidence": 150, "explanation": "x"})

        with pytest.raises(GenerativeProviderError):
            run_generator(lambda request: completion(content), OpenAIConfig(api_key="sk"))

    def test_empty_content_raises(self):
        with pytest.raises(GenerativeProviderError):
            run_generator(lambda request: completion(""), OpenAIConfig(api_key="sk"))

    def test_http_error_raises(self):
        with pytest.raises(GenerativeProviderError, match="HTTP 429"):
            run_generator(lambda request: httpx.Response(429), OpenAIConfig(api_key="sk"))

    def test_missing_key_fails_without_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        with pytest.raises(GenerativeProviderError, match="not configured"):
            run_generator(handler, OpenAIConfig(api_key=None))


def test_response_format_lists_all_fields():
    schema = build_json_schema_response_format(GenerativeVerdict)["json_schema"]["schema"]

    assert schema["required"] == ["label", "confidence", "explanation"]
    assert schema["properties"]["label"]["enum"] == ["likely_human", "likely_ai", "uncertain"]
    assert schema["properties"]["confidence"]["type"] == "number"
    assert schema["additionalProperties"] is False
