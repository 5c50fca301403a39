"""Structured-output client for the generative arbiter and fallback classifier."""
from typing import Literal, TypeVar

import httpx
from pydantic import BaseModel, Field, ValidationError

from textcheck.core.config import OpenAIConfig
from textcheck.core.exceptions import GenerativeProviderError
from textcheck.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class GenerativeVerdict(BaseModel):
    """Verdict object the generative model must return."""

    label: Literal["likely_human", "likely_ai", "uncertain"]
    confidence: float = Field(ge=0, le=100, description="Confidence in the label, 0-100.")
    explanation: str = Field(min_length=1, description="Short reasoning in plain language.")


ARBITER_PROMPT = '''
You are an AI-text detector. Decide if the text is likely human or likely AI.
Return JSON with "label", "confidence" (0-100) and "explanation".
Be conservative about "likely human" when text has generic marketing or poetic boilerplate.

Text:
"""{text}"""
'''

FALLBACK_PROMPT = '''
You are a detector that estimates whether text was written by a human or an AI system.
Return ONLY a JSON object with the following fields:
- "label": one of "likely_human", "likely_ai", or "uncertain"
- "confidence": number from 0 to 100 (how confident you are in that label)
- "explanation": one short paragraph explaining your reasoning in simple language.

Text to analyze:
"""{text}"""
'''


def build_json_schema_response_format(model: type[BaseModel]) -> dict:
    """Build an OpenAI-compatible strict JSON schema response format."""
    schema = model.model_json_schema()

    properties = {}
    for field_name, field_info in schema.get("properties", {}).items():
        prop = {
            "type": field_info.get("type", "string"),
            "description": field_info.get("description", ""),
        }
        if "enum" in field_info:
            prop["enum"] = field_info["enum"]
        properties[field_name] = prop

    return {
        "type": "json_schema",
        "json_schema": {
            "name": model.__name__,
            "strict": True,
            "schema": {
                "type": "object",
                "properties": properties,
                "required": list(properties),
                "additionalProperties": False,
            },
        },
    }


class OpenAIStructuredClient:
    """Chat-completions client constrained to a pydantic response model."""

    def __init__(self, client: httpx.AsyncClient, openai_config: OpenAIConfig) -> None:
        self._client = client
        self._config = openai_config

    @property
    def model(self) -> str:
        return self._config.model

    async def generate(
        self,
        prompt: str,
        response_model: type[T],
        temperature: float,
    ) -> T:
        """Send ``prompt`` and validate the reply against ``response_model``.

        Raises:
            GenerativeProviderError: if the key is missing, the call fails, or the
                reply does not match the schema.
        """
        if not self._config.api_key:
            raise GenerativeProviderError("OpenAI API key is not configured")

        body = {
            "model": self._config.model,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": build_json_schema_response_format(response_model),
        }
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self._config.api_key}"}

        try:
            response = await self._client.post(url, json=body, headers=headers)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            raise GenerativeProviderError(
                f"Generative provider returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerativeProviderError(f"Generative provider request failed: {e}") from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerativeProviderError("Malformed generative provider response") from e

        if not content:
            raise GenerativeProviderError("The generative model returned an empty response")

        try:
            return response_model.model_validate_json(content)
        except ValidationError as e:
            logger.warning("generative_schema_mismatch", errors=e.error_count())
            raise GenerativeProviderError("Generative response did not match the schema") from e
