"""Hugging Face text-classification client used by the detector ensemble."""
from typing import Any

import httpx

from textcheck.core.config import DetectorConfig, HuggingFaceConfig
from textcheck.core.exceptions import ClassifierInvocationError
from textcheck.core.logging import get_logger

logger = get_logger(__name__)


class HuggingFaceClassifier:
    """Runs a hosted text-classification model on one chunk of text.

    Requests go to ``<inference_url>/<model>`` or, when a custom endpoint URL is
    configured, to that endpoint for every model.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        hf_config: HuggingFaceConfig,
        detector_config: DetectorConfig,
    ) -> None:
        self._client = client
        self._config = hf_config
        self._use_cache = detector_config.use_cache

    def _url_for(self, model: str) -> str:
        if self._config.endpoint_url:
            return self._config.endpoint_url
        return f"{self._config.inference_url.rstrip('/')}/{model}"

    async def classify(self, model: str, text: str) -> Any:
        """Return the decoded provider response for ``text``.

        Raises:
            ClassifierInvocationError: on transport errors or non-2xx responses.
        """
        payload = {
            "inputs": text,
            "options": {"wait_for_model": True, "use_cache": self._use_cache},
        }
        headers = {"Authorization": f"Bearer {self._config.api_key or ''}"}

        try:
            response = await self._client.post(self._url_for(model), json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "classifier_http_error",
                model=model,
                status_code=e.response.status_code,
            )
            raise ClassifierInvocationError(model, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("classifier_request_failed", model=model, error=str(e))
            raise ClassifierInvocationError(model, str(e) or type(e).__name__) from e
