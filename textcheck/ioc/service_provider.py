"""
Service provider for dependency injection.

This module provides all service dependencies.
"""

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, from_context, provide

from textcheck.core.config import Config
from textcheck.services.classifier_client import HuggingFaceClassifier
from textcheck.services.detection_service import DetectionService
from textcheck.services.generative_client import OpenAIStructuredClient


class ServiceProvider(Provider):
    """
    Provider for service dependencies.

    All services are provided at APP scope (singleton).
    """

    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    async def provide_http_client(self, config: Config) -> AsyncIterator[httpx.AsyncClient]:
        # Shared connection pool, closed with the container
        async with httpx.AsyncClient(timeout=config.http_timeout_seconds) as client:
            yield client

    @provide(scope=Scope.APP)
    def provide_classifier(self, client: httpx.AsyncClient, config: Config) -> HuggingFaceClassifier:
        return HuggingFaceClassifier(client, config.huggingface, config.detector)

    @provide(scope=Scope.APP)
    def provide_generator(self, client: httpx.AsyncClient, config: Config) -> OpenAIStructuredClient:
        return OpenAIStructuredClient(client, config.openai)

    @provide(scope=Scope.APP)
    def provide_detection_service(
        self,
        classifier: HuggingFaceClassifier,
        generator: OpenAIStructuredClient,
        config: Config,
    ) -> DetectionService:
        return DetectionService(classifier, generator, config)
