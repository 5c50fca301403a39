"""
Domain exceptions raised by provider clients and the detection service.
"""


class DetectorError(Exception):
    """Base class for detector failures."""


class ClassifierInvocationError(DetectorError):
    """A text-classification provider call failed."""

    def __init__(self, model: str, message: str) -> None:
        super().__init__(f"{model}: {message}")
        self.model = model


class GenerativeProviderError(DetectorError):
    """The generative model call failed or returned an unusable object."""
