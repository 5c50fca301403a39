"""
Dependency injection container configuration using Dishka.
"""

from textcheck.ioc.service_provider import ServiceProvider


class AppProvider(ServiceProvider):
    """Root provider for the application container; tests build their own."""


__all__ = ["AppProvider", "ServiceProvider"]
