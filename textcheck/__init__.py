"""Human-vs-AI text verdict service."""

__version__ = "0.1.0"
