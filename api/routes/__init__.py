"""API route handlers."""

from api.routes import content, health, stages, verify

__all__ = ["content", "health", "stages", "verify"]
