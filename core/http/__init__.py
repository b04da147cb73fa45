"""
HTTP Client Module

Thread-safe HTTP client used by the storage gateway.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
