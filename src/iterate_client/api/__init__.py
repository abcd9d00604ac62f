"""
API Client Module

Provides the HTTP client for the Iterate survey API.
"""

from .client import APIClient, DEFAULT_API_HOST
from .completion import Completion
from .errors import (
    APIError,
    APIRequestError,
    InvalidAPIResponse,
    InvalidAPIUrl,
    IterateError,
    JSONDecodingError,
)
from .models import JSONCodec, Response, WireModel
from .paths import APIPath

__all__ = [
    "APIClient",
    "DEFAULT_API_HOST",
    "APIPath",
    "Completion",
    "JSONCodec",
    "Response",
    "WireModel",
    "IterateError",
    "InvalidAPIUrl",
    "APIRequestError",
    "InvalidAPIResponse",
    "JSONDecodingError",
    "APIError",
]
