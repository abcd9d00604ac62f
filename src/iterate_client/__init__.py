"""
Iterate API Client

Minimal client for submitting survey requests to the Iterate API.
"""

from .api import (
    APIClient,
    APIError,
    APIPath,
    APIRequestError,
    InvalidAPIResponse,
    InvalidAPIUrl,
    IterateError,
    JSONDecodingError,
    Response,
    WireModel,
)
from .logging_setup import setup_logging

__all__ = [
    "APIClient",
    "APIPath",
    "Response",
    "WireModel",
    "IterateError",
    "InvalidAPIUrl",
    "APIRequestError",
    "InvalidAPIResponse",
    "JSONDecodingError",
    "APIError",
    "setup_logging",
]
