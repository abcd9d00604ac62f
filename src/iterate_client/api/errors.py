"""
API Errors

Typed failures reported by the API client. Every kind has a stable
``code`` so callers can branch without isinstance chains.
"""

from typing import Optional


class IterateError(Exception):
    """Base exception for all client failures."""

    code = "iterate_error"
    default_message = "Iterate API call failed"

    def __init__(self, message: Optional[str] = None):
        self.message = self.default_message if message is None else message
        super().__init__(self.message)

    def __eq__(self, other) -> bool:
        return (
            type(self) is type(other)
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidAPIUrl(IterateError):
    """Host and path do not form a valid URL."""
    code = "invalid_api_url"
    default_message = "Invalid API URL"


class APIRequestError(IterateError):
    """The transport reported an error (network, TLS, protocol)."""
    code = "api_request_error"
    default_message = "API request failed"


class InvalidAPIResponse(IterateError):
    """The transport succeeded but no body came back."""
    code = "invalid_api_response"
    default_message = "Invalid API response"


class JSONDecodingError(IterateError):
    """The body did not match the expected envelope shape."""
    code = "json_decoding"
    default_message = "Unable to decode API response"


class APIError(IterateError):
    """The API answered with an error message in the envelope."""
    code = "api_error"

    def __init__(self, message: str):
        super().__init__(message)
