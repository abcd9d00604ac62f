"""
API Paths

Known endpoint suffixes for the Iterate API. Each value is appended
to the configured host to form the request URL.
"""

from enum import Enum


class APIPath(str, Enum):
    """Endpoint paths understood by the API."""
    SURVEYS_EMBED = "/surveys/embed"
