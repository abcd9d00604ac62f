"""
Configuration constants for the Iterate API client.

This module centralizes the defaults the client uses so they can be
adjusted in one place.
"""

from dataclasses import dataclass, field


@dataclass
class APIConfig:
    """API configuration settings."""
    # Should be the production host under most circumstances
    default_host: str = "https://iteratehq.com/api/v1"
    content_type: str = "application/javascript"
    auth_scheme: str = "Bearer"
    allowed_schemes: tuple = ("http", "https")


@dataclass
class LogConfig:
    """Logging configuration."""
    logger_name: str = "iterate_client"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%H:%M:%S"


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)


# Global configuration instance
config = Config()
