"""
Core module - configuration, database, layered shop config and response formatting.
"""
from .config import Settings, get_settings
from .db import Base, engine, AsyncSessionLocal
from .layered_config import ConfigError, LayeredConfig
from .responses import (
    ErrorCodes,
    success_response,
    error_response,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "ConfigError",
    "LayeredConfig",
    # Database
    "Base",
    "engine",
    "AsyncSessionLocal",
    # Responses
    "ErrorCodes",
    "success_response",
    "error_response",
]
