"""
Console core: Admin API configuration store and process settings
"""

from .config_store import ApiConfig, ConfigStore
from .settings import ConsoleSettings, configure_logging

__all__ = [
    "ApiConfig",
    "ConfigStore",
    "ConsoleSettings",
    "configure_logging"
]
