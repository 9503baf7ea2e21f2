"""Service configuration - servers, polling and board mappings."""

from core.config.settings import (
    Configuration,
    ServerConfiguration,
    load_configuration,
)

__all__ = [
    "Configuration",
    "ServerConfiguration",
    "load_configuration",
]
