"""
Observability Module for the Integration Service

Provides:
- Structured logging with correlation IDs (board, target project, host)
"""

from core.observability.logging import (
    get_logger,
    configure_logging,
    CorrelationContext,
    with_correlation,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "CorrelationContext",
    "with_correlation",
]
