"""Core module - connector-neutral models, mapping and configuration.

This module contains the taxonomy and board models, the board mapping
configuration and its resolution engine, service configuration loading,
and logging. It is intentionally target-agnostic.

Target-specific logic (TFS, and any future target systems) belongs in /connectors/.
"""

__version__ = "1.0.0"
