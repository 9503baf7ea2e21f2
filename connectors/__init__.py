"""Target Connectors - Pluggable work-item tracking system integrations.

This package contains the abstract target interface and concrete
implementations for specific tracking systems (TFS / Azure DevOps, ...).

This package handles:
- Target-specific authentication
- Discovery of the target vocabulary (projects, types, states, iterations)
- Normalizing vendor payloads into core.models taxonomy types

Key Design Principle:
- The sync orchestrator depends ONLY on the TargetConnector interface
- All discovery methods return NORMALIZED types (Project, WorkItemType, State)
- No TFS-specific types should leak through the interface

To add a new target:
1. Create a new folder (e.g., jira/)
2. Implement TargetConnector interface
3. Register using @register_connector decorator
"""

from connectors.target_base import (
    # Core interface
    TargetConnector,
    ConnectionResult,

    # Factory functions
    create_connector,
    register_connector,
    list_available_connectors,
)

# Importing the implementations registers them
from connectors import tfs  # noqa: F401

__all__ = [
    # Core interface
    "TargetConnector",
    "ConnectionResult",

    # Factory
    "create_connector",
    "register_connector",
    "list_available_connectors",
]
