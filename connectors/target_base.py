"""Abstract Target Connector Interface.

This module defines the interface every target (work-item tracking) system
connector implements. It is intentionally target-agnostic - no TFS, Jira or
other vendor specifics here.

Connectors implement this interface to:
1. Connect and authenticate with their target system
2. Discover the target vocabulary (projects, work item types, states,
   iteration paths) and return it as NORMALIZED taxonomy models

Key Design Principles:
- The sync orchestrator depends ONLY on this interface
- Connectivity problems come back as a ConnectionResult, never as an exception
- Discovery is read-only and best-effort: a missing prerequisite yields an
  empty result, not an error
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional

from core.config.settings import ServerConfiguration
from core.models.taxonomy import Project


# =============================================================================
# Enums
# =============================================================================

class ConnectionResult(str, Enum):
    """Outcome of a connect attempt."""
    SUCCESS = "SUCCESS"
    INVALID_URL = "INVALID_URL"                 # Malformed host or disallowed protocol
    FAILED_TO_CONNECT = "FAILED_TO_CONNECT"     # Anything else; see connector.last_error


# =============================================================================
# Abstract Connector Interface
# =============================================================================

class TargetConnector(ABC):
    """Abstract base class for target system connectors.

    A connector owns its session: it is created lazily by connect(), reused
    by later connect() calls, and released by disconnect() (or by leaving
    an `async with` block). Callers never reach into the session.

    Implementations:
    - connectors/tfs/tfs_connector.py
    """

    def __init__(self, config: Optional[ServerConfiguration] = None):
        """Initialize connector with optional server configuration."""
        self.config = config or ServerConfiguration()
        self.last_error: Optional[BaseException] = None

    # =========================================================================
    # Connection Management
    # =========================================================================

    @abstractmethod
    async def connect(self, protocol: str, host: str, user: str, password: str) -> ConnectionResult:
        """Establish (or reuse) a session with the target system.

        Returns:
            ConnectionResult; the cause of a failure is kept in last_error
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the session, if any."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True once a session has been established."""
        pass

    async def connect_configured(self) -> ConnectionResult:
        """Connect using the server configuration given at construction."""
        host = self.config.url or self.config.host or ""
        return await self.connect(
            self.config.protocol,
            host,
            self.config.user or "",
            self.config.password or "",
        )

    async def __aenter__(self) -> "TargetConnector":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    # =========================================================================
    # Discovery
    # =========================================================================

    @abstractmethod
    async def get_projects(self) -> List[Project]:
        """Discover every project with its types, states and iteration paths.

        Returns:
            Projects; an empty list when no session has been established
        """
        pass

    # -------------------------------------------------------------------------
    # Utilities
    # -------------------------------------------------------------------------

    def get_connector_name(self) -> str:
        """Get the name of this connector."""
        return self.config.type or type(self).__name__


# =============================================================================
# Connector Factory
# =============================================================================

_connector_registry: Dict[str, type] = {}


def register_connector(connector_type: str):
    """Decorator to register a connector implementation."""
    def decorator(cls):
        _connector_registry[connector_type.lower()] = cls
        return cls
    return decorator


def create_connector(config: ServerConfiguration) -> TargetConnector:
    """Create a connector instance from server configuration.

    Args:
        config: ServerConfiguration with type specified

    Returns:
        Configured connector instance

    Raises:
        ValueError: If the type is not registered
    """
    connector_type = (config.type or "").lower()

    if connector_type not in _connector_registry:
        available = list(_connector_registry.keys())
        raise ValueError(
            f"Unknown connector type: {connector_type}. "
            f"Available: {available}"
        )

    connector_class = _connector_registry[connector_type]
    return connector_class(config)


def list_available_connectors() -> List[str]:
    """List all registered connector types."""
    return list(_connector_registry.keys())
