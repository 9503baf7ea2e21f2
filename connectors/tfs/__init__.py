"""TFS Connector Package.

Implements the TargetConnector interface for Team Foundation Server and
Azure DevOps (hosted TFS).
"""

from connectors.tfs.tfs_connector import TfsConnector
from connectors.tfs.tfs_auth import (
    TfsCredentials,
    TfsNetworkCredential,
    TfsBasicAuthBridge,
    build_credentials,
    is_hosted_host,
)
from connectors.tfs.tfs_client import (
    TfsApiConfig,
    TfsApiError,
    TfsAuthenticationError,
    TfsNotFoundError,
    TfsProjectCollection,
    TfsWorkItemStore,
)
from connectors.tfs.tfs_models import (
    TfsProjectInfo,
    TfsWorkItemType,
    TfsTransition,
    TfsClassificationNode,
)

__all__ = [
    # Connector
    "TfsConnector",
    # Auth
    "TfsCredentials",
    "TfsNetworkCredential",
    "TfsBasicAuthBridge",
    "build_credentials",
    "is_hosted_host",
    # Client
    "TfsApiConfig",
    "TfsApiError",
    "TfsAuthenticationError",
    "TfsNotFoundError",
    "TfsProjectCollection",
    "TfsWorkItemStore",
    # Models
    "TfsProjectInfo",
    "TfsWorkItemType",
    "TfsTransition",
    "TfsClassificationNode",
]
