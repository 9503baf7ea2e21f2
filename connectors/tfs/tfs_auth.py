"""TFS / Azure DevOps credential chain.

Two authentication shapes exist for the same product family:

- On-premises TFS: direct network credentials (user + password).
- Hosted (visualstudio.com / dev.azure.com): the network credentials are
  wrapped in a basic-auth bridge (user + password or personal access token)
  and interactive sign-in must be suppressed, otherwise the service answers
  with a sign-in page instead of an API response.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import aiohttp

HOSTED_DOMAINS: Tuple[str, ...] = ("visualstudio.com", "dev.azure.com")


def is_hosted_host(host: str) -> bool:
    """True if the host name belongs to the hosted service."""
    host = (host or "").lower().rstrip(".")
    return any(host == domain or host.endswith("." + domain) for domain in HOSTED_DOMAINS)


@dataclass
class TfsNetworkCredential:
    """Direct user/password credential."""
    user: str
    password: str = field(repr=False)

    def basic_auth(self) -> aiohttp.BasicAuth:
        return aiohttp.BasicAuth(self.user or "", self.password or "")


@dataclass
class TfsBasicAuthBridge:
    """Basic-auth bridge used for the hosted service."""
    credential: TfsNetworkCredential
    allow_interactive: bool = False

    @property
    def headers(self) -> Dict[str, str]:
        if self.allow_interactive:
            return {}
        return {"X-TFS-FedAuthRedirect": "Suppress"}


@dataclass
class TfsCredentials:
    """Credential chain handed to a project collection session."""
    network: TfsNetworkCredential
    bridge: Optional[TfsBasicAuthBridge] = None

    @property
    def is_hosted(self) -> bool:
        return self.bridge is not None

    def auth(self) -> aiohttp.BasicAuth:
        if self.bridge is not None:
            return self.bridge.credential.basic_auth()
        return self.network.basic_auth()

    def headers(self) -> Dict[str, str]:
        return self.bridge.headers if self.bridge is not None else {}


def build_credentials(user: str, password: str, host: str) -> TfsCredentials:
    """Build the credential chain for a host.

    Args:
        user: User name (may be empty for a personal access token)
        password: Password or personal access token
        host: Host name of the collection URL

    Returns:
        TfsCredentials, with a basic-auth bridge when the host is hosted
    """
    network = TfsNetworkCredential(user=user or "", password=password or "")
    if is_hosted_host(host):
        return TfsCredentials(network=network, bridge=TfsBasicAuthBridge(credential=network))
    return TfsCredentials(network=network)
