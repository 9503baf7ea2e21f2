"""TFS / Azure DevOps HTTP Client.

Low-level HTTP client for the TFS REST API.
Handles credentials, headers, continuation-token paging and error mapping.
There are no retries here; retry policy belongs to the sync scheduler.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urlsplit
import json

import aiohttp

from connectors.tfs.tfs_auth import TfsCredentials
from connectors.tfs.tfs_models import TfsClassificationNode, TfsProjectInfo, TfsWorkItemType
from core.observability.logging import get_logger

logger = get_logger(__name__)

CONTINUATION_HEADER = "x-ms-continuationtoken"


class TfsApiError(Exception):
    """Base exception for TFS API errors."""
    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class TfsAuthenticationError(TfsApiError):
    """Authentication failed (401/403, or a sign-in page instead of JSON)."""
    pass


class TfsNotFoundError(TfsApiError):
    """Resource not found (404)."""
    pass


@dataclass
class TfsApiConfig:
    """Configuration for the TFS API client."""
    api_version: str = "5.0"
    timeout_seconds: int = 30
    page_size: int = 100
    iteration_depth: int = 20   # $depth for classification node trees


def build_collection_url(protocol: str, host: str) -> str:
    """Build a project collection URL from protocol and host.

    The host may already carry a scheme (a full collection URL), in which
    case it wins over `protocol`.

    Raises:
        ValueError: If the result is not an http(s) URL with a host
    """
    host = (host or "").strip()
    if not host:
        raise ValueError("Host is empty")

    if "://" not in host:
        scheme = (protocol or "https").strip().rstrip(":/")
        host = f"{scheme}://{host}"

    parts = urlsplit(host)
    if parts.scheme.lower() not in ("http", "https"):
        raise ValueError(f"Unsupported scheme '{parts.scheme}'")
    if not parts.hostname:
        raise ValueError("No host name in URL")
    # Accessing port validates it
    parts.port

    return host.rstrip("/")


class TfsProjectCollection:
    """Authenticated session against one TFS project collection.

    Provides:
    - Authenticated API calls
    - Continuation-token paging
    - Error mapping to TfsApiError subclasses

    Usage:
        collection = TfsProjectCollection(url, credentials)
        await collection.verify()
        projects = await collection.list_projects()
        await collection.close()
    """

    def __init__(
        self,
        collection_url: str,
        credentials: TfsCredentials,
        api_config: Optional[TfsApiConfig] = None,
    ):
        self.collection_url = collection_url.rstrip("/")
        self.credentials = credentials
        self.api_config = api_config or TfsApiConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def host(self) -> str:
        return urlsplit(self.collection_url).hostname or ""

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        if self.closed:
            headers = {"Accept": "application/json"}
            headers.update(self.credentials.headers())
            self._session = aiohttp.ClientSession(
                auth=self.credentials.auth(),
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.api_config.timeout_seconds),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
    ) -> Tuple[Dict[str, Any], Any]:
        """Make an authenticated API request.

        Args:
            method: HTTP method
            path: Path relative to the collection URL
            params: Query parameters (api-version is added)

        Returns:
            (response JSON, response headers)

        Raises:
            TfsAuthenticationError: Authentication failed
            TfsNotFoundError: Resource not found
            TfsApiError: Other API errors
        """
        url = f"{self.collection_url}/{path.lstrip('/')}"
        query = {"api-version": self.api_config.api_version}
        if params:
            query.update(params)

        async with self._get_session().request(method, url, params=query) as response:
            response_text = await response.text()

            if response.status in (401, 403):
                raise TfsAuthenticationError(
                    f"Authentication failed: {response.status}",
                    response.status,
                    response_text,
                )

            if response.status == 404:
                raise TfsNotFoundError(
                    f"Resource not found: {url}",
                    response.status,
                    response_text,
                )

            if response.status >= 400:
                raise TfsApiError(
                    f"API error {response.status}: {response_text[:200]}",
                    response.status,
                    response_text,
                )

            # The hosted service answers 203 with a sign-in page when the
            # credentials are not accepted non-interactively.
            if response.status == 203 or "json" not in (response.content_type or ""):
                raise TfsAuthenticationError(
                    "Expected a JSON response; the server asked for interactive sign-in",
                    response.status,
                    response_text,
                )

            data = json.loads(response_text) if response_text else {}
            return data, response.headers

    async def get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """GET a resource and return its JSON body."""
        data, _ = await self._request("GET", path, params)
        return data

    async def list_all(self, path: str, params: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        """GET a collection, following continuation tokens."""
        results: List[Dict[str, Any]] = []
        query = dict(params or {})
        query["$top"] = str(self.api_config.page_size)

        while True:
            data, headers = await self._request("GET", path, query)
            results.extend(data.get("value", []))

            token = headers.get(CONTINUATION_HEADER)
            if not token:
                break
            query["continuationToken"] = token

        return results

    async def verify(self) -> None:
        """Make one round trip to prove the URL and credentials work."""
        logger.debug(f"Verifying TFS collection {self.collection_url}")
        await self.get("_apis/projects", {"$top": "1"})

    async def list_projects(self) -> List[TfsProjectInfo]:
        """List all team projects in the collection."""
        return [TfsProjectInfo.model_validate(p) for p in await self.list_all("_apis/projects")]


class TfsWorkItemStore:
    """Work item tracking view of a project collection.

    Usage:
        store = TfsWorkItemStore(collection)
        types = await store.get_work_item_types("Fabrikam")
        root = await store.get_iteration_root("Fabrikam")
    """

    def __init__(self, collection: TfsProjectCollection):
        self.collection = collection

    async def get_work_item_types(self, project_name: str) -> List[TfsWorkItemType]:
        """List the work item types of a project, with transitions."""
        data = await self.collection.get(f"{quote(project_name, safe='')}/_apis/wit/workitemtypes")
        return [TfsWorkItemType.model_validate(t) for t in data.get("value", [])]

    async def get_iteration_root(self, project_name: str) -> Optional[TfsClassificationNode]:
        """Root node of the project's iteration tree, or None if it has none.

        The service cuts the tree off at `$depth`; subtrees below that are
        fetched node by node so the result is complete at any depth.
        """
        data = await self.collection.get(
            f"{quote(project_name, safe='')}/_apis/wit/classificationnodes",
            {"$depth": str(self.collection.api_config.iteration_depth)},
        )
        for node_data in data.get("value", []):
            node = TfsClassificationNode.model_validate(node_data)
            if (node.structure_type or "").lower() == "iteration":
                await self._expand_truncated(project_name, node)
                return node
        return None

    async def get_iteration_node(self, project_name: str, relative_path: List[str]) -> TfsClassificationNode:
        """One iteration node (with `$depth` levels below it) by its path under the project root."""
        node_path = "/".join(quote(segment, safe="") for segment in relative_path)
        data = await self.collection.get(
            f"{quote(project_name, safe='')}/_apis/wit/classificationnodes/Iterations/{node_path}",
            {"$depth": str(self.collection.api_config.iteration_depth)},
        )
        return TfsClassificationNode.model_validate(data)

    async def _expand_truncated(self, project_name: str, root: TfsClassificationNode) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.has_children and node.children is None:
                relative_path = iteration_relative_path(node.path)
                if relative_path is None:
                    logger.warning(f"Iteration node {node.name!r} has children but no path; skipping them")
                else:
                    logger.debug(f"Fetching iteration subtree {node.path}")
                    subtree = await self.get_iteration_node(project_name, relative_path)
                    node.children = subtree.children or []
            stack.extend(node.children or [])


def iteration_relative_path(path: Optional[str]) -> Optional[List[str]]:
    """Segments of an iteration path below the project root node.

    "\\P\\Iteration\\Release 1\\Sprint 1" -> ["Release 1", "Sprint 1"]
    """
    segments = [s for s in (path or "").split("\\") if s]
    if len(segments) < 2:
        return None
    rest = segments[1:]
    if rest[0].lower() == "iteration":
        rest = rest[1:]
    return rest or None
