"""TFS / Azure DevOps Target Connector.

Implements the TargetConnector interface for Team Foundation Server and its
hosted variant (visualstudio.com / dev.azure.com).
"""

import asyncio
from typing import List, Optional
from urllib.parse import urlsplit

import aiohttp

from connectors.target_base import (
    TargetConnector,
    ConnectionResult,
    register_connector,
)
from connectors.tfs.tfs_auth import build_credentials
from connectors.tfs.tfs_client import (
    TfsApiConfig,
    TfsApiError,
    TfsNotFoundError,
    TfsProjectCollection,
    TfsWorkItemStore,
    build_collection_url,
)
from connectors.tfs.tfs_discovery import (
    discover_iteration_paths,
    discover_states_of,
    merge_states,
)
from connectors.tfs.tfs_models import TfsProjectInfo
from core.config.settings import ServerConfiguration
from core.models.taxonomy import Project, WorkItemType
from core.observability.logging import get_logger, with_correlation

logger = get_logger(__name__)

# Per-project failures that leave the rest of discovery usable
DISCOVERY_ERRORS = (TfsApiError, aiohttp.ClientError, asyncio.TimeoutError)


@register_connector("tfs")
class TfsConnector(TargetConnector):
    """TFS connector implementation.

    Connects to a TFS project collection via the REST API and discovers
    projects, work item types, states and iteration paths.

    The project collection session is opened once per connector by a single
    initializer task; concurrent connect() calls all await that task. Later
    connect() calls reuse the session and only re-derive the work item
    store if it is missing.
    """

    def __init__(
        self,
        config: Optional[ServerConfiguration] = None,
        api_config: Optional[TfsApiConfig] = None,
    ):
        super().__init__(config)
        self.api_config = api_config or TfsApiConfig()

        self._collection: Optional[TfsProjectCollection] = None
        self._collection_task: Optional[asyncio.Future] = None
        self._work_item_store: Optional[TfsWorkItemStore] = None

    # =========================================================================
    # Connection Management
    # =========================================================================

    @property
    def is_connected(self) -> bool:
        return self._collection is not None

    async def connect(self, protocol: str, host: str, user: str, password: str) -> ConnectionResult:
        """Connect to a TFS project collection."""
        with with_correlation(connector_type="tfs", target_host=host):
            logger.debug(f"Connecting to TFS '{host}'")

            if (protocol or "").lower().startswith("file"):
                logger.error(f"TFS integration cannot use a file datasource '{host}'.")
                return ConnectionResult.INVALID_URL

            try:
                collection_url = build_collection_url(protocol, host)
            except ValueError as e:
                logger.error(f"Invalid project URL '{host}': {e}")
                return ConnectionResult.INVALID_URL

            try:
                collection = await self._get_collection(collection_url, user, password)

                if self._work_item_store is None:
                    self._work_item_store = TfsWorkItemStore(collection)

            except Exception as e:
                self.last_error = e
                logger.exception(f"Failed to connect: {e}")
                return ConnectionResult.FAILED_TO_CONNECT

            self.last_error = None
            return ConnectionResult.SUCCESS

    async def _get_collection(self, collection_url: str, user: str, password: str) -> TfsProjectCollection:
        """Return the session, opening it exactly once.

        There is no await between the check and the task creation, so two
        callers can never start two initializers.
        """
        if self._collection is not None:
            if self._collection.collection_url != collection_url:
                logger.warning(
                    f"Already connected to {self._collection.collection_url}; "
                    f"reusing that session instead of {collection_url}"
                )
            return self._collection

        if self._collection_task is None:
            self._collection_task = asyncio.ensure_future(
                self._open_collection(collection_url, user, password)
            )
        task = self._collection_task

        try:
            # shield: a cancelled caller must not cancel the shared initializer
            collection = await asyncio.shield(task)
        except Exception:
            if self._collection_task is task:
                self._collection_task = None
            raise

        if self._collection_task is not task:
            # disconnect() ran while the session was opening
            await collection.close()
            raise TfsApiError("Disconnected while the TFS session was opening")

        self._collection = collection
        return collection

    async def _open_collection(self, collection_url: str, user: str, password: str) -> TfsProjectCollection:
        credentials = build_credentials(user, password, urlsplit(collection_url).hostname or "")
        if credentials.is_hosted:
            logger.debug("Hosted TFS detected, using basic authentication bridge")

        collection = TfsProjectCollection(collection_url, credentials, self.api_config)
        try:
            await collection.verify()
        except BaseException:
            await collection.close()
            raise
        return collection

    async def disconnect(self) -> None:
        """Close the session and forget the work item store.

        A session still being opened is closed by the connect() calls
        waiting on it, which then report FAILED_TO_CONNECT.
        """
        collection = self._collection
        self._collection = None
        self._collection_task = None
        self._work_item_store = None
        if collection is not None:
            await collection.close()

    # =========================================================================
    # Discovery
    # =========================================================================

    async def get_projects(self) -> List[Project]:
        """Discover every project of the collection."""
        if self._collection is None:
            return []

        with with_correlation(connector_type="tfs", target_host=self._collection.host):
            logger.debug("Getting list of TFS projects")

            project_infos = await self._collection.list_projects()

            projects = []
            for project_info in project_infos:
                with with_correlation(target_project=project_info.name):
                    work_item_types = await self._get_work_item_types(project_info)
                    iteration_paths = await self._get_iteration_paths(project_info)

                projects.append(Project(
                    id=project_info.id,
                    name=project_info.name,
                    work_item_types=work_item_types,
                    states=merge_states(work_item_types),
                    iteration_paths=iteration_paths,
                ))

            logger.info(f"Discovered {len(projects)} TFS projects")
            return projects

    async def _get_work_item_types(self, project_info: TfsProjectInfo) -> List[WorkItemType]:
        logger.debug(f"Getting TFS Work Item Types for project {project_info.name}")

        if self._work_item_store is None:
            return []

        try:
            tfs_types = await self._work_item_store.get_work_item_types(project_info.name)
        except TfsNotFoundError:
            logger.warning(f"Project {project_info.name} has no work item types")
            return []
        except DISCOVERY_ERRORS as e:
            logger.warning(f"Could not read work item types of project {project_info.name}: {e!r}")
            return []

        work_item_types = []
        for tfs_type in tfs_types:
            logger.debug(f"Getting TFS States for work item type '{tfs_type.name}'")
            work_item_types.append(WorkItemType(name=tfs_type.name, states=discover_states_of(tfs_type)))
        return work_item_types

    async def _get_iteration_paths(self, project_info: TfsProjectInfo) -> List[str]:
        logger.debug("Getting TFS iteration paths")

        if self._work_item_store is None:
            return []

        try:
            root = await self._work_item_store.get_iteration_root(project_info.name)
        except TfsNotFoundError:
            root = None
        except DISCOVERY_ERRORS as e:
            logger.warning(f"Could not read iteration paths of project {project_info.name}: {e!r}")
            return []

        if root is None:
            logger.warning(f"Project {project_info.name} has no iteration structure")
            return []

        return sorted(set(discover_iteration_paths(root)))
