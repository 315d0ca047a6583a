"""Client for the authoritative mutation API."""

from __future__ import annotations

from ..config.policies import WritePolicy
from ..entities import FolderNode
from ..utils.logging import get_logger
from ..utils.paths import ROOT_PATH, is_root
from .discovery import DiscoveryClient
from .errors import NodeCreationError, RemoteApiError
from .models import (
    CreateFolderInput,
    CreateFolderVariables,
    PublishFolderVariables,
    TreeInput,
    create_folder_operation,
    publish_folder_operation,
)
from .transport import GraphQLTransport


class WriteClient:
    """Create and publish folders.

    The mutation API addresses parents by id while the rest of the importer
    works with paths; parent paths are translated through the discovery
    client's exact path lookup.
    """

    def __init__(
        self,
        transport: GraphQLTransport,
        discovery: DiscoveryClient,
        *,
        tenant_id: str,
        policy: WritePolicy | None = None,
    ) -> None:
        self._transport = transport
        self._discovery = discovery
        self._tenant_id = tenant_id
        self._policy = policy or WritePolicy()
        self._create = create_folder_operation(
            language=self._policy.language,
            disable_component_validation=self._policy.disable_component_validation,
        )
        self._publish = publish_folder_operation()
        self._logger = get_logger(component="writer")

    def resolve_parent_id(self, parent_path: str) -> str | None:
        node = self._discovery.find_node_by_path(parent_path)
        if node is None:
            return None
        return node.id

    def create_node(self, name: str, parent_path: str, shape: str) -> FolderNode | None:
        """Create ``name`` below ``parent_path`` and publish it.

        Returns ``None`` when the parent cannot be resolved to an id. Raises
        :class:`NodeCreationError` when the create mutation fails. A failed
        publish is logged and leaves the folder created but unpublished.
        """

        tree: TreeInput | None = None
        if not is_root(parent_path):
            parent_id = self.resolve_parent_id(parent_path)
            if not parent_id:
                self._logger.error("Could not resolve parent id", name=name, parent_path=parent_path)
                return None
            tree = TreeInput(parent_id=parent_id)

        variables = CreateFolderVariables(
            input=CreateFolderInput(
                name=name,
                shape_identifier=shape,
                tenant_id=self._tenant_id,
                tree=tree,
            )
        )
        try:
            result = self._transport.run(self._create, variables)
        except RemoteApiError as exc:
            self._logger.error(
                "Failed to create folder",
                name=name,
                parent_path=parent_path,
                shape=shape,
                error=str(exc),
            )
            raise NodeCreationError(
                f"Failed to create folder {name!r} under {parent_path}: {exc}",
                api=exc.api,
                operation=exc.operation,
            ) from exc

        created = result.folder.create
        self._logger.info("Created folder", name=name, folder_id=created.id, parent_path=parent_path)
        self.publish_node(created.id)
        return FolderNode(
            id=created.id,
            name=created.name or name,
            shape=shape,
            parent_path=parent_path if not is_root(parent_path) else ROOT_PATH,
        )

    def publish_node(self, node_id: str) -> bool:
        """Publish ``node_id`` in every configured language; stop at the first failure."""

        for language in self._policy.publish_languages:
            try:
                self._transport.run(self._publish, PublishFolderVariables(id=node_id, language=language))
            except RemoteApiError as exc:
                self._logger.error(
                    "Failed to publish folder",
                    folder_id=node_id,
                    language=language,
                    error=str(exc),
                )
                return False
        self._logger.info("Published folder", folder_id=node_id, languages=self._policy.publish_languages)
        return True


__all__ = ["WriteClient"]
