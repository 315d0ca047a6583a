"""Read-only client for the eventually-consistent search index."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..config.policies import DiscoveryPolicy
from ..entities import FolderNode
from ..utils.logging import get_logger
from ..utils.paths import is_root, is_within, looks_like_path
from .errors import RemoteApiError
from .models import (
    FolderSearchVariables,
    PathLookupVariables,
    SearchHit,
    TermSearchVariables,
    folder_search_operation,
    path_lookup_operation,
    term_search_operation,
)
from .transport import GraphQLTransport

_SearchKey = Tuple[str, str, Optional[str]]


class DiscoveryClient:
    """Resolve names and paths to existing folders.

    Failures never propagate: a transport or protocol error is logged and
    reported as "not found". Callers therefore cannot tell an absent folder
    from a search that temporarily failed.

    When several hits match, the first one in the order returned by the index
    wins. The index defines no ranking, so the choice is not guaranteed to be
    stable between calls.
    """

    def __init__(self, transport: GraphQLTransport, *, policy: DiscoveryPolicy | None = None) -> None:
        self._transport = transport
        self._policy = policy or DiscoveryPolicy()
        self._suffix = re.compile(self._policy.id_suffix_pattern)
        self._search = folder_search_operation(
            language=self._policy.language,
            limit=self._policy.search_limit,
        )
        self._path_lookup = path_lookup_operation()
        self._term_search = term_search_operation(
            language=self._policy.language,
            limit=self._policy.term_search_limit,
        )
        self._node_cache: Dict[_SearchKey, FolderNode] = {}
        self._path_cache: Dict[str, str] = {}
        self._logger = get_logger(component="discovery")

    def clean_id(self, raw_id: str) -> str:
        """Strip the locale/publication suffix so the id can be used as a parent reference."""

        return self._suffix.sub("", raw_id)

    def _to_node(self, hit: SearchHit) -> FolderNode:
        return FolderNode(
            id=self.clean_id(hit.id),
            raw_id=hit.id,
            name=hit.name,
            shape=hit.shape,
            path=hit.path,
        )

    def find_node(self, name: str, shape: str, parent_path: str | None = None) -> FolderNode | None:
        """Find a folder by exact name and shape, optionally scoped below ``parent_path``."""

        key: _SearchKey = (name, shape, parent_path)
        cached = self._node_cache.get(key)
        if cached is not None:
            return cached

        try:
            result = self._transport.run(self._search, FolderSearchVariables(name=name, shape=shape))
        except RemoteApiError as exc:
            self._logger.error(
                "Discovery search failed",
                name=name,
                shape=shape,
                parent_path=parent_path,
                error=str(exc),
            )
            return None

        hits = result.search.hits
        if not is_root(parent_path):
            hits = self._scope_hits(hits, parent_path)
        if not hits:
            self._logger.debug("Folder not found", name=name, shape=shape, parent_path=parent_path)
            return None

        node = self._to_node(hits[0])
        if len(hits) > 1:
            self._logger.debug(
                "Multiple folders matched; using first hit",
                name=name,
                shape=shape,
                hits=len(hits),
                chosen=node.path,
            )
        self._logger.info("Found folder via discovery", name=name, shape=shape, path=node.path)
        self._node_cache[key] = node
        return node

    def _scope_hits(self, hits: List[SearchHit], parent_path: str) -> List[SearchHit]:
        """Keep hits below ``parent_path``; well-formed paths sort before malformed ones.

        A hit whose ``path`` holds a raw identifier is placed by looking that
        identifier up. It is kept with its raw ``path`` untouched so the caller
        can flag the anomaly, and it is also kept when the lookup yields nothing.
        """

        scoped = [hit for hit in hits if looks_like_path(hit.path) and is_within(hit.path, parent_path)]
        for hit in hits:
            if not hit.path or looks_like_path(hit.path):
                continue
            located = self.resolve_path_by_id(hit.id)
            if located is None or not looks_like_path(located):
                self._logger.warning(
                    "Keeping search hit with malformed path that could not be placed",
                    name=hit.name,
                    returned=hit.path,
                    parent_path=parent_path,
                )
                scoped.append(hit)
            elif is_within(located, parent_path):
                scoped.append(hit)
        return scoped

    def find_node_by_path(self, path: str) -> FolderNode | None:
        """Look up the folder at exactly ``path``."""

        try:
            result = self._transport.run(self._path_lookup, PathLookupVariables(path=path))
        except RemoteApiError as exc:
            self._logger.error("Discovery path lookup failed", path=path, error=str(exc))
            return None
        hits = result.search.hits
        if not hits:
            return None
        return self._to_node(hits[0])

    def resolve_path_by_id(self, node_id: str) -> str | None:
        """Reverse lookup from an identifier to its hierarchical path."""

        cached = self._path_cache.get(node_id)
        if cached is not None:
            return cached
        try:
            result = self._transport.run(self._path_lookup, PathLookupVariables(path=node_id))
        except RemoteApiError as exc:
            self._logger.error("Discovery id lookup failed", node_id=node_id, error=str(exc))
            return None
        hits = result.search.hits
        path = hits[0].path if hits else None
        if path is not None:
            self._path_cache[node_id] = path
        return path

    def search_by_term(self, term: str, shape: str | None = None) -> List[FolderNode]:
        """Free-text search; uncached and not restricted to exact names."""

        try:
            result = self._transport.run(self._term_search, TermSearchVariables(term=term, shape=shape))
        except RemoteApiError as exc:
            self._logger.error("Discovery term search failed", term=term, shape=shape, error=str(exc))
            return []
        nodes = [self._to_node(hit) for hit in result.search.hits]
        self._logger.info("Discovery term search completed", term=term, shape=shape, hits=len(nodes))
        return nodes

    def clear_cache(self) -> None:
        self._node_cache.clear()
        self._path_cache.clear()
        self._logger.info("Discovery cache cleared")


__all__ = ["DiscoveryClient"]
