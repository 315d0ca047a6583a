"""Get-or-create resolution of the brand > model line > sub-model line tree."""

from __future__ import annotations

import time

from ..config.policies import ShapePolicy
from ..entities import (
    LEVELS,
    FolderNode,
    HierarchyResult,
    ImportRecord,
    Level,
    LevelResult,
    Outcome,
    PathCache,
    PathSource,
)
from ..remote.discovery import DiscoveryClient
from ..remote.errors import NodeCreationError
from ..remote.writer import WriteClient
from ..utils.logging import get_logger
from ..utils.paths import ROOT_PATH, is_root, is_within, join_path, looks_like_path
from ..utils.slug import slugify

_LOGGER = get_logger(module=__name__)


class HierarchyResolver:
    """Ensure each level of a record exists, creating folders only when discovery misses.

    Every level runs the same protocol under the path resolved for the level
    above it:

    1. a :class:`PathCache` hit short-circuits all remote calls;
    2. a discovery hit under the parent is accepted as existing;
    3. otherwise the folder is created through the write API;
    4. after a create the authoritative path is re-queried once the settling
       delay has passed, falling back to the slug-derived path.

    Discovery paths that do not start at the root marker are raw identifiers
    returned in the wrong field; they are replaced with the slug-derived path.
    """

    def __init__(
        self,
        discovery: DiscoveryClient,
        writer: WriteClient,
        *,
        shapes: ShapePolicy | None = None,
        settle_delay_seconds: float = 1.0,
        verify_created_paths: bool = True,
    ) -> None:
        self._discovery = discovery
        self._writer = writer
        self._shapes = shapes or ShapePolicy()
        self._settle_delay_seconds = settle_delay_seconds
        self._verify_created_paths = verify_created_paths

    def shape_for(self, level: Level) -> str:
        return getattr(self._shapes, level.value)

    # ------------------------------------------------------------------
    # Record level
    # ------------------------------------------------------------------
    def ensure_hierarchy(self, record: ImportRecord, cache: PathCache) -> HierarchyResult:
        """Walk the three levels of ``record``; stop at the first failing level."""

        result = HierarchyResult()
        parent_path = ROOT_PATH
        for level in LEVELS:
            level_result = self.ensure(level, record.name_for(level), parent_path, cache)
            result.levels.append(level_result)
            if not level_result.succeeded:
                _LOGGER.error(
                    "Aborting record after failed level",
                    row=record.row_number,
                    level=level.value,
                    name=level_result.name,
                    error=level_result.error,
                )
                break
            parent_path = level_result.path
        return result

    # ------------------------------------------------------------------
    # Single level
    # ------------------------------------------------------------------
    def ensure(self, level: Level, name: str, parent_path: str, cache: PathCache) -> LevelResult:
        shape = self.shape_for(level)

        if not is_root(parent_path) and not looks_like_path(parent_path):
            resolved = self._resolve_identifier(parent_path, level, name)
            if resolved is None:
                return LevelResult(
                    level=level,
                    name=name,
                    outcome=Outcome.FAILED,
                    error=f"Parent reference {parent_path!r} is not a path and could not be resolved",
                )
            parent_path = resolved

        cached = cache.get(level, name, parent_path)
        if cached is not None:
            _LOGGER.debug("Path cache hit", level=level.value, name=name, path=cached)
            return LevelResult(
                level=level,
                name=name,
                outcome=Outcome.CACHED,
                path=cached,
                path_source=PathSource.CACHE,
            )

        expected_path = join_path(parent_path, slugify(name))
        scope = None if is_root(parent_path) else parent_path

        existing = self._discovery.find_node(name, shape, scope)
        accepted = self._accept(existing, level, name, parent_path, expected_path)
        if accepted is not None:
            path, anomaly = accepted
            cache.store(level, name, parent_path, path)
            return LevelResult(
                level=level,
                name=name,
                outcome=Outcome.EXISTS,
                path=path,
                path_source=PathSource.DERIVED if anomaly else PathSource.DISCOVERY,
                anomaly=anomaly,
            )

        _LOGGER.info("Creating folder", level=level.value, name=name, parent_path=parent_path)
        try:
            created = self._writer.create_node(name, parent_path, shape)
        except NodeCreationError as exc:
            return LevelResult(level=level, name=name, outcome=Outcome.FAILED, error=str(exc))
        if created is None:
            return LevelResult(
                level=level,
                name=name,
                outcome=Outcome.FAILED,
                error=f"Could not create {level.label} {name!r} under {parent_path}",
            )

        path, source, anomaly = self._confirm_created_path(created, level, name, scope, expected_path)
        cache.store(level, name, parent_path, path)
        _LOGGER.debug(
            "Resolved created folder path",
            level=level.value,
            name=name,
            folder_id=created.id,
            path=path,
            source=source.value,
        )
        return LevelResult(
            level=level,
            name=name,
            outcome=Outcome.CREATED,
            path=path,
            path_source=source,
            anomaly=anomaly,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _accept(
        self,
        node: FolderNode | None,
        level: Level,
        name: str,
        parent_path: str,
        expected_path: str,
    ) -> tuple[str, bool] | None:
        """Return ``(path, anomaly)`` for an acceptable discovery hit, else ``None``."""

        if node is None or not node.path:
            return None
        if not looks_like_path(node.path):
            self._warn_malformed(node.path, level, name, expected_path)
            return expected_path, True
        if is_root(parent_path) or is_within(node.path, parent_path):
            return node.path, False
        _LOGGER.debug(
            "Ignoring discovery hit outside parent",
            level=level.value,
            name=name,
            parent_path=parent_path,
            path=node.path,
        )
        return None

    def _confirm_created_path(
        self,
        created: FolderNode,
        level: Level,
        name: str,
        scope: str | None,
        expected_path: str,
    ) -> tuple[str, PathSource, bool]:
        if not self._verify_created_paths:
            return expected_path, PathSource.DERIVED, False

        time.sleep(self._settle_delay_seconds)
        confirmed = self._discovery.find_node(name, self.shape_for(level), scope)
        if confirmed is None or not confirmed.path:
            _LOGGER.warning(
                "Discovery has not caught up with created folder; using derived path",
                level=level.value,
                name=name,
                folder_id=created.id,
                path=expected_path,
            )
            return expected_path, PathSource.DERIVED, False
        if not looks_like_path(confirmed.path):
            self._warn_malformed(confirmed.path, level, name, expected_path)
            return expected_path, PathSource.DERIVED, True
        return confirmed.path, PathSource.DISCOVERY, False

    def _resolve_identifier(self, reference: str, level: Level, name: str) -> str | None:
        _LOGGER.warning(
            "Parent reference is an identifier instead of a path",
            level=level.value,
            name=name,
            given=reference,
        )
        resolved = self._discovery.resolve_path_by_id(reference)
        if resolved is None or not looks_like_path(resolved):
            _LOGGER.error("Failed to resolve parent identifier to a path", given=reference)
            return None
        _LOGGER.info("Resolved parent identifier", given=reference, path=resolved)
        return resolved

    @staticmethod
    def _warn_malformed(value: str, level: Level, name: str, expected_path: str) -> None:
        _LOGGER.warning(
            "Discovery returned a malformed path; using derived path",
            level=level.value,
            name=name,
            returned=value,
            path=expected_path,
        )


__all__ = ["HierarchyResolver"]
