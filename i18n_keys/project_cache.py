from typing import Dict, Iterable, List, Optional

from utils.app_info_cache import AppInfoCache
from utils.logging_setup import get_logger

from .errors import CacheStoreError
from .key_entry import DEFAULT_SEPARATOR, KeyEntry, dedupe_entries, first_segment

logger = get_logger("project_cache")


class MemoryCacheStore:
    """Keeps the snapshot in memory only. Used for tests and throwaway runs."""

    def __init__(self, snapshot: Optional[dict] = None):
        self.snapshot = snapshot or {}
        self.save_count = 0

    def load(self) -> dict:
        return dict(self.snapshot)

    def save(self, mapping: dict):
        self.snapshot = dict(mapping)
        self.save_count += 1


class AppInfoCacheStore:
    """Persists project keys in the durable JSON store under a single info key."""
    PROJECT_KEYS = "project_keys"

    def __init__(self, app_info_cache: AppInfoCache):
        self.app_info_cache = app_info_cache

    def load(self) -> dict:
        snapshot = self.app_info_cache.get(AppInfoCacheStore.PROJECT_KEYS, {})
        if not isinstance(snapshot, dict):
            logger.warning(f"Ignoring malformed '{AppInfoCacheStore.PROJECT_KEYS}' entry in {self.app_info_cache.json_path}")
            return {}
        return snapshot

    def save(self, mapping: dict):
        previous = self.app_info_cache.get(AppInfoCacheStore.PROJECT_KEYS, {})
        self.app_info_cache.set(AppInfoCacheStore.PROJECT_KEYS, mapping)
        try:
            self.app_info_cache.store()
        except OSError as e:
            self.app_info_cache.set(AppInfoCacheStore.PROJECT_KEYS, previous)
            raise CacheStoreError(self.app_info_cache.json_path, e) from e


class ProjectCache:
    """Maps project identifiers to their most recently extracted keys.

    The previous snapshot of the store is restored on construction as is; projects
    or files that no longer exist are only corrected by the next refresh. Every
    mutation is written to the store before it takes effect.
    """

    def __init__(self, store=None, separator: str = DEFAULT_SEPARATOR):
        self._store = store if store is not None else MemoryCacheStore()
        self._separator = separator
        self._projects: Dict[str, List[KeyEntry]] = {}
        self._restore()

    def _restore(self):
        for project_id, raw_entries in self._store.load().items():
            try:
                self._projects[project_id] = [KeyEntry.from_dict(e) for e in raw_entries]
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Dropping unreadable cached keys for project {project_id}: {e}")
        if self._projects:
            logger.debug(f"Restored cached keys for {len(self._projects)} projects")

    def _commit(self, projects: Dict[str, List[KeyEntry]]):
        """Save a new state to the store, then adopt it. A failed save leaves the cache as it was."""
        self._store.save({
            project_id: [entry.to_dict() for entry in entries]
            for project_id, entries in projects.items()
        })
        self._projects = projects

    def has(self, project_id: str) -> bool:
        return project_id in self._projects

    def get(self, project_id: str) -> List[KeyEntry]:
        return list(self._projects.get(project_id, []))

    def project_ids(self) -> List[str]:
        return list(self._projects.keys())

    def refresh_all(self, project_id: str, entries: Iterable[KeyEntry]) -> List[KeyEntry]:
        projects = dict(self._projects)
        projects[project_id] = list(entries)
        self._commit(projects)
        logger.debug(f"Replaced cached keys for {project_id} ({len(projects[project_id])} keys)")
        return self.get(project_id)

    def refresh_file(self, project_id: str, file_entries: Iterable[KeyEntry]) -> List[KeyEntry]:
        """Patch the cached keys of a project with the keys of one changed file.

        Cached entries sharing a first path segment with any of the new entries
        are dropped, since the changed file is the one that produced them. The
        new entries are then appended and the result is de-duplicated.

        Args:
            project_id: Project identifier
            file_entries: Entries extracted from the changed file

        Returns:
            list: The updated entries of the project

        Raises:
            CacheStoreError: If the store could not be written. The cached keys are unchanged.
        """
        file_entries = list(file_entries)
        namespaces = {first_segment(entry.path) for entry in file_entries}
        current = self._projects.get(project_id, [])
        kept = [entry for entry in current if first_segment(entry.path) not in namespaces]
        projects = dict(self._projects)
        projects[project_id] = dedupe_entries(kept + file_entries, self._separator)
        self._commit(projects)
        logger.debug(f"Patched cached keys for {project_id}: dropped {len(current) - len(kept)}, "
                     f"added {len(file_entries)}, now {len(projects[project_id])}")
        return self.get(project_id)

    def clear(self, project_id: Optional[str] = None):
        projects = {}
        if project_id is not None:
            projects = dict(self._projects)
            projects.pop(project_id, None)
        self._commit(projects)
