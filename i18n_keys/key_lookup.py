from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from utils.config import ConfigManager
from utils.logging_setup import get_logger
from utils.project_detector import DEFAULT_ROOT_MARKERS, ProjectDetector, default_project_name

from . import key_extractor
from .insertion_formatter import DEFAULT_NAMESPACE, QuoteStyle, format_insertion, insert_at
from .key_entry import DEFAULT_SEPARATOR, KeyEntry, filter_entries
from .project_cache import ProjectCache

logger = get_logger("key_lookup")


@dataclass
class LookupSettings:
    locales_dir: str = key_extractor.DEFAULT_LOCALES_DIR
    file_pattern: str = key_extractor.DEFAULT_FILE_PATTERN
    separator: str = DEFAULT_SEPARATOR
    quote_style: QuoteStyle = QuoteStyle.SINGLE
    namespace: str = DEFAULT_NAMESPACE
    project_root_markers: tuple = DEFAULT_ROOT_MARKERS
    project_root_resolver: Optional[Callable[[str], str]] = field(default=None, repr=False)
    project_name_resolver: Callable[[str], str] = field(default=default_project_name, repr=False)

    def __post_init__(self):
        self.quote_style = QuoteStyle.from_config(self.quote_style)
        self.project_root_markers = tuple(self.project_root_markers)
        if self.project_root_resolver is None:
            markers = self.project_root_markers
            self.project_root_resolver = lambda path: ProjectDetector.find_project_root(path, markers)

    @staticmethod
    def from_config(config: ConfigManager, **overrides) -> 'LookupSettings':
        values = dict(
            locales_dir=config.get("lookup.locales_dir", key_extractor.DEFAULT_LOCALES_DIR),
            file_pattern=config.get("lookup.file_pattern", key_extractor.DEFAULT_FILE_PATTERN),
            separator=config.get("lookup.separator", DEFAULT_SEPARATOR),
            quote_style=config.get("lookup.quote_style", "single"),
            namespace=config.get("lookup.namespace", DEFAULT_NAMESPACE),
            project_root_markers=config.get("lookup.project_root_markers", DEFAULT_ROOT_MARKERS),
        )
        values.update(overrides)
        return LookupSettings(**values)


class KeyLookup:
    """Answers key lookups for a project, backed by the project cache.

    A lookup is served from the cache when possible; a miss runs a full
    extraction of the project's translation files and seeds the cache with it.
    Saving a translation file patches the cached keys of its project.
    """

    def __init__(self, settings: Optional[LookupSettings] = None, cache: Optional[ProjectCache] = None):
        self.settings = settings or LookupSettings()
        self.cache = cache if cache is not None else ProjectCache(separator=self.settings.separator)

    def resolve_project(self, path: str) -> Tuple[str, str]:
        """Get the project root and project identifier for a path."""
        project_root = self.settings.project_root_resolver(path)
        project_id = self.settings.project_name_resolver(project_root)
        return project_root, project_id

    def refresh(self, path: str, is_cancelled: Optional[Callable[[], bool]] = None) -> List[KeyEntry]:
        """Re-extract every translation file of the project and replace its cached keys.

        Raises:
            RefreshCancelled: If is_cancelled returned True. The cache is left as it was.
        """
        project_root, project_id = self.resolve_project(path)
        if not ProjectDetector.is_rails_project(project_root):
            logger.debug(f"{project_root} does not look like a Rails project")
        entries = key_extractor.extract_all(
            project_root,
            self.settings.locales_dir,
            self.settings.file_pattern,
            separator=self.settings.separator,
            is_cancelled=is_cancelled,
        )
        return self.cache.refresh_all(project_id, entries)

    def lookup(self, path: str, force_refresh: bool = False,
               is_cancelled: Optional[Callable[[], bool]] = None) -> List[KeyEntry]:
        """Get the keys of the project containing path.

        Args:
            path: Any file or directory inside the project
            force_refresh: Skip the cache and run a full extraction
            is_cancelled: Polled between files during a full extraction

        Returns:
            list: Key entries of the project
        """
        _, project_id = self.resolve_project(path)
        if not force_refresh and self.cache.has(project_id):
            return self.cache.get(project_id)
        if not force_refresh:
            logger.info(f"No cached keys for {project_id}, scanning translation files")
        return self.refresh(path, is_cancelled=is_cancelled)

    def candidates(self, path: str, query: str = "", force_refresh: bool = False,
                   is_cancelled: Optional[Callable[[], bool]] = None) -> List[str]:
        entries = self.lookup(path, force_refresh=force_refresh, is_cancelled=is_cancelled)
        return [entry.render(self.settings.separator)
                for entry in filter_entries(entries, query, self.settings.separator)]

    def file_saved(self, file_path: str) -> bool:
        """Update the cache after a file was saved.

        Only translation files of a project that already has cached keys are
        handled. Without cached keys, or when the saved file does not parse,
        nothing changes.

        Returns:
            bool: True if the cache was updated
        """
        project_root, project_id = self.resolve_project(file_path)
        if not self._is_translation_file(file_path, project_root):
            # The resolved root may be a fallback below the locales directory
            implied_root = key_extractor.locales_project_root(file_path, self.settings.locales_dir)
            if implied_root is None or not self._is_translation_file(file_path, implied_root):
                logger.debug(f"{file_path} is not a translation file of {project_root}")
                return False
            project_root = implied_root
            project_id = self.settings.project_name_resolver(project_root)
        if not self.cache.has(project_id):
            logger.info(f"No cached keys for {project_id} yet, nothing to update for {file_path}")
            return False
        file_entries = key_extractor.extract_file(file_path)
        if file_entries is None:
            logger.info(f"Could not parse {file_path}, cached keys for {project_id} left unchanged")
            return False
        self.cache.refresh_file(project_id, file_entries)
        logger.info(f"Updated cached keys for {project_id} from {file_path}")
        return True

    def _is_translation_file(self, file_path: str, project_root: str) -> bool:
        return key_extractor.is_translation_file(file_path, project_root,
                                                 self.settings.locales_dir, self.settings.file_pattern)

    def format(self, display: str, file_path: str):
        project_root, _ = self.resolve_project(file_path)
        return format_insertion(
            display,
            file_path,
            project_root,
            quote_style=self.settings.quote_style,
            namespace=self.settings.namespace,
            separator=self.settings.separator,
        )

    def insert(self, display: str, file_path: str, buffer_text: str, offset: int) -> Tuple[str, int]:
        """Insert the t(...) call for a selected entry into buffer text at offset.

        Returns:
            tuple: New buffer text and the new cursor offset
        """
        return insert_at(buffer_text, offset, self.format(display, file_path))
