import os
import re
from pathlib import Path
from typing import Callable, List, Optional

from utils.logging_setup import get_logger

from .errors import RefreshCancelled, TranslationParseError
from .key_entry import DEFAULT_SEPARATOR, KeyEntry, dedupe_entries
from .translation_document import MappingNode, ScalarNode, TranslationNode, load_document

logger = get_logger("key_extractor")

DEFAULT_LOCALES_DIR = "config/locales"
DEFAULT_FILE_PATTERN = r"\.yml$"


def gather_translation_files(project_root: str, locales_dir: str = DEFAULT_LOCALES_DIR,
                             file_pattern: str = DEFAULT_FILE_PATTERN) -> List[str]:
    """Find every translation file under the locales directory of a project.

    Both Rails layouts are covered since the search is recursive:
    config/locales/en.yml, config/locales/devise.en.yml and
    config/locales/en/views/projects.yml.

    Args:
        project_root: Root directory of the project
        locales_dir: Locales directory, relative to the project root
        file_pattern: Regular expression searched in each file name

    Returns:
        list: Sorted file paths. Empty when the directory does not exist.
    """
    base_dir = os.path.join(project_root, locales_dir)
    if not os.path.isdir(base_dir):
        logger.debug(f"No locales directory at {base_dir}")
        return []

    pattern = re.compile(file_pattern)
    files = sorted(str(f) for f in Path(base_dir).rglob("*") if f.is_file() and pattern.search(f.name))
    logger.debug(f"Found {len(files)} translation files under {base_dir}")
    return files


def _is_within(path: str, directory: str) -> bool:
    try:
        return os.path.commonpath([path, directory]) == directory
    except ValueError:
        # Different drives
        return False


def is_translation_file(file_path: str, project_root: str, locales_dir: str = DEFAULT_LOCALES_DIR,
                        file_pattern: str = DEFAULT_FILE_PATTERN) -> bool:
    base_dir = os.path.abspath(os.path.join(project_root, locales_dir))
    file_abs = os.path.abspath(file_path)
    if not _is_within(file_abs, base_dir):
        return False
    return re.search(file_pattern, os.path.basename(file_abs)) is not None


def locales_project_root(file_path: str, locales_dir: str = DEFAULT_LOCALES_DIR) -> Optional[str]:
    """Get the project root implied by a file's place under a locales directory.

    config/locales/en/users.yml under /srv/shop gives /srv/shop. The nearest
    enclosing locales directory wins.

    Returns:
        str: The directory holding the locales directory, or None if the file
        is not inside one
    """
    file_abs = os.path.abspath(file_path)
    for parent in Path(file_abs).parents:
        base_dir = os.path.normpath(os.path.join(str(parent), locales_dir))
        if base_dir != file_abs and _is_within(file_abs, base_dir):
            return str(parent)
    return None


def _flatten_node(node: TranslationNode, prefix: str, entries: List[KeyEntry]):
    if isinstance(node, ScalarNode):
        entries.append(KeyEntry.create(prefix, node.value))
        return
    for key, child in node.children.items():
        if key == "":
            logger.debug(f"Skipping empty key under '{prefix}'")
            continue
        full_key = f"{prefix}.{key}" if prefix else key
        _flatten_node(child, full_key, entries)


def flatten_document(document: TranslationNode) -> List[KeyEntry]:
    """Flatten a translation tree into dotted key entries.

    The top level keys of a translation file are locale codes, so they are
    left out of every path: {en: {errors: {not_found: "Not found"}}} becomes
    a single entry "errors.not_found". Key order follows the document.
    """
    entries: List[KeyEntry] = []
    if not isinstance(document, MappingNode):
        return entries
    for locale, locale_node in document.children.items():
        if isinstance(locale_node, ScalarNode):
            logger.debug(f"Ignoring scalar value at locale root '{locale}'")
            continue
        _flatten_node(locale_node, "", entries)
    return entries


def extract_file(file_path: str) -> Optional[List[KeyEntry]]:
    """Parse and flatten one translation file.

    Returns:
        list: Entries of the file, or None if it could not be parsed
    """
    try:
        document = load_document(file_path)
    except TranslationParseError as e:
        logger.warning(f"Skipping translation file {file_path}: {e.reason}")
        return None
    entries = flatten_document(document)
    logger.debug(f"Extracted {len(entries)} keys from {file_path}")
    return entries


def extract_all(project_root: str, locales_dir: str = DEFAULT_LOCALES_DIR,
                file_pattern: str = DEFAULT_FILE_PATTERN,
                separator: str = DEFAULT_SEPARATOR,
                is_cancelled: Optional[Callable[[], bool]] = None) -> List[KeyEntry]:
    """Extract the keys of every translation file in a project.

    Files that fail to parse are skipped. The result is de-duplicated on the
    rendered form of each entry.

    Args:
        project_root: Root directory of the project
        locales_dir: Locales directory, relative to the project root
        file_pattern: Regular expression searched in each file name
        separator: Separator used for de-duplication
        is_cancelled: Polled before each file; a True result aborts the scan

    Raises:
        RefreshCancelled: If is_cancelled returned True
    """
    files = gather_translation_files(project_root, locales_dir, file_pattern)
    entries: List[KeyEntry] = []
    skipped = 0
    for file_path in files:
        if is_cancelled is not None and is_cancelled():
            logger.info(f"Refresh of {project_root} cancelled after {len(entries)} keys")
            raise RefreshCancelled(f"Refresh of {project_root} cancelled")
        file_entries = extract_file(file_path)
        if file_entries is None:
            skipped += 1
            continue
        entries.extend(file_entries)

    result = dedupe_entries(entries, separator)
    message = f"Extracted {len(result)} keys from {len(files) - skipped} files in {project_root}"
    if skipped > 0:
        message += f", skipped {skipped} unparseable files"
    logger.info(message)
    return result
