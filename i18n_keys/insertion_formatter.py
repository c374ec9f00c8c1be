import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .key_entry import DEFAULT_SEPARATOR, has_interpolation

DEFAULT_NAMESPACE = "I18n"
ARGUMENT_SEPARATOR = ", "


class FileRole(Enum):
    VIEW = "view"
    HELPER = "helper"
    OTHER = "other"

    @property
    def uses_bare_call(self) -> bool:
        return self != FileRole.OTHER


class QuoteStyle(Enum):
    SINGLE = "'"
    DOUBLE = '"'

    @classmethod
    def from_config(cls, value) -> 'QuoteStyle':
        if isinstance(value, QuoteStyle):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("single", "'"):
            return cls.SINGLE
        if normalized in ("double", '"'):
            return cls.DOUBLE
        raise ValueError(f"Unknown quote style: {value}")


@dataclass(frozen=True)
class Insertion:
    """Snippet to insert and where the cursor ends up, relative to its start."""
    text: str
    cursor_offset: int


def _split_path(path: str) -> list:
    return [part for part in path.replace("\\", "/").split("/") if part not in ("", ".")]


def _path_segments(file_path: str, project_root: Optional[str] = None) -> list:
    """Path segments used to classify a file.

    Segments are taken relative to the project root when the root lies above
    the file's directory. A root that is the file's own directory (no root
    marker was found) says nothing about the file's role, so the whole path
    is used instead.
    """
    path = file_path
    if project_root:
        try:
            rel_path = os.path.relpath(file_path, project_root)
            if not rel_path.startswith("..") and len(_split_path(rel_path)) > 1:
                path = rel_path
        except ValueError:
            pass
    return _split_path(path)


def _last_directory_index(segments: list, names: tuple) -> Optional[int]:
    for index in range(len(segments) - 2, -1, -1):
        if segments[index] in names:
            return index
    return None


def file_role(file_path: str, project_root: Optional[str] = None) -> FileRole:
    segments = _path_segments(file_path, project_root)
    index = _last_directory_index(segments, ("views", "helpers"))
    if index is None:
        return FileRole.OTHER
    return FileRole.VIEW if segments[index] == "views" else FileRole.HELPER


def view_namespace(file_path: str, project_root: Optional[str] = None) -> Optional[str]:
    """Derive the controller/action namespace Rails uses for a view file.

    app/views/users/show.html.erb -> users.show
    app/views/admin/users/_form.html.erb -> admin.users.form

    Args:
        file_path: Path of the view file
        project_root: Project root, stripped from the path when it lies above
            the file's directory

    Returns:
        str: Dotted namespace, or None if the file is not under a views directory
    """
    segments = _path_segments(file_path, project_root)
    index = _last_directory_index(segments, ("views",))
    if index is None:
        return None
    after_views = segments[index + 1:]
    after_views = [segment[1:] if segment.startswith("_") else segment for segment in after_views]
    dotted = ".".join(after_views).split(".")
    namespace = ".".join(part for part in dotted[:-2] if part)
    return namespace or None


def strip_view_namespace(key: str, namespace: Optional[str]) -> str:
    if not namespace:
        return key
    prefix = namespace + "."
    if key.startswith(prefix) and len(key) > len(prefix):
        return key[len(prefix):]
    return key


def split_display(display: str, separator: str = DEFAULT_SEPARATOR) -> Tuple[str, str]:
    """Split a rendered entry into its key (without leading dot) and value."""
    if separator and separator in display:
        key, value = display.split(separator, 1)
    else:
        key, value = display, ""
    return key.strip().lstrip("."), value


def format_insertion(display: str, file_path: str, project_root: Optional[str] = None,
                     quote_style=QuoteStyle.SINGLE, namespace: str = DEFAULT_NAMESPACE,
                     separator: str = DEFAULT_SEPARATOR) -> Insertion:
    """Build the t(...) call to insert for a selected entry.

    Views and helpers get a bare t(...) call; in views the key part implied by
    the template location is removed. Any other file gets the namespace
    qualifier, e.g. I18n.t('errors.not_found'). When the value has a
    placeholder, ", " is placed before the closing parenthesis and the cursor
    is left after it so arguments can be typed right away.

    Args:
        display: Rendered entry as shown in the selection list
        file_path: Path of the file the call is inserted into
        project_root: Root directory of the project
        quote_style: QuoteStyle or its config name ("single"/"double")
        namespace: Qualifier used outside views and helpers
        separator: Separator between key and value in the rendered entry

    Returns:
        Insertion: The snippet and the cursor position within it
    """
    quote = QuoteStyle.from_config(quote_style).value
    key, value = split_display(display, separator)
    role = file_role(file_path, project_root)

    if role == FileRole.VIEW:
        key = strip_view_namespace(key, view_namespace(file_path, project_root))

    call = "t" if role.uses_bare_call else f"{namespace}.t"
    text = f"{call}({quote}{key}{quote})"
    if has_interpolation(value):
        text = text[:-1] + ARGUMENT_SEPARATOR + ")"
        return Insertion(text, len(text) - 1)
    return Insertion(text, len(text))


def insert_at(buffer_text: str, offset: int, insertion: Insertion) -> Tuple[str, int]:
    """Splice an insertion into buffer text.

    Returns:
        tuple: New buffer text and the new cursor offset
    """
    offset = max(0, min(offset, len(buffer_text)))
    new_text = buffer_text[:offset] + insertion.text + buffer_text[offset:]
    return new_text, offset + insertion.cursor_offset
