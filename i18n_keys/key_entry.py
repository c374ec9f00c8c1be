import re
from dataclasses import dataclass
from typing import Iterable, List

DEFAULT_SEPARATOR = ":  "

# %{name} or %{user_name}
INTERPOLATION_PATTERN = re.compile(r"%\{[a-z]+(_[a-z]+)?\}")


def has_interpolation(text: str) -> bool:
    """Check whether a value (or a rendered entry) contains a placeholder."""
    return bool(text) and INTERPOLATION_PATTERN.search(text) is not None


def first_segment(path: str) -> str:
    return path.lstrip(".").split(".", 1)[0]


@dataclass(frozen=True)
class KeyEntry:
    """One flattened translation key.

    Attributes:
        path: Dotted key without the locale root (e.g. "errors.not_found")
        value: Leaf value in string form
        has_interpolation: True when the value contains a %{placeholder}
    """
    path: str
    value: str
    has_interpolation: bool = False

    @classmethod
    def create(cls, path: str, value: str) -> 'KeyEntry':
        return cls(path, value, has_interpolation(value))

    def render(self, separator: str = DEFAULT_SEPARATOR) -> str:
        return f"{self.path}{separator}{self.value}"

    def to_dict(self) -> dict:
        return {"path": self.path, "value": self.value, "has_interpolation": self.has_interpolation}

    @classmethod
    def from_dict(cls, _dict: dict) -> 'KeyEntry':
        value = str(_dict.get("value", ""))
        return cls(
            path=str(_dict["path"]),
            value=value,
            has_interpolation=bool(_dict.get("has_interpolation", has_interpolation(value))),
        )


def dedupe_entries(entries: Iterable[KeyEntry], separator: str = DEFAULT_SEPARATOR) -> List[KeyEntry]:
    """Drop entries whose rendered form was already seen, keeping first-seen order."""
    seen = set()
    result = []
    for entry in entries:
        rendered = entry.render(separator)
        if rendered in seen:
            continue
        seen.add(rendered)
        result.append(entry)
    return result


def filter_entries(entries: Iterable[KeyEntry], query: str = "",
                   separator: str = DEFAULT_SEPARATOR) -> List[KeyEntry]:
    """Match entries the way a completion list narrows its candidates.

    Every whitespace-separated term of the query must appear in the rendered
    entry, case-insensitively. An empty query matches everything.

    Args:
        entries: Entries to filter
        query: Search terms typed by the user
        separator: Separator used to render entries

    Returns:
        list: Matching entries in their original order
    """
    terms = [term.lower() for term in (query or "").split()]
    if not terms:
        return list(entries)
    matches = []
    for entry in entries:
        rendered = entry.render(separator).lower()
        if all(term in rendered for term in terms):
            matches.append(entry)
    return matches
