"""Parsed form of a translation YAML file.

Rails i18n files look like:

en:
  tasks:
    form:
      title: "Task Details"

PyYAML hands back plain Python objects (dicts, lists, strings, booleans, dates
and so on). They are converted once, at load time, into a small tree of
MappingNode and ScalarNode so the flattening code only ever deals with those
two shapes.
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, Union

import yaml

from .errors import TranslationParseError


@dataclass(frozen=True)
class ScalarNode:
    value: str


@dataclass(frozen=True)
class MappingNode:
    children: Dict[str, 'TranslationNode'] = field(default_factory=dict)


TranslationNode = Union[MappingNode, ScalarNode]


def scalar_to_str(value) -> str:
    """Convert a YAML scalar (or sequence) to the string shown to the user."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(scalar_to_str(item) for item in value) + "]"
    if isinstance(value, dict):
        # Only reachable for mappings nested inside sequences
        return "{" + ", ".join(f"{scalar_to_str(k)}: {scalar_to_str(v)}" for k, v in value.items()) + "}"
    return str(value)


def to_node(data) -> TranslationNode:
    if isinstance(data, dict):
        return MappingNode({scalar_to_str(key): to_node(value) for key, value in data.items()})
    return ScalarNode(scalar_to_str(data))


def parse_document(text: str, file_path: str = "<string>") -> TranslationNode:
    """Parse YAML text into a translation tree.

    Args:
        text: YAML document content
        file_path: Used in the error message only

    Returns:
        TranslationNode: MappingNode for a regular translation file. An empty
        document yields an empty MappingNode.

    Raises:
        TranslationParseError: If the text is not valid YAML
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TranslationParseError(file_path, e) from e
    if data is None:
        return MappingNode()
    return to_node(data)


def load_document(file_path: str) -> TranslationNode:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TranslationParseError(file_path, e) from e
    return parse_document(text, file_path)
