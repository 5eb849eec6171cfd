"""
Tolerant accessors over untyped JSON trees.

Event payloads arrive as nested dicts whose shape drifts between revisions.
These helpers walk a path and return None when any step is missing or has the
wrong type; they never raise on absent data.
"""

from __future__ import annotations

from typing import Any, Optional, Union

PathKey = Union[str, int]


def get_path(tree: Any, *path: PathKey) -> Any:
    """Walk ``path`` into ``tree``. Return None if any step is missing."""
    node = tree
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        if node is None:
            return None
    return node


def get_str(tree: Any, *path: PathKey) -> Optional[str]:
    """Return a non-empty string at ``path``, else None. Scalars are stringified."""
    value = get_path(tree, *path)
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        value = "true" if value else "false"
    text = str(value)
    return text or None


def get_int(tree: Any, *path: PathKey) -> Optional[int]:
    """Return an integer at ``path``. Numeric strings are accepted."""
    value = get_path(tree, *path)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def get_dict(tree: Any, *path: PathKey) -> Optional[dict[str, Any]]:
    value = get_path(tree, *path)
    return value if isinstance(value, dict) else None


def get_list(tree: Any, *path: PathKey) -> Optional[list[Any]]:
    value = get_path(tree, *path)
    return value if isinstance(value, list) else None


def has_path(tree: Any, *path: PathKey) -> bool:
    """True when every step of ``path`` exists (the leaf may be any non-null value)."""
    return get_path(tree, *path) is not None
