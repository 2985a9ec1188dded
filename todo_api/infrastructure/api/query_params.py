"""Rebuild structured query parameters from exploded bracket notation.

``filter[order][0]=title DESC&filter[limit]=2`` becomes
``{"order": ["title DESC"], "limit": "2"}``; objects whose keys are all
indexes turn into lists. Leaf values stay strings; FilterParser coerces
them by field type.
"""

from __future__ import annotations

import re
from typing import Any

from starlette.datastructures import QueryParams

from todo_api.application.filter_parser import MAX_DEPTH
from todo_api.domain.errors import InvalidFilterError

_PATH = re.compile(r"(?:\[[^\[\]]*\])+")
_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def read_exploded_param(params: QueryParams, name: str) -> dict[str, Any] | None:
    """Collect ``name[...]`` parameters into a nested object, or None if absent."""
    root: dict[str, Any] = {}
    for key, value in params.multi_items():
        if not key.startswith(f"{name}["):
            continue
        suffix = key[len(name):]
        if not _PATH.fullmatch(suffix):
            raise InvalidFilterError(name, f'Malformed query parameter "{key}".', key)
        path = _SEGMENT.findall(suffix)
        if len(path) > MAX_DEPTH:
            raise InvalidFilterError(name, f"Nesting deeper than {MAX_DEPTH} levels.", key)
        _assign(root, path, value, name)
    return _listify(root) if root else None


def _assign(root: dict[str, Any], path: list[str], value: str, name: str) -> None:
    node = root
    for segment in path[:-1]:
        segment = segment or str(len(node))
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise InvalidFilterError(name, f'Conflicting values for "{segment}".', segment)
        node = child

    leaf = path[-1] or str(len(node))
    if leaf not in node:
        node[leaf] = value
    elif isinstance(node[leaf], list):
        node[leaf].append(value)
    elif isinstance(node[leaf], str):
        node[leaf] = [node[leaf], value]
    else:
        raise InvalidFilterError(name, f'Conflicting values for "{leaf}".', leaf)


def _is_index(key: str) -> bool:
    return key.isascii() and key.isdecimal()


def _listify(value: Any) -> Any:
    if isinstance(value, list):
        return [_listify(v) for v in value]
    if not isinstance(value, dict):
        return value
    if value and all(_is_index(k) for k in value):
        return [_listify(value[k]) for k in sorted(value, key=int)]
    return {k: _listify(v) for k, v in value.items()}
