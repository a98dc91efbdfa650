"""Nested query-string parsing.

Follows the common ``qs`` conventions used by stats dashboards:

- duplicate keys collect into an ordered list (``a=1&a=2``);
- bracket notation nests (``a[b]=c``) or builds lists (``a[]=1``, ``a[0]=1``);
- ``+`` decodes to a space, a key without ``=`` maps to ``""``;
- a key opening with a bracket (``[a]=1``) takes the bracket content as key;
- nesting beyond ``depth`` levels stays a literal key segment, and list
  indices above ``array_limit`` are treated as mapping keys;
- only the first ``parameter_limit`` ``&``-separated parts are read.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import unquote_plus

DEFAULT_DEPTH = 5
DEFAULT_ARRAY_LIMIT = 20
DEFAULT_PARAMETER_LIMIT = 1000

_CHILD = re.compile(r"\[([^\[\]]*)\]")


def parse_query(
    query_string: str,
    *,
    depth: int = DEFAULT_DEPTH,
    array_limit: int = DEFAULT_ARRAY_LIMIT,
    parameter_limit: int = DEFAULT_PARAMETER_LIMIT,
) -> dict[str, Any]:
    """Parse a raw query string into a mapping of str to str, list or dict.

    Raises:
        ValueError: If ``parameter_limit`` is not positive.
    """
    if parameter_limit < 1:
        raise ValueError("parameter_limit must be a positive integer")

    result: dict[Any, Any] = {}
    for part in query_string.split("&", parameter_limit)[:parameter_limit]:
        if not part:
            continue
        raw_key, sep, raw_value = part.partition("=")
        key = unquote_plus(raw_key)
        if not key:
            continue
        value = unquote_plus(raw_value) if sep else ""
        top, children = _split_key(key, depth)
        _merge(result, {top: _build(children, value, array_limit)})
    compacted: dict[str, Any] = _compact(result)
    return compacted


def _split_key(key: str, depth: int) -> tuple[str, list[str]]:
    """Split ``a[b][c]`` into ``("a", ["[b]", "[c]"])`` honouring ``depth``."""
    first = _CHILD.search(key)
    if first is None:
        return key, []

    if first.start() == 0:
        top = first.group(1) or "0"
        pos = first.end()
    else:
        top = key[: first.start()]
        pos = first.start()

    children: list[str] = []
    while len(children) < depth:
        match = _CHILD.match(key, pos)
        if match is None:
            break
        children.append(match.group(0))
        pos = match.end()

    if pos < len(key):
        children.append("[" + key[pos:] + "]")
    return top, children


def _build(children: list[str], value: Any, array_limit: int) -> Any:
    leaf: Any = value
    for segment in reversed(children):
        if segment == "[]":
            leaf = [leaf]
            continue
        clean = segment[1:-1]
        if clean.isdigit() and int(clean) <= array_limit:
            leaf = {int(clean): leaf}
        else:
            leaf = {clean: leaf}
    return leaf


def _as_indexed(items: list[Any]) -> dict[Any, Any]:
    return dict(enumerate(items))


def _is_indexed(mapping: dict[Any, Any]) -> bool:
    return bool(mapping) and all(isinstance(k, int) for k in mapping)


def _merge(target: Any, source: Any) -> Any:
    """Merge ``source`` into ``target`` and return the merged value.

    Containers in ``target`` are updated in place; ``source`` is always a
    freshly built value for a single parameter.
    """
    if isinstance(target, dict):
        if isinstance(source, dict):
            for key, value in source.items():
                target[key] = _merge(target[key], value) if key in target else value
            return target
        if isinstance(source, list):
            offset = _next_index(target)
            for i, value in enumerate(source):
                target[offset + i] = value
            return target
        return [target, source]
    if isinstance(target, list):
        if isinstance(source, list):
            target.extend(source)
            return target
        if isinstance(source, dict):
            return _merge(_as_indexed(target), source)
        target.append(source)
        return target
    if isinstance(source, list):
        return [target, *source]
    if isinstance(source, dict) and _is_indexed(source):
        return [target, *(source[k] for k in sorted(source))]
    return [target, source]


def _next_index(mapping: dict[Any, Any]) -> int:
    indices = [k for k in mapping if isinstance(k, int)]
    return max(indices) + 1 if indices else 0


def _compact(value: Any) -> Any:
    """Turn mappings keyed only by list indices into ordered lists."""
    if isinstance(value, list):
        return [_compact(v) for v in value]
    if not isinstance(value, dict):
        return value
    if _is_indexed(value):
        return [_compact(value[k]) for k in sorted(value)]
    return {str(k): _compact(v) for k, v in value.items()}
