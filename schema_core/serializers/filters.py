"""
Include/exclude filters.

Filters are given either as a collection of paths (a str/int segment or a
tuple of segments) or as a nested dict. Both are normalized into a nested
dict whose leaves are ``True``, meaning "this whole value". The ``__all__``
key applies to every key or index at its level.
"""

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

ALL = "__all__"

Filter = Optional[Dict[Any, Union[bool, "Filter"]]]


def normalize_filter(value: Any) -> Filter:
    """
    Normalize a user-supplied include/exclude description.

    Args:
        value: None, a nested dict, or an iterable of paths

    Returns:
        Nested dict with ``True`` leaves, or None for "no filter"
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return {key: _normalize_value(sub) for key, sub in value.items()}
    if isinstance(value, (str, int)):
        value = [value]

    normalized: Dict[Any, Any] = {}
    for path in value:
        segments = path if isinstance(path, tuple) else (path,)
        _insert(normalized, segments)
    return normalized


def _normalize_value(sub: Any) -> Any:
    if isinstance(sub, (dict, set, frozenset, list, tuple)):
        return normalize_filter(sub)
    # True, Ellipsis and any other marker select the whole value
    return True


def _insert(node: Dict[Any, Any], segments: Tuple[Any, ...]) -> None:
    for segment in segments[:-1]:
        child = node.get(segment)
        if child is True:
            return
        if child is None:
            child = node[segment] = {}
        node = child
    node[segments[-1]] = True


def _merge(first: Any, second: Any) -> Any:
    if first is None:
        return second
    if second is None:
        return first
    if first is True or second is True:
        return True
    merged = dict(first)
    for key, sub in second.items():
        merged[key] = _merge(merged.get(key), sub)
    return merged


def _entry(filter_: Filter, key: Any) -> Any:
    if filter_ is None:
        return None
    try:
        specific = filter_.get(key)
    except TypeError:
        specific = None
    return _merge(specific, filter_.get(ALL))


def filter_item(key: Any, include: Filter, exclude: Filter) -> Tuple[bool, Filter, Filter]:
    """
    Decide whether one key or index is serialized.

    Exclusion wins over inclusion.

    Returns:
        ``(skip, next_include, next_exclude)``; the filters apply to the item
    """
    excluded = _entry(exclude, key)
    if excluded is True:
        return True, None, None

    next_include = None
    if include is not None:
        included = _entry(include, key)
        if included is None:
            return True, None, None
        if included is not True:
            next_include = included
    return False, next_include, excluded


def iter_filtered(items: Iterable[Any], include: Filter,
                  exclude: Filter) -> Iterator[Tuple[int, Any, Filter, Filter]]:
    """Yield ``(index, item, next_include, next_exclude)`` for items that pass."""
    for index, item in enumerate(items):
        skip, next_include, next_exclude = filter_item(index, include, exclude)
        if not skip:
            yield index, item, next_include, next_exclude
