"""
Field lookup keys: field name, alias, alias path and alias choices.
"""

from typing import Any, List, Optional, Tuple, Union

from .inputs import MISSING, FieldSource


Path = Tuple[Union[str, int], ...]


def normalize_alias(alias: Any) -> List[Path]:
    """
    Turn an alias description into a list of lookup paths.

    ``"a"`` is one single-segment path, ``["a", 0]`` is one path and
    ``[["a"], ["b", 1]]`` is a list of alternative paths.
    """
    if alias is None:
        return []
    if isinstance(alias, str):
        return [(alias,)]
    if alias and all(isinstance(item, (list, tuple)) for item in alias):
        return [tuple(item) for item in alias]
    return [tuple(alias)]


class LookupKey:
    """
    Where a field is read from in a fields input.

    Paths are tried in order and the first one that resolves wins. The field
    name itself is tried last when ``populate_by_name`` is set, and is the
    only path when no alias is configured.
    """

    __slots__ = ("name", "paths")

    def __init__(self, name: str, alias: Any = None, populate_by_name: bool = False):
        self.name = name
        self.paths: List[Path] = normalize_alias(alias)
        if not self.paths or (populate_by_name and (name,) not in self.paths):
            self.paths.append((name,))

    @property
    def error_loc(self) -> Path:
        """Location reported when the field is missing."""
        return self.paths[0]

    @property
    def first_keys(self) -> List[Any]:
        return [path[0] for path in self.paths]

    def find(self, source: FieldSource) -> Tuple[Any, Optional[Path]]:
        """
        Resolve the field in a source.

        Returns:
            ``(value, path)`` for the first resolving path, or ``(MISSING, None)``
        """
        for path in self.paths:
            value = source.get(path[0])
            for segment in path[1:]:
                if value is MISSING:
                    break
                value = source.descend(value, segment)
            if value is not MISSING:
                return value, path
        return MISSING, None

    def __repr__(self) -> str:
        return f"LookupKey({self.name!r}, paths={self.paths!r})"
