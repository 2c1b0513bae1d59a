"""
Explicit compile cache.

A ``SchemaCache`` is an ordinary object owned by the caller; there is no
module-level cache.
"""

import logging
from typing import Any, Dict, Hashable, Optional, Tuple

from .config import CoreConfig

logger = logging.getLogger("schema_core")


def schema_fingerprint(schema: Any) -> Hashable:
    """
    Hashable structural identity of a schema description.

    Scalars are keyed together with their type so that ``1``, ``1.0`` and
    ``True`` stay distinct. Dict entries keep their order. Unhashable leaves
    are keyed by identity.
    """
    if isinstance(schema, dict):
        items = [(repr(key), schema_fingerprint(value)) for key, value in schema.items()]
        return ("dict", tuple(items))
    if isinstance(schema, (list, tuple)):
        return (type(schema).__name__, tuple(schema_fingerprint(item) for item in schema))
    if isinstance(schema, (set, frozenset)):
        return ("set", frozenset(schema_fingerprint(item) for item in schema))
    try:
        hash(schema)
    except TypeError:
        return ("id", id(schema))
    return (type(schema).__qualname__, schema)


class SchemaCache:
    """
    Maps a schema fingerprint plus config to a compiled schema.

    Attributes:
        hits: Number of successful lookups
        misses: Number of failed lookups
    """

    def __init__(self):
        self._entries: Dict[Tuple[Hashable, tuple], Any] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(schema: Any, config: Optional[CoreConfig] = None) -> Tuple[Hashable, tuple]:
        return schema_fingerprint(schema), (config or CoreConfig()).fingerprint()

    def get(self, schema: Any, config: Optional[CoreConfig] = None) -> Optional[Any]:
        """
        Look up a compiled schema.

        Returns:
            The cached compiled schema, or None
        """
        compiled = self._entries.get(self.key(schema, config))
        if compiled is None:
            self.misses += 1
            logger.debug("Schema cache miss (%d entries)", len(self._entries))
        else:
            self.hits += 1
            logger.debug("Schema cache hit")
        return compiled

    def put(self, schema: Any, compiled: Any, config: Optional[CoreConfig] = None) -> None:
        self._entries[self.key(schema, config)] = compiled

    def invalidate(self, schema: Any) -> int:
        """
        Drop every entry compiled from this schema, whatever its config.

        Returns:
            Number of entries removed
        """
        fingerprint = schema_fingerprint(schema)
        stale = [key for key in self._entries if key[0] == fingerprint]
        for key in stale:
            del self._entries[key]
        logger.debug("Invalidated %d cached schemas", len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, schema: Any) -> bool:
        fingerprint = schema_fingerprint(schema)
        return any(key[0] == fingerprint for key in self._entries)
