"""
Registry of named definitions.

A compiled schema owns two registries, one for validators and one for
serializers. Slots are handed out before their content is built, which is
what lets mutually recursive definitions compile.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger("schema_core")


class DefinitionSlot:
    """A named, write-once holder for a built node."""

    __slots__ = ("name", "value")

    def __init__(self, name: str):
        self.name = name
        self.value: Optional[Any] = None

    @property
    def filled(self) -> bool:
        return self.value is not None

    def __repr__(self) -> str:
        state = "filled" if self.filled else "empty"
        return f"DefinitionSlot({self.name!r}, {state})"


class DefinitionsRegistry:
    """
    Name to node mapping with write-once slots.

    After ``freeze()`` no slot may be created or filled.
    """

    def __init__(self, kind: str = "validator"):
        self.kind = kind
        self._slots: Dict[str, DefinitionSlot] = {}
        self._frozen = False

    def slot(self, name: str) -> DefinitionSlot:
        """
        Get the slot for a name, creating it when absent.

        Raises:
            RuntimeError: If the registry is frozen and the slot is new
        """
        found = self._slots.get(name)
        if found is None:
            if self._frozen:
                raise RuntimeError(f"{self.kind} registry is frozen; unknown definition '{name}'")
            found = self._slots[name] = DefinitionSlot(name)
        return found

    def define(self, name: str, value: Any) -> None:
        """
        Fill the slot of a name.

        Raises:
            RuntimeError: If the registry is frozen or the slot is already filled
        """
        if self._frozen:
            raise RuntimeError(f"{self.kind} registry is frozen")
        target = self.slot(name)
        if target.filled:
            raise RuntimeError(f"definition '{name}' is already defined")
        target.value = value

    def get(self, name: str) -> Optional[Any]:
        found = self._slots.get(name)
        return found.value if found is not None else None

    def unfilled(self) -> List[str]:
        return [name for name, found in self._slots.items() if not found.filled]

    def freeze(self) -> None:
        self._frozen = True
        logger.debug("Froze %s registry with %d definitions", self.kind, len(self._slots))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: str) -> bool:
        return name in self._slots and self._slots[name].filled

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)
