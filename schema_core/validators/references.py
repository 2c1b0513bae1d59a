"""
Recursive reference validator.
"""

from typing import Any

from .base import Validator, ValidationContext
from ..definitions import DefinitionSlot


class DefinitionRefValidator(Validator):
    """
    Validates against a named definition, resolved through its slot.

    Every entry goes through the context's recursion guard; exit happens in
    ``finally`` so failures never leak guard state. Running out of
    interpreter stack is reported as a depth failure at this location.
    """

    kind = "definition-ref"

    def __init__(self, name: str, slot: DefinitionSlot):
        self.name = name
        self.slot = slot

    def validate(self, value: Any, context: ValidationContext) -> Any:
        guard = context.guard
        identity = context.identity_of(value)
        if guard.is_cycle(self.name, identity):
            raise context.recursion_error(self.name, value)
        if guard.at_limit(self.name):
            raise context.recursion_error(self.name, value, guard.limit)
        guard.enter(self.name, identity)
        try:
            return self.slot.value.validate(value, context)
        except RecursionError:
            raise context.recursion_error(self.name, value, guard.depths[self.name])
        finally:
            guard.exit(self.name, identity)

    def default_value(self, context: ValidationContext) -> Any:
        return self.slot.value.default_value(context)

    def __str__(self) -> str:
        return f"DefinitionRefValidator({self.name!r})"
