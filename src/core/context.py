"""
Interaction Context

Per-request key/value carrier used when one handler step needs to hand a value
to the next step within the same click and the custom id cannot carry it (for
example when the next control was produced by the platform, like a select
menu's chosen value).

Keys are declared ContextKey objects, not free strings, so the set of keys in
use is visible in one place and every value is parsed the same way.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.core.exceptions import EndUserError, NotFoundError

T = TypeVar("T")


def _identity(value: str) -> str:
    return value


@dataclass(frozen=True)
class ContextKey(Generic[T]):
    """
    A documented context key.

    Attributes:
        name: Short wire name; doubles as the custom id argument name so
            TrackedInteraction.get_argument can look in both places.
        description: What the value means.
        parse: Converts the stored string to the value type.
    """

    name: str
    description: str = ""
    parse: Callable[[str], T] = _identity  # type: ignore[assignment]


class ContextKeys:
    """Keys shared by the core and most screens."""

    ENTITY_ID: ContextKey[int] = ContextKey("eId", "Id of the entity selected in this flow", int)
    PARENT_ID: ContextKey[int] = ContextKey("pId", "Id of the entity that owns ENTITY_ID", int)
    SELECTED_VALUE: ContextKey[str] = ContextKey("sel", "Raw value picked in a select menu")
    PHASE: ContextKey[str] = ContextKey("ph", "Workflow phase the flow is operating in")


class InteractionContext:
    """
    String-to-string storage scoped to a single interaction.

    Values are stored as strings (the same shape they have in a custom id)
    and parsed by the key on the way out.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def set(self, key: ContextKey, value: object) -> None:
        self._values[key.name] = str(value)

    def get_raw(self, key: ContextKey) -> str | None:
        return self._values.get(key.name)

    def get(self, key: ContextKey[T]) -> T | None:
        raw = self._values.get(key.name)
        if raw is None:
            return None
        try:
            return key.parse(raw)
        except ValueError as e:
            raise EndUserError(f"Invalid value for '{key.name}'", e) from e

    def require(self, key: ContextKey[T]) -> T:
        value = self.get(key)
        if value is None:
            raise NotFoundError(f"'{key.name}' not found in context")
        return value

    def pop(self, key: ContextKey) -> str | None:
        return self._values.pop(key.name, None)

    def __contains__(self, key: ContextKey) -> bool:
        return key.name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"<InteractionContext {self._values!r}>"
