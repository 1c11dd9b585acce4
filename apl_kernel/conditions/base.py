"""
Condition — a named state machine threaded through the event stream.

Behavioral Contract:
- init() seeds the state before any event is seen
- update(state, event) is total: events the condition does not care about
  return the state unchanged
- validate(state, event) observes the state as of *before* the triggering
  event was applied, and never mutates it

The engine treats the state type T as opaque. Conditions referenced by a rule
but never registered on the APL receive None as their state; implementations
must treat None the same as their initial state.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from apl_kernel.models.events import AnyEvent

T = TypeVar("T")


class Condition(ABC, Generic[T]):
    """Base class for every rule guard."""

    def __init__(self, key: str):
        self.key = key

    @abstractmethod
    def init(self) -> T:
        """Produce the initial state."""

    @abstractmethod
    def update(self, state: Optional[T], event: "AnyEvent") -> T:
        """Advance the state with the next event in stream order."""

    @abstractmethod
    def validate(self, state: Optional[T], event: "AnyEvent") -> bool:
        """Whether the condition holds for the supplied event."""

    def describe(self) -> dict:
        """Serializable summary, used when rules are rendered in results."""
        return {"key": self.key, "kind": type(self).__name__}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


class CallableCondition(Condition[T]):
    """A condition assembled from three plain functions."""

    def __init__(
        self,
        key: str,
        init: Callable[[], T],
        update: Callable[[Optional[T], "AnyEvent"], T],
        validate: Callable[[Optional[T], "AnyEvent"], bool],
    ):
        super().__init__(key)
        self._init = init
        self._update = update
        self._validate = validate

    def init(self) -> T:
        return self._init()

    def update(self, state: Optional[T], event: "AnyEvent") -> T:
        return self._update(state, event)

    def validate(self, state: Optional[T], event: "AnyEvent") -> bool:
        return self._validate(state, event)
