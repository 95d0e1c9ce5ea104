"""Concrete implementations for the per-target conversation store."""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from .models import ConversationState, Turn, Usage


Listener = Callable[[str, Optional[ConversationState]], None]


class Store(ABC):
    """Interface for holding conversation state per target.

    Mutations replace the affected target's snapshot with a new one and leave
    every other target's snapshot untouched. Listeners are told about the
    target that changed and nothing else.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    @abstractmethod
    def get(self, target: str) -> Optional[ConversationState]:
        """Returns the current snapshot for a target, or None if uninitialized."""
        pass

    @abstractmethod
    def get_all(self) -> Dict[str, ConversationState]:
        """Returns a mapping of every initialized target to its snapshot."""
        pass

    @abstractmethod
    def _put(self, target: str, state: ConversationState) -> None:
        pass

    @abstractmethod
    def _remove(self, target: str) -> None:
        pass

    # --- Observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers ``listener(target, state)``; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, target: str, state: Optional[ConversationState]) -> None:
        for listener in list(self._listeners):
            listener(target, state)

    def _replace(self, target: str, state: ConversationState) -> ConversationState:
        self._put(target, state)
        self._notify(target, state)
        return state

    def _require(self, target: str) -> ConversationState:
        state = self.get(target)
        if state is None:
            raise KeyError(f"No conversation state for target {target!r}")
        return state

    # --- Mutations ---

    def initialize(self, target: str) -> ConversationState:
        """Creates the empty state for a target unless one already exists."""
        state = self.get(target)
        if state is not None:
            return state
        return self._replace(target, ConversationState(target=target))

    def add_user_turn(self, target: str, content: str) -> Turn:
        """Appends a user turn, marks the target loading and clears its error."""
        state = self._require(target)
        turn = Turn(content=content, is_user=True)
        self._replace(
            target,
            state.model_copy(
                update={
                    "messages": state.messages + (turn,),
                    "loading": True,
                    "error": None,
                    "request_id": turn.id,
                }
            ),
        )
        return turn

    def add_assistant_turn(
        self, target: str, content: str, usage: Optional[Usage] = None
    ) -> Turn:
        """Appends a backend turn, records its usage and clears the loading flag."""
        state = self._require(target)
        turn = Turn(content=content, is_user=False)
        self._replace(
            target,
            state.model_copy(
                update={
                    "messages": state.messages + (turn,),
                    "loading": False,
                    "usage": usage,
                }
            ),
        )
        return turn

    def set_error(self, target: str, error: str) -> ConversationState:
        state = self._require(target)
        return self._replace(
            target, state.model_copy(update={"loading": False, "error": error})
        )

    def clear(self, target: str) -> Optional[ConversationState]:
        """Empties one target's conversation.

        The loading flag and request id survive so that a request still in
        flight keeps the target busy and its answer still lands. Unknown
        targets are left alone.
        """
        state = self.get(target)
        if state is None:
            return None
        cleared = ConversationState(
            target=target,
            loading=state.loading,
            request_id=state.request_id if state.loading else None,
        )
        if cleared == state:
            return state
        return self._replace(target, cleared)

    def clear_all(self) -> None:
        for target in list(self.get_all()):
            self._remove(target)
            self._notify(target, None)


class InMemory(Store):
    """Keeps every target's state in a dictionary for the current session."""

    def __init__(self):
        super().__init__()
        self._states: Dict[str, ConversationState] = {}

    def get(self, target: str) -> Optional[ConversationState]:
        return self._states.get(target)

    def get_all(self) -> Dict[str, ConversationState]:
        return dict(self._states)

    def _put(self, target: str, state: ConversationState) -> None:
        self._states[target] = state

    def _remove(self, target: str) -> None:
        self._states.pop(target, None)
