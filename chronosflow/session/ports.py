"""Persistence port for the session controller."""

from typing import Optional, Protocol

from chronosflow.models.state import AppState
from chronosflow.models.task_factory import default_state


class StateStore(Protocol):
    """Loads and saves the whole application state."""

    def load(self) -> AppState:
        ...

    def save(self, state: AppState) -> None:
        ...


class InMemoryStateStore:
    """StateStore that keeps the last saved snapshot in memory."""

    def __init__(self, initial: Optional[AppState] = None):
        self._state = initial
        self.save_count = 0

    def load(self) -> AppState:
        if self._state is None:
            return default_state()
        return self._state.model_copy(deep=True)

    def save(self, state: AppState) -> None:
        self._state = state.model_copy(deep=True)
        self.save_count += 1
