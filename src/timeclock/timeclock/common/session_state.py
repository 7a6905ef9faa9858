from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional


class SessionState:
    """Key-value state owned by one subject's session.

    Holds what used to live in ambient caches: resolved display names and
    local acknowledgement markers. Cleared when the session closes.
    """

    def __init__(self, user_id: str):
        self.user_id = user_id
        self._values: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def get_or_set(self, key: str, factory: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._values:
                return self._values[key]
        value = factory()
        with self._lock:
            return self._values.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


class SessionRegistry:
    """Per-subject SessionState with an explicit open/close lifecycle."""

    def __init__(self):
        self._states: Dict[str, SessionState] = {}
        self._on_close: List[Callable[[str], None]] = []
        self._lock = threading.Lock()

    def on_close(self, callback: Callable[[str], None]) -> None:
        self._on_close.append(callback)

    def open(self, user_id: str) -> SessionState:
        with self._lock:
            state = self._states.get(user_id)
            if state is None:
                state = SessionState(user_id)
                self._states[user_id] = state
            return state

    def get(self, user_id: str) -> Optional[SessionState]:
        with self._lock:
            return self._states.get(user_id)

    def close(self, user_id: str) -> None:
        with self._lock:
            state = self._states.pop(user_id, None)
        for callback in self._on_close:
            callback(user_id)
        if state is not None:
            state.clear()
