"""
toastx.store.holder — Lock-guarded State Holder
================================================

``StateStore`` owns the current :class:`ToastState` and swaps it as a whole
snapshot.  Writers pass a transition ``(state, *args) -> (new_state, result)``
to :meth:`StateStore.dispatch`; the transition runs against the current
snapshot under the lock and its output replaces it.  Readers take
``store.state`` and see a consistent, immutable snapshot.

Usage::

    store = StateStore(initial_state, on_commit=persist)
    result = store.dispatch(create_recognition, giver_id, data, config=cfg)
    user = store.select(get_user, "user-1")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from toastx.store.state import ToastState

logger = logging.getLogger(__name__)

R = TypeVar("R")

CommitHook = Callable[[ToastState], None]


class StateStore:
    """Thread-safe holder for the aggregate store.

    Dispatches are serialized by a lock.  ``on_commit`` runs when a
    transition produced a new state object (identity check), while the lock
    is still held and before the new state is swapped in.  If the hook
    raises, the exception propagates and the current state is kept.
    """

    def __init__(self, initial: ToastState | None = None, on_commit: CommitHook | None = None) -> None:
        self._lock = threading.Lock()
        self._state = initial or ToastState()
        self._on_commit = on_commit

    @property
    def state(self) -> ToastState:
        return self._state

    def dispatch(
        self, transition: Callable[..., tuple[ToastState, R]], *args: Any, **kwargs: Any
    ) -> R:
        with self._lock:
            new_state, result = transition(self._state, *args, **kwargs)
            if new_state is not self._state:
                if self._on_commit is not None:
                    self._on_commit(new_state)
                self._state = new_state
            return result

    def select(self, selector: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        return selector(self._state, *args, **kwargs)

    def replace_state(self, state: ToastState) -> None:
        """Swap in *state* wholesale (used when loading a snapshot)."""
        with self._lock:
            self._state = state
        logger.info(
            "Store state replaced: %d users, %d recognitions, %d notifications",
            len(state.users), len(state.recognitions), len(state.notifications),
        )
