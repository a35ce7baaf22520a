"""
Bounded undo/redo around the domain reducer.

State machine over {past, present, future}:
- UNDO: present moves to the front of future, last past entry becomes present
- REDO: present moves to the end of past, first future entry becomes present
- Undoable action that changes state: old present is pushed onto past
  (oldest entry evicted at capacity) and future is cleared
- Any other action that changes state: present is replaced, stacks untouched
- Action that returns the identical state object: nothing happens

Stacks are fixed-capacity deques. A transition never mutates the deques
of the HistoryState it was given; it builds new ones.
"""

from collections import deque
from dataclasses import dataclass, field

from planboard.config import get_settings
from planboard.models import AppState
from planboard.schemas.actions import DomainAction, Redo, Undo
from planboard.services.reducer import app_reducer, is_undoable
from planboard.logging_config import get_logger

logger = get_logger(__name__)


def _bounded_stack() -> deque:
    return deque(maxlen=get_settings().history_limit)


@dataclass(frozen=True)
class HistoryState:
    """Stacks default to settings.history_limit entries when not given."""
    present: AppState
    past: deque = field(default_factory=_bounded_stack)
    future: deque = field(default_factory=_bounded_stack)

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    @property
    def undo_count(self) -> int:
        return len(self.past)


def initial_history(present: AppState, limit: int | None = None) -> HistoryState:
    """Empty history around a starting state. limit defaults to settings.history_limit."""
    if limit is None:
        limit = get_settings().history_limit
    return HistoryState(
        present=present,
        past=deque(maxlen=limit),
        future=deque(maxlen=limit),
    )


def _copy(stack: deque) -> deque:
    return deque(stack, maxlen=stack.maxlen)


def history_reducer(history: HistoryState, action: DomainAction | Undo | Redo) -> HistoryState:
    if action.type == "UNDO":
        if not history.past:
            return history
        past = _copy(history.past)
        future = _copy(history.future)
        previous = past.pop()
        future.appendleft(history.present)
        logger.debug(f"Undo: {len(past)} steps left")
        return HistoryState(present=previous, past=past, future=future)

    if action.type == "REDO":
        if not history.future:
            return history
        past = _copy(history.past)
        future = _copy(history.future)
        upcoming = future.popleft()
        past.append(history.present)
        logger.debug(f"Redo: {len(future)} steps left")
        return HistoryState(present=upcoming, past=past, future=future)

    new_present = app_reducer(history.present, action)
    if new_present is history.present:
        return history

    if is_undoable(action):
        past = _copy(history.past)
        past.append(history.present)  # evicts the oldest entry at capacity
        return HistoryState(
            present=new_present,
            past=past,
            future=deque(maxlen=history.future.maxlen),
        )

    return HistoryState(present=new_present, past=history.past, future=history.future)
