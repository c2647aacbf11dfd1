"""Notifications emitted by the game session."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict


class SessionEventType(Enum):
    """All notifications a session can emit."""

    PLAYER_REGISTERED = auto()
    WORD_CHANGED = auto()
    TICK = auto()
    TIME_EXPIRED = auto()
    SCORE_CHANGED = auto()
    TURN_CHANGED = auto()
    SESSION_ENDED = auto()


@dataclass
class SessionEvent:
    """A single state change pushed to the session observer."""

    type: SessionEventType
    data: Dict[str, Any] = field(default_factory=dict)


SessionObserver = Callable[[SessionEvent], None]


_HANDLERS = {
    SessionEventType.PLAYER_REGISTERED: 'on_player_registered',
    SessionEventType.WORD_CHANGED: 'on_word_changed',
    SessionEventType.TICK: 'on_tick',
    SessionEventType.TIME_EXPIRED: 'on_time_expired',
    SessionEventType.SCORE_CHANGED: 'on_score_changed',
    SessionEventType.TURN_CHANGED: 'on_turn_changed',
    SessionEventType.SESSION_ENDED: 'on_session_ended',
}


class SessionListener:
    """
    Observer with one method per notification.

    Subclasses override the handlers they care about. Instances are callable,
    so they can be registered anywhere a SessionObserver is accepted.
    """

    def __call__(self, event: SessionEvent) -> None:
        getattr(self, _HANDLERS[event.type])(**event.data)

    def on_player_registered(self, player) -> None:
        pass

    def on_word_changed(self, word: str) -> None:
        pass

    def on_tick(self, seconds_remaining: int) -> None:
        pass

    def on_time_expired(self) -> None:
        pass

    def on_score_changed(self, score: int) -> None:
        pass

    def on_turn_changed(self, team) -> None:
        pass

    def on_session_ended(self, winner) -> None:
        pass
