"""Core game logic for CHARADES."""

from .errors import GameError, InvalidInput, NotFound, InvalidState, EmptyCategory
from .categories import Category, CategoryManager, DEFAULT_CATEGORIES
from .player import Player, Team
from .events import SessionEvent, SessionEventType, SessionListener
from .timer import CountdownTimer, Scheduler
from .session import GameSession, SessionState

__version__ = "1.0.0"

__all__ = [
    "GameError",
    "InvalidInput",
    "NotFound",
    "InvalidState",
    "EmptyCategory",
    "Category",
    "CategoryManager",
    "DEFAULT_CATEGORIES",
    "Player",
    "Team",
    "SessionEvent",
    "SessionEventType",
    "SessionListener",
    "CountdownTimer",
    "Scheduler",
    "GameSession",
    "SessionState",
]
