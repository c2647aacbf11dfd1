"""Errors raised by the charades session controller."""


class GameError(Exception):
    """Base class for recoverable game errors."""


class InvalidInput(GameError, ValueError):
    """A required value was blank or out of range."""


class NotFound(GameError, LookupError):
    """A named category, team or player does not exist."""


class InvalidState(GameError, RuntimeError):
    """The operation needs a selection or state that is not present."""


class EmptyCategory(GameError, ValueError):
    """The category exists but has no words to draw from."""
