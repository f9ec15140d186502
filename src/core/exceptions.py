"""
Custom exceptions used across layers.

Everything derives from GameError so the API layer can translate whole families of errors at once.
NOTE: None of these subclass ValueError, so they pass through pydantic validators unchanged.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong inside the application."""


# --- DOMAIN ERRORS ---
class InvalidSquareError(GameError):
    """Square name does not exist on the board."""


class InvalidFENError(GameError):
    """String cannot be interpreted as a (valid) chess position."""


class IllegalMoveError(GameError):
    """Rules engine refused to apply the move in the current position."""


class EngineUnavailableError(GameError):
    """No fresh position could be obtained from the rules engine. The session cannot continue."""


class GameStateError(GameError):
    """Stored session data is inconsistent with the rules of the game."""


class FeedbackError(GameError):
    """A feedback cue could not be delivered. Never fatal."""


# --- BOUNDARY ERRORS ---
class InvalidRequestError(GameError):
    """Request data failed validation."""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class PatternTooShortError(GameError):
    """Move pattern does not contain enough half-moves to be used as a credential."""
