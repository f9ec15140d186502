"""
Messages flowing in and out of the interaction state machine.

Input events come from the presentation surface. Effects are what the state machine asks its owner to perform afterwards.
"""

from dataclasses import dataclass, field

from src.board.feedback import Cue
from src.board.square import Square
from src.core.shared_types import InteractionState, PieceType


# --- INPUT EVENTS ---
@dataclass(frozen=True)
class SquareClicked:
    square: Square


@dataclass(frozen=True)
class DragStarted:
    square: Square


@dataclass(frozen=True)
class Dropped:
    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class PromotionChosen:
    piece: PieceType


@dataclass(frozen=True)
class ResetRequested:
    pass


InputEvent = SquareClicked | DragStarted | Dropped | PromotionChosen | ResetRequested


# --- EFFECTS ---
@dataclass(frozen=True)
class PlayCue:
    cue: Cue


@dataclass(frozen=True)
class Render:
    """Re-project the session and hand the view to the presentation surface."""


Effect = PlayCue | Render


@dataclass(frozen=True)
class Transition:
    """Outcome of handling a single input event."""

    state: InteractionState
    effects: list[Effect] = field(default_factory=list)
