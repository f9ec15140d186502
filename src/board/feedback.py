"""
Feedback cues (sounds) played after a move got committed.

Delivery is fire-and-forget: a failing cue raises FeedbackError, which the controller logs and ignores.
"""

from enum import StrEnum
from pathlib import Path
from typing import Callable, Protocol

from src.core.exceptions import FeedbackError


class Cue(StrEnum):
    GAME_OVER = "game_over"
    CHECK = "check"
    CAPTURE = "capture"
    MOVE = "move"


CUE_SOUNDS: dict[Cue, str] = {
    Cue.GAME_OVER: "game_end.mp3",
    Cue.CHECK: "check.mp3",
    Cue.CAPTURE: "capture.mp3",
    Cue.MOVE: "move.mp3",
}

SoundPlayer = Callable[[Path], None]


class FeedbackDispatcher(Protocol):
    def dispatch(self, cue: Cue) -> None:
        """Deliver the cue. Raise FeedbackError if that fails."""
        ...


class SoundFeedback:
    """Play the sound file associated with a cue, using whatever audio backend `player` wraps."""

    def __init__(self, sound_dir: Path, player: SoundPlayer) -> None:
        self.sound_dir = sound_dir
        self.player = player

    def dispatch(self, cue: Cue) -> None:
        sound_file = self.sound_dir / CUE_SOUNDS[cue]
        if not sound_file.is_file():
            raise FeedbackError(f"Could not load {sound_file.name}")
        try:
            self.player(sound_file)
        except Exception as e:
            raise FeedbackError(f"Audio playback failed for {sound_file.name}: {e}") from e


class RecordingFeedback:
    """Collect the cues instead of playing them (the HTTP layer passes them on to the client)."""

    def __init__(self) -> None:
        self.cues: list[Cue] = []

    def dispatch(self, cue: Cue) -> None:
        self.cues.append(cue)
