"""Unit tests for /src/board/handler.py"""

import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from src.board.feedback import CUE_SOUNDS, Cue, RecordingFeedback, SoundFeedback
from src.board.handler import BoardController
from src.core.exceptions import FeedbackError, InvalidRequestError, InvalidSquareError
from src.core.models import SessionModel
from src.core.shared_types import InteractionState


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


def test_new_controller(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(feedback)
    view = controller.view()
    assert view.interaction_state == InteractionState.IDLE
    assert view.half_move_count == 0
    assert controller.to_model() == SessionModel()


def test_submit_returns_view(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(feedback)
    view = controller.square_clicked("e2")
    assert view.interaction_state == InteractionState.PIECE_SELECTED
    assert view == controller.view()


def test_committed_move_dispatches_cue(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(feedback)
    controller.square_clicked("e2")
    assert feedback.cues == []

    controller.square_clicked("e4")
    assert feedback.cues == [Cue.MOVE]


def test_on_update_called_for_every_render(feedback: RecordingFeedback) -> None:
    on_update = Mock()
    controller = BoardController.new(feedback, on_update=on_update)

    controller.square_clicked("e2")
    controller.square_clicked("e4")
    assert on_update.call_count == 2
    assert on_update.call_args.args[0].notation == "e4"


def test_no_render_for_ignored_drag(feedback: RecordingFeedback) -> None:
    on_update = Mock()
    controller = BoardController.new(feedback, on_update=on_update)
    controller.drag_started("e5")
    on_update.assert_not_called()


def test_failing_feedback_does_not_block_move(
    caplog: pytest.LogCaptureFixture,
) -> None:
    broken_feedback = Mock()
    broken_feedback.dispatch.side_effect = FeedbackError("Could not load move.mp3")
    on_update = Mock()
    controller = BoardController.new(broken_feedback, on_update=on_update)

    with caplog.at_level(logging.WARNING):
        controller.dropped("e2", "e4")

    assert controller.view().notation == "e4"
    on_update.assert_called_once()
    assert "Could not load move.mp3" in caplog.text


def test_promotion_flow(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(
        feedback, starting_fen="k7/4P3/8/8/8/8/8/4K3 w - - 0 1"
    )
    view = controller.dropped("e7", "e8")
    assert view.awaiting_promotion
    assert feedback.cues == []

    view = controller.promotion_chosen("Q")
    assert view.notation == "e8=Q+"
    assert feedback.cues == [Cue.CHECK]


def test_reset(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(feedback)
    controller.dropped("e2", "e4")
    view = controller.reset()
    assert view.half_move_count == 0
    assert view.notation == ""


def test_from_model(feedback: RecordingFeedback) -> None:
    model = SessionModel(moves_uci=["e2e4", "e7e5"], selected_square="g1")
    controller = BoardController.from_model(model, feedback)

    assert controller.view().notation == "e4 e5"
    assert controller.view().interaction_state == InteractionState.PIECE_SELECTED
    assert controller.to_model() == model


@pytest.mark.parametrize("square", ["e9", "i1", "e", ""])
def test_invalid_square_name(feedback: RecordingFeedback, square: str) -> None:
    controller = BoardController.new(feedback)
    with pytest.raises(InvalidSquareError):
        _ = controller.square_clicked(square)


def test_invalid_promotion_character(feedback: RecordingFeedback) -> None:
    controller = BoardController.new(feedback)
    with pytest.raises(InvalidRequestError):
        _ = controller.promotion_chosen("x")


def test_failing_audio_backend_does_not_block_move(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    for file_name in CUE_SOUNDS.values():
        (tmp_path / file_name).touch()
    player = Mock(side_effect=RuntimeError("device busy"))
    on_update = Mock()
    controller = BoardController.new(
        SoundFeedback(tmp_path, player), on_update=on_update
    )

    with caplog.at_level(logging.WARNING):
        view = controller.dropped("e2", "e4")

    assert view.notation == "e4"
    player.assert_called_once()
    on_update.assert_called_once()
    assert "device busy" in caplog.text
