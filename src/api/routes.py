"""HTTP routes. The browser board posts its raw input events here and redraws from the returned view."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.models import (
    CreateSessionRequest,
    DeleteSessionRequest,
    DropRequest,
    GetSessionRequest,
    PatternRequest,
    PatternResponse,
    PromotionRequest,
    ResetRequest,
    SessionResponse,
    SquareRequest,
)
from src.core.config import get_settings
from src.db.database import get_db
from src.db.sql_repository import SQLSessionRepository
from src.services.board_service import BoardService

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_service(db: Session = Depends(get_db)) -> BoardService:
    settings = get_settings()
    return BoardService(
        SQLSessionRepository(db),
        min_pattern_half_moves=settings.min_pattern_half_moves,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_session(
    request: CreateSessionRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.create_session(request)


@router.get("/{session_id}")
def get_session(
    session_id: UUID, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.get_session(GetSessionRequest(session_id=session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: UUID, service: BoardService = Depends(get_service)
) -> None:
    service.delete_session(DeleteSessionRequest(session_id=session_id))


@router.get("/{session_id}/pattern")
def get_pattern(
    session_id: UUID, service: BoardService = Depends(get_service)
) -> PatternResponse:
    return service.pattern(PatternRequest(session_id=session_id))


# --- INPUT EVENTS ---
@router.post("/events/click")
def square_clicked(
    request: SquareRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.click(request)


@router.post("/events/drag")
def drag_started(
    request: SquareRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.drag(request)


@router.post("/events/drop")
def dropped(
    request: DropRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.drop(request)


@router.post("/events/promotion")
def promotion_chosen(
    request: PromotionRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.choose_promotion(request)


@router.post("/events/reset")
def reset(
    request: ResetRequest, service: BoardService = Depends(get_service)
) -> SessionResponse:
    return service.reset(request)
