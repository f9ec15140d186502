"""Implementation of (Session)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import SessionModel
from src.db.schema import DBBoardSession


class SQLSessionRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        session_db = self._fetch_session(session_id)
        if session_db:
            return self._to_model(session_db)
        return None

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""

        new_id = uuid4()
        session_db = DBBoardSession(
            id=new_id,
            starting_fen=session.starting_fen,
            moves_uci=session.moves_uci,
            selected_square=session.selected_square,
            pending_promotion=session.pending_promotion,
        )
        self.db.add(session_db)
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db), new_id

    def update_session(
        self, session_id: UUID, session: SessionModel
    ) -> SessionModel | None:
        """Add new info to existing record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        session_db.starting_fen = session.starting_fen
        # NOTE: assign a fresh list, so SQLAlchemy registers the change of the JSON column
        session_db.moves_uci = list(session.moves_uci)
        session_db.selected_square = session.selected_square
        session_db.pending_promotion = (
            list(session.pending_promotion) if session.pending_promotion else None
        )
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db)

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        """Remove a session's record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        session_model = self._to_model(session_db)
        self.db.delete(session_db)
        self.db.commit()
        return session_model

    def _fetch_session(self, session_id: UUID) -> DBBoardSession | None:
        query = select(DBBoardSession).where(DBBoardSession.id == session_id)
        return self.db.scalar(query)

    def _to_model(self, session_db: DBBoardSession) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            starting_fen=session_db.starting_fen,
            moves_uci=list(session_db.moves_uci or []),
            selected_square=session_db.selected_square,
            pending_promotion=(
                list(session_db.pending_promotion)
                if session_db.pending_promotion
                else None
            ),
        )
