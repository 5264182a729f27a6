import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.api.deps import assert_session_admin, get_identity, require_admin
from duelytics.core.config import settings
from duelytics.core.errors import PersistenceError, StateError
from duelytics.core.security import Identity
from duelytics.db.session import get_db
from duelytics.schemas.common import OkOut
from duelytics.schemas.session import SessionCreateIn, SessionCreateOut, SessionOut
from duelytics.schemas.stats import ParticipantRowOut, ParticipantsOut
from duelytics.services.audit import audit
from duelytics.services.scoring import GameMode

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_defaults(mode: GameMode) -> tuple[float, float]:
    if mode is GameMode.DUELIST_CUP:
        return 0, settings.DEFAULT_CUP_POINT_VALUE
    return settings.DEFAULT_STARTING_RATING, settings.DEFAULT_RATED_POINT_VALUE


@router.post("/sessions", response_model=SessionCreateOut, status_code=201)
def create_session(payload: SessionCreateIn, identity: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    mode = GameMode(payload.game_mode)
    default_rating, default_point_value = _session_defaults(mode)
    starting_rating = payload.starting_rating if payload.starting_rating is not None else default_rating
    point_value = payload.point_value if payload.point_value is not None else default_point_value

    try:
        row = db.execute(sa.text("""
            INSERT INTO sessions (name, game_mode, admin_user_id, starts_at, ends_at, starting_rating, point_value, status)
            VALUES (:name, :mode, :admin, :starts, :ends, :rating, :pv, 'active')
            RETURNING id, name, game_mode, status, admin_user_id, starts_at, ends_at, starting_rating, point_value
        """), {
            "name": payload.name.strip(),
            "mode": mode.value,
            "admin": identity.user_id,
            "starts": payload.starts_at,
            "ends": payload.ends_at,
            "rating": starting_rating,
            "pv": point_value,
        }).mappings().first()

        audit(db, identity.user_id, "session", row["id"], "created", {
            "game_mode": mode.value,
            "starting_rating": str(starting_rating),
            "point_value": str(point_value),
        })
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("session create failed")
        raise PersistenceError("Failed to create session") from exc

    logger.info("session created: %s (%s) by %s", row["name"], mode.value, identity.username)
    return SessionCreateOut(
        message=f'{mode.value} session "{row["name"]}" created successfully',
        session=SessionOut(**row),
    )


@router.patch("/sessions/{session_id}/archive", response_model=OkOut)
def archive_session(session_id: int, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    session = assert_session_admin(db, session_id, identity)

    # one-way: active -> archived
    updated = db.execute(sa.text("""
        UPDATE sessions
        SET status='archived', updated_at=now()
        WHERE id=:s AND status='active'
        RETURNING id
    """), {"s": session_id}).first()
    if not updated:
        db.rollback()
        raise StateError(f'Session "{session["name"]}" is already archived')

    audit(db, identity.user_id, "session", session_id, "archived", {})
    db.commit()

    logger.info("session archived: %s by %s", session["name"], identity.username)
    return OkOut(message=f'Session "{session["name"]}" archived successfully')


@router.delete("/sessions/{session_id}", response_model=OkOut)
def delete_session(session_id: int, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    session = assert_session_admin(db, session_id, identity)

    try:
        db.execute(sa.text("DELETE FROM player_session_stats WHERE session_id=:s"), {"s": session_id})
        db.execute(sa.text("DELETE FROM session_participants WHERE session_id=:s"), {"s": session_id})
        db.execute(sa.text("DELETE FROM duels WHERE session_id=:s"), {"s": session_id})
        db.execute(sa.text("DELETE FROM sessions WHERE id=:s"), {"s": session_id})
        audit(db, identity.user_id, "session", session_id, "deleted", {"name": session["name"]})
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("session delete failed for %s", session_id)
        raise PersistenceError("Failed to delete session") from exc

    logger.info("session deleted: %s by %s", session["name"], identity.username)
    return OkOut(message=f'Session "{session["name"]}" deleted successfully')


@router.get("/sessions/{session_id}/participants", response_model=ParticipantsOut)
def session_participants(session_id: int, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    assert_session_admin(db, session_id, identity)

    rows = db.execute(sa.text("""
        SELECT
            sp.user_id,
            sp.joined_at,
            pss.total_games,
            pss.total_wins,
            pss.total_games - pss.total_wins AS total_losses,
            pss.current_points,
            pss.current_net_wins,
            lt.tier_name
        FROM session_participants sp
        LEFT JOIN player_session_stats pss
          ON pss.session_id = sp.session_id AND pss.user_id = sp.user_id
        LEFT JOIN ladder_tiers lt ON lt.id = pss.current_tier_id
        WHERE sp.session_id=:s
        ORDER BY pss.current_points DESC NULLS LAST, lt.sort_order DESC NULLS LAST,
                 pss.current_net_wins DESC NULLS LAST, sp.joined_at ASC
    """), {"s": session_id}).mappings().all()

    return ParticipantsOut(participants=[ParticipantRowOut(**r) for r in rows])
