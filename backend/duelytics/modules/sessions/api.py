import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.api.deps import get_identity
from duelytics.core.errors import NotFoundError, PersistenceError, StateError, ValidationError
from duelytics.core.security import Identity
from duelytics.db.session import get_db
from duelytics.schemas.session import (
    SessionDetailOut, SessionJoinIn, SessionJoinOut, SessionListOut, SessionOut, SessionRefOut,
)
from duelytics.schemas.stats import PlayerStatsEnvelope, PlayerStatsOut
from duelytics.services.audit import audit
from duelytics.services.scoring import GameMode, parse_game_mode
from duelytics.services.stats import initial_stats_values, with_losses
from duelytics.services.tiers import TierLadder

logger = logging.getLogger(__name__)

router = APIRouter()

_SESSION_COLUMNS = """
    id, name, game_mode, status, admin_user_id, starts_at, ends_at,
    starting_rating, point_value
"""


@router.get("", response_model=SessionListOut)
def list_sessions(
    status: Literal["active", "archived"] = Query(default="active"),
    db: Session = Depends(get_db),
):
    rows = db.execute(sa.text(f"""
        SELECT {_SESSION_COLUMNS}
        FROM sessions
        WHERE status=:st
        ORDER BY created_at DESC
    """), {"st": status}).mappings().all()
    return SessionListOut(sessions=[SessionOut(**r) for r in rows])


@router.post("/join", response_model=SessionJoinOut)
def join_session(payload: SessionJoinIn, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    session = db.execute(sa.text(f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id=:s"), {"s": payload.session_id}).mappings().first()
    if not session:
        raise NotFoundError("Session not found")
    if session["status"] != "active":
        raise StateError("Session is not active")

    already = db.execute(sa.text("""
        SELECT 1 FROM session_participants WHERE session_id=:s AND user_id=:u
    """), {"s": payload.session_id, "u": identity.user_id}).first()
    if already:
        raise StateError(f"Already joined {session['name']}")

    mode = parse_game_mode(session["game_mode"])
    tier_id = None
    net_wins = 0
    if mode is GameMode.LADDER:
        if payload.initial_tier_id is None or payload.initial_net_wins is None:
            raise ValidationError("Initial tier and net wins are required for ladder sessions")
        tiers = db.execute(sa.text("""
            SELECT id, tier_name, wins_required, can_demote_from, sort_order
            FROM ladder_tiers
            ORDER BY sort_order
        """)).mappings().all()
        tier = TierLadder.from_rows(tiers).validate_start(payload.initial_tier_id, payload.initial_net_wins)
        tier_id, net_wins = tier.id, int(payload.initial_net_wins)

    try:
        db.execute(sa.text("""
            INSERT INTO session_participants (session_id, user_id, initial_tier_id, initial_net_wins)
            VALUES (:s, :u, :t, :n)
        """), {"s": payload.session_id, "u": identity.user_id, "t": tier_id, "n": net_wins})

        values = initial_stats_values(mode, session["starting_rating"], tier_id, net_wins)
        db.execute(sa.text("""
            INSERT INTO player_session_stats (session_id, user_id, current_points, current_tier_id, current_net_wins)
            VALUES (:s, :u, :p, :t, :n)
            ON CONFLICT (session_id, user_id) DO NOTHING
        """), {
            "s": payload.session_id,
            "u": identity.user_id,
            "p": values["current_points"],
            "t": values["current_tier_id"],
            "n": values["current_net_wins"],
        })

        audit(db, identity.user_id, "session", payload.session_id, "joined", {
            "initial_tier_id": tier_id,
            "initial_net_wins": net_wins,
        })
        db.commit()
    except IntegrityError:
        db.rollback()
        raise StateError(f"Already joined {session['name']}")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("join failed for user %s in session %s", identity.user_id, payload.session_id)
        raise PersistenceError("Failed to join session") from exc

    logger.info("user %s joined session %s", identity.username, session["name"])
    return SessionJoinOut(
        message=f"Successfully joined {session['name']}",
        session=SessionRefOut(id=session["id"], name=session["name"], game_mode=session["game_mode"]),
    )


@router.get("/{session_id}", response_model=SessionDetailOut)
def get_session(session_id: int, db: Session = Depends(get_db)):
    row = db.execute(sa.text(f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id=:s"), {"s": session_id}).mappings().first()
    if not row:
        raise NotFoundError("Session not found")
    return SessionDetailOut(session=SessionOut(**row))


@router.get("/{session_id}/stats", response_model=PlayerStatsEnvelope)
def my_stats(session_id: int, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    row = db.execute(sa.text("""
        SELECT
            pss.session_id,
            pss.user_id,
            pss.total_games,
            pss.total_wins,
            pss.current_points,
            pss.current_tier_id,
            lt.tier_name AS current_tier,
            pss.current_net_wins,
            pss.last_updated
        FROM player_session_stats pss
        LEFT JOIN ladder_tiers lt ON lt.id = pss.current_tier_id
        WHERE pss.session_id=:s AND pss.user_id=:u
    """), {"s": session_id, "u": identity.user_id}).mappings().first()
    if not row:
        raise NotFoundError("No stats for this session yet")
    return PlayerStatsEnvelope(stats=PlayerStatsOut(**with_losses(row)))
