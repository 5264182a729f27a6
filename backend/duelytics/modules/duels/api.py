from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.api.deps import get_identity
from duelytics.core.config import settings
from duelytics.core.security import Identity
from duelytics.db.session import get_db
from duelytics.repositories.duels import DuelRepository
from duelytics.schemas.duel import DuelHistoryOut, DuelRowOut, DuelSubmitIn, DuelSubmitOut, TierProgressionOut
from duelytics.services.duels import DuelSubmission, submit_duel

router = APIRouter()


def _to_out(outcome) -> DuelSubmitOut:
    progression = outcome.tier_progression
    if progression is not None and progression.changed:
        tier_out = TierProgressionOut(
            type=progression.type.value,
            from_tier=progression.from_tier,
            to_tier=progression.to_tier,
            message=progression.message,
        )
    else:
        tier_out = TierProgressionOut(type="none")
    return DuelSubmitOut(
        duel_id=outcome.duel_id,
        game_mode=outcome.game_mode.value,
        result=outcome.result.value,
        points_change=outcome.points_change,
        tier_progression=tier_out,
        message=outcome.message,
    )


@router.post("", response_model=DuelSubmitOut, response_model_exclude_none=True)
@router.post("/submit", response_model=DuelSubmitOut, response_model_exclude_none=True, include_in_schema=False)
def post_duel(payload: DuelSubmitIn, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    outcome = submit_duel(
        DuelRepository(db),
        identity.user_id,
        DuelSubmission(
            session_id=payload.session_id,
            player_deck_id=payload.player_deck_id,
            opponent_deck_id=payload.opponent_deck_id,
            result=payload.result,
            coin_flip_won=payload.coin_flip_won,
            went_first=payload.went_first,
            declared_magnitude=payload.points_input,
        ),
    )
    return _to_out(outcome)


@router.get("/session/{session_id}", response_model=DuelHistoryOut)
def session_duels(
    session_id: int,
    limit: int | None = Query(default=None, ge=1, le=100),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    rows = db.execute(sa.text("""
        SELECT
            d.id,
            d.player_deck_id,
            pd.name AS player_deck_name,
            d.opponent_deck_id,
            od.name AS opponent_deck_name,
            d.coin_flip_won,
            d.went_first,
            d.result,
            d.points_change,
            d.created_at
        FROM duels d
        JOIN decks pd ON pd.id = d.player_deck_id
        JOIN decks od ON od.id = d.opponent_deck_id
        WHERE d.session_id=:s AND d.user_id=:u
        ORDER BY d.created_at DESC, d.id DESC
        LIMIT :lim
    """), {"s": session_id, "u": identity.user_id, "lim": limit or settings.DUEL_HISTORY_LIMIT}).mappings().all()

    return DuelHistoryOut(duels=[DuelRowOut(**r) for r in rows])
