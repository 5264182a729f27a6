"""Duel submission: validate, score, persist, report.

Steps 1-5 run inside one unit of work owned by the repository. The stats row is
locked in step 1 and the lock is held until the commit, so two submissions of
the same participant in the same session never interleave.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from duelytics.core.errors import DuelyticsError, NotFoundError, PersistenceError, StateError, ValidationError
from duelytics.services.scoring import (
    DuelResult,
    GameMode,
    check_declared_magnitude,
    compute_delta,
    parse_game_mode,
    parse_result,
)
from duelytics.services.stats import apply_duel_result, initial_stats_values
from duelytics.services.tiers import TierLadder, TierProgression, TransitionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuelSubmission:
    session_id: int
    player_deck_id: int
    opponent_deck_id: int
    result: str
    coin_flip_won: bool = False
    went_first: bool = False
    declared_magnitude: object = None


@dataclass(frozen=True)
class DuelOutcome:
    duel_id: int
    game_mode: GameMode
    result: DuelResult
    points_change: Decimal
    tier_progression: TierProgression | None
    message: str
    stats: dict


def format_delta(delta: Decimal) -> str:
    text = format(Decimal(delta).normalize(), "f")
    return f"+{text}" if delta > 0 else text


def build_message(mode: GameMode, result: DuelResult, delta: Decimal, progression: TierProgression | None) -> str:
    label = "Victory!" if result is DuelResult.WIN else "Defeat"
    unit = "Net wins" if mode is GameMode.LADDER else "Points"
    message = f"{label} {unit}: {format_delta(delta)}"
    if progression is not None and progression.changed:
        message += f" | {progression.message}"
    return message


def _validate(repo, user_id: str, sub: DuelSubmission):
    """All precondition checks. Nothing has been written when any of these fail."""
    result = parse_result(sub.result)

    session = repo.get_session(sub.session_id)
    if not session:
        raise NotFoundError("Session not found")
    if session["status"] != "active":
        raise StateError("Session is not active")

    participant = repo.get_participant(sub.session_id, user_id)
    if not participant:
        raise StateError("You are not a participant of this session", status_code=403)

    if sub.player_deck_id is None or sub.opponent_deck_id is None:
        raise ValidationError("playerDeckId and opponentDeckId are required")
    wanted = {int(sub.player_deck_id), int(sub.opponent_deck_id)}
    # mirror match: one id, one row
    if repo.existing_deck_ids(wanted) != wanted:
        raise ValidationError("Invalid deck selection")

    mode = parse_game_mode(session["game_mode"])
    check_declared_magnitude(mode, sub.declared_magnitude)

    return session, participant, mode, result


def _process(repo, user_id: str, sub: DuelSubmission, session, participant, mode: GameMode, result: DuelResult) -> DuelOutcome:
    session_id = sub.session_id

    # 1. stats row exists and is locked for this participant
    repo.ensure_stats(
        session_id,
        user_id,
        initial_stats_values(
            mode,
            session["starting_rating"],
            participant["initial_tier_id"],
            participant["initial_net_wins"],
        ),
    )
    current = repo.lock_stats(session_id, user_id)
    if current is None:
        raise NotFoundError("Player stats not found for this session")

    # 2. effective delta (cup clamp happens here and only here)
    delta = compute_delta(mode, result, sub.declared_magnitude, current["current_points"])

    # 3. duel fact with the delta actually applied
    duel_id = repo.insert_duel(
        session_id=session_id,
        user_id=user_id,
        player_deck_id=int(sub.player_deck_id),
        opponent_deck_id=int(sub.opponent_deck_id),
        coin_flip_won=bool(sub.coin_flip_won),
        went_first=bool(sub.went_first),
        result=result.value,
        points_change=delta,
    )

    # 4. running totals
    stats = apply_duel_result(repo, session_id, user_id, mode, result, delta)

    # 5. ladder position
    progression = None
    if mode is GameMode.LADDER:
        ladder = TierLadder.from_rows(repo.load_tiers())
        progression = ladder.evaluate(stats["current_tier_id"], int(stats["current_net_wins"]))
        if progression.tier_id != stats["current_tier_id"] or progression.net_wins != stats["current_net_wins"]:
            repo.set_ladder_position(session_id, user_id, progression.tier_id, progression.net_wins)
            stats["current_tier_id"] = progression.tier_id
            stats["current_net_wins"] = progression.net_wins

    repo.audit(user_id, "duel", duel_id, "applied", {
        "session_id": session_id,
        "game_mode": mode.value,
        "result": result.value,
        "points_change": str(delta),
        "tier_transition": progression.type.value if progression else TransitionType.NONE.value,
    })

    # 6. response
    return DuelOutcome(
        duel_id=int(duel_id),
        game_mode=mode,
        result=result,
        points_change=delta,
        tier_progression=progression,
        message=build_message(mode, result, delta, progression),
        stats=stats,
    )


def submit_duel(repo, user_id: str, sub: DuelSubmission) -> DuelOutcome:
    try:
        session, participant, mode, result = _validate(repo, user_id, sub)
        logger.info("processing %s duel: %s for user %s in session %s", mode.value, result.value, user_id, sub.session_id)
        outcome = _process(repo, user_id, sub, session, participant, mode, result)
        repo.commit()
    except DuelyticsError as exc:
        repo.rollback()
        logger.warning("duel rejected for user %s in session %s: %s", user_id, sub.session_id, exc.detail)
        raise
    except SQLAlchemyError as exc:
        repo.rollback()
        logger.exception("duel store failure for user %s in session %s", user_id, sub.session_id)
        raise PersistenceError("Failed to record duel, nothing was saved") from exc

    logger.info("duel %s processed: %s", outcome.duel_id, outcome.message)
    return outcome
