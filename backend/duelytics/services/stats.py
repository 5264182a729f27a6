"""Player session stats: defaults at join time and the per-duel update."""
from __future__ import annotations

from decimal import Decimal

from duelytics.core.errors import NotFoundError, StateError
from duelytics.services.scoring import DuelResult, GameMode, starting_points, to_points


def initial_stats_values(mode: GameMode, starting_rating, initial_tier_id=None, initial_net_wins: int = 0) -> dict:
    """Mode-appropriate starting row: rated starts at the session rating, ladder/cup at 0.

    Ladder position comes from what the participant declared on join.
    """
    is_ladder = mode is GameMode.LADDER
    return {
        "current_points": starting_points(mode, starting_rating),
        "current_tier_id": initial_tier_id if is_ladder else None,
        "current_net_wins": int(initial_net_wins or 0) if is_ladder else 0,
    }


def with_losses(row) -> dict:
    out = dict(row)
    out["total_losses"] = int(out["total_games"]) - int(out["total_wins"])
    return out


def apply_duel_result(repo, session_id: int, user_id: str, mode: GameMode, result: DuelResult, delta: Decimal) -> dict:
    """Apply an already-effective delta to the running totals.

    The delta is never reclamped here. For duelist_cup the updated total is
    checked against the floor and a mismatch aborts the unit of work.
    """
    if mode is GameMode.LADDER:
        net_wins_delta, points_delta = int(delta), Decimal("0.00")
    else:
        net_wins_delta, points_delta = 0, to_points(delta)

    row = repo.update_stats(
        session_id,
        user_id,
        won=result is DuelResult.WIN,
        net_wins_delta=net_wins_delta,
        points_delta=points_delta,
    )
    if row is None:
        raise NotFoundError("Player stats not found for this session")

    if mode is GameMode.DUELIST_CUP and to_points(row["current_points"]) < 0:
        raise StateError("Duelist Cup points would drop below zero")

    return with_losses(row)


def rebuilt_points(mode: GameMode, starting_rating, duel_points_total) -> Decimal | None:
    """Points a stats row should hold given its duel log; None for ladder.

    Ladder duels record net-win deltas, which live in current_net_wins.
    """
    if mode is GameMode.LADDER:
        return None
    return starting_points(mode, starting_rating) + to_points(duel_points_total or 0)
