from decimal import Decimal

import pytest

from duelytics.core.errors import NotFoundError, StateError
from duelytics.services.duels import DuelSubmission, submit_duel
from duelytics.services.scoring import DuelResult, GameMode
from duelytics.services.stats import apply_duel_result, initial_stats_values, rebuilt_points, with_losses

from tests.fakes import InMemoryDuelRepository


def test_initial_values_rated_start_at_session_rating():
    values = initial_stats_values(GameMode.RATED, "1500", initial_tier_id=3, initial_net_wins=2)
    assert values == {"current_points": Decimal("1500.00"), "current_tier_id": None, "current_net_wins": 0}


def test_initial_values_cup_start_at_zero():
    values = initial_stats_values(GameMode.DUELIST_CUP, "1500")
    assert values["current_points"] == 0
    assert values["current_tier_id"] is None


def test_initial_values_ladder_keep_declared_position():
    values = initial_stats_values(GameMode.LADDER, "1500", initial_tier_id=3, initial_net_wins=2)
    assert values == {"current_points": Decimal("0.00"), "current_tier_id": 3, "current_net_wins": 2}


def test_losses_are_derived():
    assert with_losses({"total_games": 5, "total_wins": 3})["total_losses"] == 2


def test_ladder_delta_moves_net_wins_only():
    repo = InMemoryDuelRepository()
    repo.set_stats(1, "u", current_tier_id=1, current_net_wins=1)

    row = apply_duel_result(repo, 1, "u", GameMode.LADDER, DuelResult.LOSS, Decimal("-1"))

    assert row["current_net_wins"] == 0
    assert row["current_points"] == 0
    assert (row["total_games"], row["total_wins"], row["total_losses"]) == (1, 0, 1)


def test_points_delta_moves_points_only():
    repo = InMemoryDuelRepository()
    repo.set_stats(1, "u", current_points=Decimal("1500.00"))

    row = apply_duel_result(repo, 1, "u", GameMode.RATED, DuelResult.WIN, Decimal("7.5"))

    assert row["current_points"] == Decimal("1507.50")
    assert row["current_net_wins"] == 0
    assert (row["total_games"], row["total_wins"]) == (1, 1)


def test_missing_row_is_not_found():
    repo = InMemoryDuelRepository()
    with pytest.raises(NotFoundError):
        apply_duel_result(repo, 1, "u", GameMode.RATED, DuelResult.WIN, Decimal("1"))


def test_unclamped_cup_delta_is_refused():
    repo = InMemoryDuelRepository()
    repo.set_stats(1, "u", current_points=Decimal("100.00"))
    with pytest.raises(StateError):
        apply_duel_result(repo, 1, "u", GameMode.DUELIST_CUP, DuelResult.LOSS, Decimal("-500"))


def test_rebuilt_points_rated_adds_duels_to_session_rating():
    assert rebuilt_points(GameMode.RATED, "1500", Decimal("-12.50")) == Decimal("1487.50")


def test_rebuilt_points_cup_starts_from_zero():
    assert rebuilt_points(GameMode.DUELIST_CUP, "1500", Decimal("500.00")) == Decimal("500.00")
    assert rebuilt_points(GameMode.DUELIST_CUP, "1500", None) == 0


def test_rebuilt_points_skips_ladder():
    assert rebuilt_points(GameMode.LADDER, "1500", Decimal("3")) is None


def test_cup_stats_match_rebuilt_points_after_clamped_losses():
    repo = InMemoryDuelRepository()
    repo.add_session(1, "duelist_cup")
    repo.add_decks(10)
    repo.add_participant(1, "u")
    for result, magnitude in [("win", 400), ("loss", 1000), ("win", 250), ("loss", 100)]:
        submit_duel(repo, "u", DuelSubmission(1, 10, 10, result, declared_magnitude=magnitude))

    total = sum(d["points_change"] for d in repo.duels)
    assert repo.stats(1, "u")["current_points"] == rebuilt_points(GameMode.DUELIST_CUP, "1500", total)
