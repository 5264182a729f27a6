from decimal import Decimal

import pytest

from duelytics.core.errors import ValidationError
from duelytics.services.scoring import GameMode, compute_delta, starting_points, strategy_for


@pytest.mark.parametrize("magnitude", [None, 0, 7.5, 1000, "abc"])
def test_ladder_delta_ignores_magnitude(magnitude):
    assert compute_delta("ladder", "win", magnitude) == 1
    assert compute_delta("ladder", "loss", magnitude) == -1


@pytest.mark.parametrize("result, magnitude, expected", [
    ("win", 7.5, Decimal("7.50")),
    ("loss", 7.5, Decimal("-7.50")),
    ("win", -12, Decimal("12.00")),
    ("loss", "-12", Decimal("-12.00")),
])
def test_rated_sign_follows_result(result, magnitude, expected):
    assert compute_delta("rated", result, magnitude) == expected


def test_rated_fractional_delta():
    current = Decimal("1500.00")
    delta = compute_delta("rated", "win", 7.5, current)
    assert delta == Decimal("7.50")
    assert current + delta == Decimal("1507.50")


def test_rated_has_no_floor():
    assert compute_delta("rated", "loss", 5000, Decimal("10.00")) == Decimal("-5000.00")


@pytest.mark.parametrize("mode", ["rated", "duelist_cup"])
@pytest.mark.parametrize("magnitude", [None, "", "  ", "abc", "nan", "inf", True])
def test_magnitude_required_and_numeric(mode, magnitude):
    with pytest.raises(ValidationError):
        compute_delta(mode, "win", magnitude, Decimal("0"))


def test_magnitude_out_of_storage_range():
    with pytest.raises(ValidationError):
        compute_delta("rated", "win", "1000000000", Decimal("0"))


def test_cup_loss_is_clamped_at_zero():
    delta = compute_delta("duelist_cup", "loss", 1000, Decimal("500"))
    assert delta == Decimal("-500.00")


def test_cup_loss_at_zero_changes_nothing():
    assert compute_delta("duelist_cup", "loss", 1000, Decimal("0")) == 0


def test_cup_win_is_not_clamped():
    assert compute_delta("duelist_cup", "win", 1000, Decimal("500")) == Decimal("1000.00")


def test_cup_points_never_negative_over_a_sequence():
    points = Decimal("0.00")
    sequence = [("win", 1000), ("loss", 1500), ("loss", 200), ("win", 250.5), ("loss", 100), ("loss", 1000)]
    for result, magnitude in sequence:
        raw = (1 if result == "win" else -1) * Decimal(str(magnitude))
        delta = compute_delta("duelist_cup", result, magnitude, points)
        assert points + delta == max(Decimal("0"), points + raw)
        points += delta
        assert points >= 0


@pytest.mark.parametrize("result", ["draw", "", None, "WIN"])
def test_result_must_be_win_or_loss(result):
    with pytest.raises(ValidationError):
        compute_delta("ladder", result)


def test_unknown_game_mode():
    with pytest.raises(ValidationError):
        compute_delta("swiss", "win", 5)


def test_every_mode_has_a_strategy():
    for mode in GameMode:
        assert callable(strategy_for(mode))


def test_starting_points_by_mode():
    assert starting_points(GameMode.RATED, 1500) == Decimal("1500.00")
    assert starting_points(GameMode.LADDER, 1500) == 0
    assert starting_points(GameMode.DUELIST_CUP, 1500) == 0


@pytest.mark.parametrize("mode, result, current", [
    ("rated", "win", Decimal("1500.00")),
    ("rated", "loss", Decimal("-1500.00")),
    ("duelist_cup", "win", Decimal("1500.00")),
])
def test_running_total_must_fit_storage(mode, result, current):
    with pytest.raises(ValidationError):
        compute_delta(mode, result, "99999999.99", current)


def test_running_total_at_storage_limit_is_accepted():
    assert compute_delta("rated", "win", "99998499.99", Decimal("1500.00")) == Decimal("99998499.99")
