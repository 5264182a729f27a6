import pytest

from duelytics.core.errors import StateError, ValidationError
from duelytics.services.tiers import Tier, TierLadder, TransitionType

from tests.fakes import TIERS


@pytest.fixture
def ladder():
    return TierLadder.from_rows(TIERS)


def test_promotion_resets_net_wins(ladder):
    # Bronze 1 needs 3; at 2 a win brings it to 3
    p = ladder.evaluate(3, 3)
    assert p.type is TransitionType.PROMOTION
    assert (p.tier_id, p.net_wins) == (4, 0)
    assert (p.from_tier, p.to_tier) == ("Bronze 1", "Silver 1")
    assert p.message == "Promoted to Silver 1!"


def test_floor_tier_clamps_instead_of_demoting(ladder):
    p = ladder.evaluate(1, -1)
    assert p.type is TransitionType.NONE
    assert (p.tier_id, p.net_wins) == (1, 0)


def test_non_demotable_tier_above_the_floor_clamps(ladder):
    p = ladder.evaluate(2, -1)
    assert p.type is TransitionType.NONE
    assert (p.tier_id, p.net_wins) == (2, 0)


def test_demotion_enters_lower_tier_from_the_top(ladder):
    p = ladder.evaluate(3, -1)
    assert p.type is TransitionType.DEMOTION
    assert (p.tier_id, p.net_wins) == (2, 2)
    assert p.message == "Demoted to Bronze 2"


def test_top_tier_accumulates(ladder):
    p = ladder.evaluate(4, 4)
    assert p.type is TransitionType.NONE
    assert (p.tier_id, p.net_wins) == (4, 4)
    p = ladder.evaluate(4, 9)
    assert (p.tier_id, p.net_wins) == (4, 9)


def test_inside_the_band_nothing_changes(ladder):
    p = ladder.evaluate(3, 1)
    assert not p.changed
    assert (p.tier_id, p.net_wins) == (3, 1)


def test_invariant_holds_for_random_walk(ladder):
    tier_id, net = 1, 0
    walk = "WWWWLWWWWLLLLLLLLLLWWWWWWWWWWWWWWWLL"
    for step in walk:
        net += 1 if step == "W" else -1
        p = ladder.evaluate(tier_id, net)
        tier_id, net = p.tier_id, p.net_wins
        tier = ladder.get(tier_id)
        assert net >= 0
        assert net < tier.wins_required or ladder.is_top(tier)


def test_missing_tier_is_state_error(ladder):
    with pytest.raises(StateError):
        ladder.evaluate(99, 0)
    with pytest.raises(StateError):
        ladder.evaluate(None, 0)


def test_duplicate_sort_order_rejected():
    with pytest.raises(StateError):
        TierLadder([
            Tier(1, "A", 2, False, 0),
            Tier(2, "B", 2, True, 0),
        ])


def test_empty_ladder_rejected():
    with pytest.raises(StateError):
        TierLadder([])


def test_order_comes_from_sort_order_not_input_order():
    ladder = TierLadder([
        Tier(10, "High", 3, True, 5),
        Tier(11, "Low", 3, False, 1),
    ])
    assert [t.tier_name for t in ladder.tiers] == ["Low", "High"]
    assert ladder.evaluate(11, 3).to_tier == "High"


@pytest.mark.parametrize("tier_id, net_wins", [(3, 3), (3, -1), (99, 0)])
def test_validate_start_rejects_out_of_band(ladder, tier_id, net_wins):
    with pytest.raises(ValidationError):
        ladder.validate_start(tier_id, net_wins)


def test_validate_start_accepts_band_and_top(ladder):
    assert ladder.validate_start(3, 2).tier_name == "Bronze 1"
    assert ladder.validate_start(4, 10).tier_name == "Silver 1"
