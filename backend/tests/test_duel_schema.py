from decimal import Decimal

import pytest
from pydantic import ValidationError

from duelytics.schemas.duel import DuelSubmitIn, DuelSubmitOut, TierProgressionOut


def _payload(**extra):
    body = {"sessionId": 1, "playerDeckId": 10, "opponentDeckId": 11, "result": "win"}
    body.update(extra)
    return body


def test_camel_case_body():
    sub = DuelSubmitIn.model_validate(_payload(coinFlipWon=True, wentFirst=True, pointsInput="7.5"))
    assert sub.session_id == 1
    assert sub.coin_flip_won is True
    assert sub.went_first is True
    assert sub.points_input == Decimal("7.5")


def test_points_change_alias_accepted():
    sub = DuelSubmitIn.model_validate(_payload(pointsChange=12))
    assert sub.points_input == Decimal("12")


def test_points_input_optional():
    sub = DuelSubmitIn.model_validate(_payload())
    assert sub.points_input is None
    assert sub.coin_flip_won is False


@pytest.mark.parametrize("result", ["draw", "WIN", ""])
def test_result_must_be_win_or_loss(result):
    with pytest.raises(ValidationError):
        DuelSubmitIn.model_validate(_payload(result=result))


def test_non_numeric_points_rejected():
    with pytest.raises(ValidationError):
        DuelSubmitIn.model_validate(_payload(pointsInput="abc"))


def test_response_serializes_camel_case():
    out = DuelSubmitOut(
        duel_id=3,
        game_mode="ladder",
        result="win",
        points_change=1,
        tier_progression=TierProgressionOut(type="promotion", from_tier="Bronze 1", to_tier="Silver 1", message="Promoted to Silver 1!"),
        message="Victory! Net wins: +1 | Promoted to Silver 1!",
    )
    data = out.model_dump(by_alias=True)
    assert data["duelId"] == 3
    assert data["pointsChange"] == 1.0
    assert data["tierProgression"]["toTier"] == "Silver 1"
