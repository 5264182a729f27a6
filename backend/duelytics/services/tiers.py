"""Ladder tier progression.

State is (current tier, net wins). After every ladder duel ``evaluate`` is run
once: net wins move by exactly one per duel, so a single call can cross at most
one promotion or demotion boundary.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from duelytics.core.errors import StateError, ValidationError


class TransitionType(str, Enum):
    NONE = "none"
    PROMOTION = "promotion"
    DEMOTION = "demotion"


@dataclass(frozen=True)
class Tier:
    id: int
    tier_name: str
    wins_required: int
    can_demote_from: bool
    sort_order: int


@dataclass(frozen=True)
class TierProgression:
    type: TransitionType
    tier_id: int
    net_wins: int
    from_tier: str | None = None
    to_tier: str | None = None
    message: str | None = None

    @property
    def changed(self) -> bool:
        return self.type is not TransitionType.NONE


class TierLadder:
    def __init__(self, tiers: Iterable[Tier]):
        ordered = sorted(tiers, key=lambda t: t.sort_order)
        if not ordered:
            raise StateError("Ladder tier table is empty")
        orders = [t.sort_order for t in ordered]
        if len(set(orders)) != len(orders):
            raise StateError("Ladder tiers have duplicate sort_order")
        self._ordered = ordered
        self._position = {t.id: i for i, t in enumerate(ordered)}

    @classmethod
    def from_rows(cls, rows) -> "TierLadder":
        return cls(
            Tier(
                id=int(r["id"]),
                tier_name=r["tier_name"],
                wins_required=int(r["wins_required"]),
                can_demote_from=bool(r["can_demote_from"]),
                sort_order=int(r["sort_order"]),
            )
            for r in rows
        )

    @property
    def tiers(self) -> list[Tier]:
        return list(self._ordered)

    def get(self, tier_id) -> Tier:
        if tier_id is None or int(tier_id) not in self._position:
            raise StateError(f"Ladder tier {tier_id} not found")
        return self._ordered[self._position[int(tier_id)]]

    def is_top(self, tier: Tier) -> bool:
        return self._position[tier.id] == len(self._ordered) - 1

    def higher(self, tier: Tier) -> Tier | None:
        i = self._position[tier.id]
        return self._ordered[i + 1] if i + 1 < len(self._ordered) else None

    def lower(self, tier: Tier) -> Tier | None:
        i = self._position[tier.id]
        return self._ordered[i - 1] if i > 0 else None

    def validate_start(self, tier_id, net_wins: int) -> Tier:
        """Starting point declared on join must already satisfy the ladder invariant."""
        try:
            tier = self.get(tier_id)
        except StateError:
            raise ValidationError("Invalid tier selected")
        if net_wins < 0:
            raise ValidationError("initialNetWins cannot be negative")
        if not self.is_top(tier) and net_wins >= tier.wins_required:
            raise ValidationError(
                f"initialNetWins must be below {tier.wins_required} for {tier.tier_name}"
            )
        return tier

    def evaluate(self, tier_id, net_wins: int) -> TierProgression:
        tier = self.get(tier_id)

        if net_wins >= tier.wins_required:
            nxt = self.higher(tier)
            if nxt is None:
                # top tier: no promotion, net wins keep accumulating
                return TierProgression(TransitionType.NONE, tier.id, net_wins)
            return TierProgression(
                TransitionType.PROMOTION,
                tier_id=nxt.id,
                net_wins=0,
                from_tier=tier.tier_name,
                to_tier=nxt.tier_name,
                message=f"Promoted to {nxt.tier_name}!",
            )

        if net_wins < 0:
            prev = self.lower(tier) if tier.can_demote_from else None
            if prev is None:
                return TierProgression(TransitionType.NONE, tier.id, 0)
            return TierProgression(
                TransitionType.DEMOTION,
                tier_id=prev.id,
                net_wins=prev.wins_required - 1,
                from_tier=tier.tier_name,
                to_tier=prev.tier_name,
                message=f"Demoted to {prev.tier_name}",
            )

        return TierProgression(TransitionType.NONE, tier.id, net_wins)
