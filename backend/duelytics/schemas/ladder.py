from pydantic import BaseModel

class LadderTierOut(BaseModel):
    id: int
    tier_name: str
    wins_required: int
    can_demote_from: bool
    sort_order: int

class LadderTiersOut(BaseModel):
    success: bool = True
    tiers: list[LadderTierOut]
