from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.db.session import get_db
from duelytics.schemas.ladder import LadderTierOut, LadderTiersOut

router = APIRouter()

@router.get("", response_model=LadderTiersOut)
def list_tiers(db: Session = Depends(get_db)):
    rows = db.execute(sa.text("""
        SELECT id, tier_name, wins_required, can_demote_from, sort_order
        FROM ladder_tiers
        ORDER BY sort_order ASC
    """)).mappings().all()
    return LadderTiersOut(tiers=[LadderTierOut(**r) for r in rows])
