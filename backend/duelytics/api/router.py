from fastapi import APIRouter
from duelytics.modules.admin import api as admin
from duelytics.modules.decks import api as decks
from duelytics.modules.duels import api as duels
from duelytics.modules.ladder_tiers import api as ladder_tiers
from duelytics.modules.sessions import api as sessions

router = APIRouter()
router.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
router.include_router(duels.router, prefix="/api/duels", tags=["duels"])
router.include_router(admin.router, prefix="/api/admin", tags=["admin"])
router.include_router(decks.router, prefix="/api/decks", tags=["decks"])
router.include_router(ladder_tiers.router, prefix="/api/ladder-tiers", tags=["ladder-tiers"])
