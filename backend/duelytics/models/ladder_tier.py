import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from duelytics.db.base import Base

class LadderTier(Base):
    __tablename__ = "ladder_tiers"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    tier_name: Mapped[str] = mapped_column(sa.Text, nullable=False, unique=True)  # e.g. Bronze 1
    wins_required: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    can_demote_from: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, server_default=sa.text("false"))
    sort_order: Mapped[int] = mapped_column(sa.Integer, nullable=False, unique=True)

    __table_args__ = (
        sa.CheckConstraint("wins_required > 0", name="ck_ladder_tier_wins_required"),
        sa.CheckConstraint("sort_order >= 0", name="ck_ladder_tier_sort_order"),
    )
