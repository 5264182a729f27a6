import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from duelytics.db.base import Base

class PlayerSessionStats(Base):
    __tablename__ = "player_session_stats"

    session_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True)
    user_id: Mapped[str] = mapped_column(sa.Text, primary_key=True)

    # total_losses is derived: total_games - total_wins
    total_games: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="0")
    total_wins: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="0")

    current_points: Mapped[float] = mapped_column(sa.Numeric(10, 2), nullable=False, server_default="0")  # rated/duelist_cup
    current_tier_id: Mapped[int | None] = mapped_column(sa.Integer, sa.ForeignKey("ladder_tiers.id", ondelete="RESTRICT"), nullable=True)
    current_net_wins: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="0")  # ladder

    last_updated: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))

    __table_args__ = (
        sa.CheckConstraint("total_wins >= 0 AND total_wins <= total_games", name="ck_stats_wins_le_games"),
        sa.Index("ix_stats_session_points", "session_id", sa.text("current_points DESC")),
    )
