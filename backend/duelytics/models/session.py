import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from duelytics.db.base import Base

class DuelSession(Base):
    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    game_mode: Mapped[str] = mapped_column(sa.Text, nullable=False)  # ladder/rated/duelist_cup, immutable
    admin_user_id: Mapped[str] = mapped_column(sa.Text, nullable=False)

    starts_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    ends_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False)

    starting_rating: Mapped[float] = mapped_column(sa.Numeric(10, 2), nullable=False, server_default="1500")
    point_value: Mapped[float] = mapped_column(sa.Numeric(10, 2), nullable=False, server_default="7")

    status: Mapped[str] = mapped_column(sa.Text, nullable=False, server_default="active")  # active -> archived

    created_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))
    updated_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))

    __table_args__ = (
        sa.CheckConstraint("game_mode in ('ladder','rated','duelist_cup')", name="ck_session_game_mode"),
        sa.CheckConstraint("status in ('active','archived')", name="ck_session_status"),
        sa.CheckConstraint("ends_at > starts_at", name="ck_session_window"),
        sa.Index("ix_sessions_status_created", "status", sa.text("created_at DESC")),
    )
