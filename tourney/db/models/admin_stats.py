from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from tourney.db.models.base import Base


class AdminStatsSnapshot(Base):
    __tablename__ = "admin_stats"
    __table_args__ = (
        CheckConstraint("total_tournaments >= 0", name="ck_admin_stats_total_tournaments_non_negative"),
        CheckConstraint("total_revenue >= 0", name="ck_admin_stats_total_revenue_non_negative"),
        CheckConstraint(
            "total_registrations >= 0",
            name="ck_admin_stats_total_registrations_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_tournaments: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    active_tournaments: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    completed_tournaments: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    upcoming_tournaments: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_users: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    active_users: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_revenue: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    this_month_revenue: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    average_participants: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_registrations: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
