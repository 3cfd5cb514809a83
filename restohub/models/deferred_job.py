"""Durable delayed-job rows executed by the background sweeper."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from restohub.db.base import Base

ORDER_AUTO_COMPLETE = "order_auto_complete"


class DeferredJob(Base):
    """One-shot action that becomes due at ``run_after``."""

    __tablename__ = "deferred_jobs"
    __table_args__ = (Index("ix_deferred_jobs_due", "executed_at", "run_after"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    job_type: Mapped[str] = mapped_column(String(64), nullable=False)
    sale_id: Mapped[int | None] = mapped_column(ForeignKey("sales.id"), nullable=True)
    run_after: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    executed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
