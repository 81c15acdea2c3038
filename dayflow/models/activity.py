from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from dayflow.db import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, nullable=False, index=True)
    activity = Column(String, nullable=False)
    category = Column(String, nullable=True)
    window_title = Column(String, nullable=True)        # Active tab when logged
    started_at = Column(DateTime, nullable=False, index=True)
    ended_at = Column(DateTime, nullable=True)          # Open entry while None
    is_idle = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def duration_seconds(self) -> float | None:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()
