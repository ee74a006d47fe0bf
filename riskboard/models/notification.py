# riskboard/models/notification.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from riskboard.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    location_id = Column(
        Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    hazard_id = Column(
        Integer, ForeignKey("hazards.id", ondelete="CASCADE"), nullable=True
    )
    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=True
    )

    kind = Column(String(40), nullable=False, index=True)  # e.g. critical_risk, training_expired
    severity = Column(String(20), nullable=False, default="warning")  # critical|warning
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)

    # one row per alert occurrence; see services.notifications.build_alerts
    dedupe_key = Column(String(120), nullable=False, unique=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    read_at = Column(DateTime, nullable=True)
