"""SQLAlchemy database models for ChronosFlow."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from chronosflow.database.database import Base


class StateRecordDB(Base):
    """One named record of the persisted application state.

    The value is the JSON text of the record (a list of tasks, goals, logs or
    rewards, or the spent-XP counter), rewritten in full on every save.
    """

    __tablename__ = "state_records"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
