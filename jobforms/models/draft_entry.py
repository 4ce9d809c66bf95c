from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from jobforms.database import Base


class DraftEntry(Base):
    """One key/value row of the transient draft cache (latest write wins)."""
    __tablename__ = "draft_entries"
    
    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
