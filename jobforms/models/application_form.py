from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from jobforms.database import Base
from jobforms.database_types import GUID, JSON


class ApplicationForm(Base):
    """
    Persisted Form Definition for one job posting.
    
    `fields` holds the ordered field schema list exactly as the builder
    produced it. Only one active form may exist per job; deleting the job
    deactivates (orphans) its forms instead of removing them.
    """
    __tablename__ = "application_forms"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("job_postings.id"), nullable=False, index=True)
    created_by = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    fields = Column(JSON, nullable=False, default=list)
    
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    job = relationship("JobPosting", back_populates="forms")
    
    __table_args__ = (
        Index('idx_forms_job_active', 'job_id', 'is_active'),
    )
