from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from jobforms.database import Base
from jobforms.database_types import GUID, JSON


class JobPosting(Base):
    __tablename__ = "job_postings"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    
    # Basic fields (mapped from the comprehensive posting form)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    company = Column(String, nullable=True)
    location = Column(String, nullable=True)
    job_type = Column(String, nullable=True)  # full-time | part-time | contract
    work_mode = Column(String, nullable=True)  # on-site | hybrid | remote
    experience_level = Column(String, nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    requirements = Column(Text, nullable=True)
    skills_required = Column(JSON, nullable=True, default=list)
    benefits = Column(Text, nullable=True)
    application_deadline = Column(String, nullable=True)
    category = Column(String, nullable=True)
    application_method = Column(String, nullable=False, default="internal")  # internal | external | email
    
    # Every raw field of the comprehensive form, kept verbatim
    details = Column(JSON, nullable=True, default=dict)
    
    # Inline prescreen questions (premium only, at most 5)
    prescreen_questions = Column(JSON, nullable=False, default=list)
    
    # Ownership & lifecycle
    posted_by_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default="draft")  # draft | published | closed
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    forms = relationship("ApplicationForm", back_populates="job")
