from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, UniqueConstraint

from jobforms.database import Base
from jobforms.database_types import GUID, JSON


class JobApplication(Base):
    __tablename__ = "job_applications"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("job_postings.id"), nullable=False, index=True)
    applicant_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    form_id = Column(Integer, ForeignKey("application_forms.id"), nullable=True)
    
    # Answers keyed by field id / prescreen question id
    # Structure: {"full_name": "Ada", "skills": ["Python", "SQL"], "years_experience": "3-5 years"}
    application_data = Column(JSON, nullable=True, default=dict)
    cover_letter = Column(Text, nullable=True)
    
    status = Column(String, nullable=False, default="pending")
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    __table_args__ = (
        # One application per job per applicant
        UniqueConstraint('job_id', 'applicant_id', name='uq_job_applicant'),
    )
