from datetime import datetime
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from jobforms.database import Base
from jobforms.database_types import GUID


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC)."""
    JOB_SEEKER = "job_seeker"  # Applies to jobs, answers forms
    EMPLOYER = "employer"  # Posts jobs, builds application forms
    ADMIN = "admin"  # Staff - unrestricted premium features
    SUPER_ADMIN = "super_admin"  # Can edit any employer's forms


class User(Base):
    __tablename__ = "users"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    
    role = Column(
        SQLEnum(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.JOB_SEEKER,
        index=True
    )
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    subscription = relationship(
        "Subscription",
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan"
    )
    
    def is_admin(self) -> bool:
        """Admins and super admins bypass premium feature checks."""
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)
    
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN
