from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
import enum

from jobforms.database import Base
from jobforms.database_types import GUID


class PlanType(str, enum.Enum):
    """Subscription plan tiers, lowest to highest."""
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PAST_DUE = "past_due"


class Subscription(Base):
    __tablename__ = "subscriptions"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    
    # Stored as plain strings: billing writes plan names we may not know yet
    plan_type = Column(String, nullable=False, default=PlanType.BASIC.value)
    status = Column(String, nullable=False, default=SubscriptionStatus.ACTIVE.value)
    
    # Timestamps
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    
    # Relationships
    user = relationship("User", back_populates="subscription")
    
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE.value
