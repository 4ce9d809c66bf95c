"""Database models"""
from jobforms.models.user import User, UserRole
from jobforms.models.subscription import Subscription, PlanType, SubscriptionStatus
from jobforms.models.job_posting import JobPosting
from jobforms.models.application_form import ApplicationForm
from jobforms.models.job_application import JobApplication
from jobforms.models.draft_entry import DraftEntry

__all__ = [
    "User",
    "UserRole",
    "Subscription",
    "PlanType",
    "SubscriptionStatus",
    "JobPosting",
    "ApplicationForm",
    "JobApplication",
    "DraftEntry",
]
