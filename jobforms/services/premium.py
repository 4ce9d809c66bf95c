"""
Premium feature access control.

Job content is free for everyone; premium plans unlock AI tools,
convenience features and (for employers) prescreen questions.
"""
import enum
from typing import Optional

from jobforms.models.subscription import PlanType, Subscription
from jobforms.models.user import User


class PremiumFeature(str, enum.Enum):
    # AI-powered tools
    AI_RESUME_BUILDER = "ai_resume_builder"
    AI_RESUME_ANALYZER = "ai_resume_analyzer"
    AI_COVER_LETTER_GENERATOR = "ai_cover_letter_generator"
    AI_INTERVIEW_PREP = "ai_interview_prep"
    AI_SKILL_MATCHER = "ai_skill_matcher"

    # Convenience features
    ONE_CLICK_APPLY = "one_click_apply"
    LAZY_APPLY = "lazy_apply"
    BULK_APPLY = "bulk_apply"
    RESUME_VISIBILITY = "resume_visibility"
    PRIORITY_SUPPORT = "priority_support"
    ADVANCED_FILTERS = "advanced_filters"

    # Privacy features
    CONTENT_MASKING = "content_masking"

    # Enhanced features
    UNLIMITED_APPLICATIONS = "unlimited_applications"
    JOB_ALERTS = "job_alerts"
    COMPANY_INSIGHTS = "company_insights"
    SALARY_INSIGHTS = "salary_insights"

    # Job posting features
    PRESCREEN_QUESTIONS = "prescreen_questions"


_BASIC_FEATURES = frozenset({
    PremiumFeature.JOB_ALERTS,
    PremiumFeature.ADVANCED_FILTERS,
    PremiumFeature.RESUME_VISIBILITY,
    PremiumFeature.CONTENT_MASKING,
})

PLAN_FEATURES: dict[PlanType, frozenset[PremiumFeature]] = {
    PlanType.BASIC: _BASIC_FEATURES,
    PlanType.PREMIUM: _BASIC_FEATURES | {
        PremiumFeature.AI_RESUME_ANALYZER,
        PremiumFeature.ONE_CLICK_APPLY,
        PremiumFeature.LAZY_APPLY,
        PremiumFeature.UNLIMITED_APPLICATIONS,
        PremiumFeature.COMPANY_INSIGHTS,
        PremiumFeature.SALARY_INSIGHTS,
        PremiumFeature.PRESCREEN_QUESTIONS,
    },
    PlanType.ENTERPRISE: frozenset(PremiumFeature),
}


def _active_plan(subscription: Optional[Subscription]) -> Optional[PlanType]:
    if subscription is None or not subscription.is_active():
        return None
    try:
        return PlanType(subscription.plan_type)
    except ValueError:
        return None


def has_premium_access(user: Optional[User], subscription: Optional[Subscription]) -> bool:
    """True for admins and for any active paid plan."""
    if user is None:
        return False
    if user.is_admin():
        return True
    return _active_plan(subscription) is not None


def has_premium_feature(
    feature: PremiumFeature | str,
    user: Optional[User],
    subscription: Optional[Subscription]
) -> bool:
    """
    Check whether `user` may use `feature` under `subscription`.

    Admins get every feature; everyone else needs an active subscription
    whose plan includes it. Unknown plans and unknown features grant nothing.
    """
    if user is None:
        return False
    if user.is_admin():
        return True

    plan = _active_plan(subscription)
    if plan is None:
        return False
    try:
        feature = PremiumFeature(feature)
    except ValueError:
        return False
    return feature in PLAN_FEATURES[plan]


def get_available_features(user: Optional[User], subscription: Optional[Subscription]) -> list[PremiumFeature]:
    return [f for f in PremiumFeature if has_premium_feature(f, user, subscription)]
