"""
Profile domain entity - current user's role and subscription state
"""
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# User categories (roles)
ROLE_EDITOR = "editor"
ROLE_CLIENT = "client"
ROLE_AGENCY = "agency"
ROLE_ADMIN = "admin"

# Subscription status labels
SUBSCRIPTION_INACTIVE = "Inactive"
SUBSCRIPTION_EXPIRING_SOON = "Expiring Soon"
SUBSCRIPTION_ACTIVE = "Active"

EXPIRING_SOON_DAYS = 7


@dataclass(frozen=True)
class Profile:
    """
    User profile snapshot

    user_category определяет, как интерпретируются финансовые данные
    (editor -> доход, client -> расход, agency -> доход, расход и маржа).
    """
    id: str
    user_category: Optional[str] = None
    full_name: Optional[str] = None
    subscription_tier: Optional[str] = None
    subscription_active: bool = False
    subscription_end_date: Optional[datetime] = None

    def days_remaining(self, now: datetime) -> Optional[int]:
        """Whole days until subscription end, rounded up (None if no end date)."""
        if self.subscription_end_date is None:
            return None
        seconds = (self.subscription_end_date - now).total_seconds()
        return math.ceil(seconds / 86400)

    def subscription_status(self, now: datetime) -> str:
        """
        Subscription badge for the profile screen

        Returns:
            "Inactive" if not active,
            "Expiring Soon" if 7 days or less remain,
            "Active" otherwise
        """
        if not self.subscription_active:
            return SUBSCRIPTION_INACTIVE
        days = self.days_remaining(now)
        if days is not None and days <= EXPIRING_SOON_DAYS:
            return SUBSCRIPTION_EXPIRING_SOON
        return SUBSCRIPTION_ACTIVE
