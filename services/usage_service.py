# services/usage_service.py
"""
Monthly document usage counter and plan-tier quota checks.

The counter lives on the owner's profile row, so every app instance shares
it through the database. It is incremented once per successful first-time
generation; regeneration never counts.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from models import db, Profile
from tier_config import can_generate_document
from services.documents.exceptions import QuotaExceeded, StorageFailure

logger = logging.getLogger(__name__)

BILLING_CYCLE = timedelta(days=30)


class UsageCounter:

    def __init__(self, session=None):
        self.session = session or db.session

    def _profile(self, owner_id: str):
        return self.session.get(Profile, owner_id)

    def _roll_cycle(self, profile, now=None):
        """Reset the monthly count once the billing cycle has elapsed."""
        now = now or datetime.utcnow()
        if profile.billing_cycle_start is None or profile.billing_cycle_start < now - BILLING_CYCLE:
            profile.documents_this_month = 0
            profile.billing_cycle_start = now

    def documents_this_month(self, owner_id: str) -> int:
        profile = self._profile(owner_id)
        if profile is None:
            return 0
        self._roll_cycle(profile)
        return profile.documents_this_month or 0

    def check_quota(self, owner_id: str, document_type: str) -> None:
        """
        Raise QuotaExceeded when the owner's tier does not allow another document.

        Owners without a profile row are treated as free tier with no usage.
        """
        profile = self._profile(owner_id)
        tier = profile.subscription_tier if profile else 'free'
        used = self.documents_this_month(owner_id)
        if not can_generate_document(tier, used, document_type):
            logger.info(f"Quota reached for owner {owner_id} on {tier} tier ({used} documents, {document_type})")
            raise QuotaExceeded(
                f"Your {tier} plan does not allow generating this document. Upgrade to continue."
            )

    def increment(self, owner_id: str) -> None:
        """Count one generated document against the owner's current cycle."""
        profile = self._profile(owner_id)
        if profile is None:
            logger.warning(f"No profile for owner {owner_id}; usage not recorded")
            return
        try:
            self._roll_cycle(profile)
            self.session.flush()
            # SQL-side increment; overlapping generations must each be counted
            self.session.query(Profile).filter_by(id=owner_id).update(
                {Profile.documents_this_month: Profile.documents_this_month + 1},
                synchronize_session=False
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to record document usage for {owner_id}: {type(e).__name__}")
            raise StorageFailure("Failed to record document usage") from e
