"""
Plan Tier and Usage Counter Tests

Run with: python -m pytest tests/test_tier_limits.py -v
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from models import db, Profile
from services.documents import QuotaExceeded
from services.usage_service import UsageCounter
from tier_config import can_generate_document, get_tier_defaults

from conftest import OWNER_ID


class TestTierLimits:
    """Static tier rules."""

    def test_free_tier_allows_three_documents(self):
        assert can_generate_document('free', 2, 'late_rent')
        assert not can_generate_document('free', 3, 'late_rent')

    def test_free_tier_document_types(self):
        assert can_generate_document('free', 0, 'maintenance')
        assert can_generate_document('free', 0, 'move_in_out')
        assert not can_generate_document('free', 0, 'lease_agreement')
        assert not can_generate_document('free', 0, 'deposit_return')

    @pytest.mark.parametrize('tier', ['basic', 'pro'])
    def test_paid_tiers_are_unlimited(self, tier):
        assert can_generate_document(tier, 500, 'lease_agreement')

    def test_unknown_tier_falls_back_to_free(self):
        assert get_tier_defaults('enterprise') == get_tier_defaults('free')


class TestUsageCounter:
    """Per-owner monthly counter stored on the profile."""

    def test_increment(self, app_ctx):
        counter = UsageCounter()
        counter.increment(OWNER_ID)
        counter.increment(OWNER_ID)

        assert counter.documents_this_month(OWNER_ID) == 2

    def test_cycle_resets_after_thirty_days(self, app_ctx):
        profile = db.session.get(Profile, OWNER_ID)
        profile.documents_this_month = 3
        profile.billing_cycle_start = datetime.utcnow() - timedelta(days=31)
        db.session.commit()

        counter = UsageCounter()
        counter.check_quota(OWNER_ID, 'late_rent')
        counter.increment(OWNER_ID)

        assert db.session.get(Profile, OWNER_ID).documents_this_month == 1

    def test_quota_exceeded(self, app_ctx):
        profile = db.session.get(Profile, OWNER_ID)
        profile.documents_this_month = 3
        db.session.commit()

        with pytest.raises(QuotaExceeded) as exc_info:
            UsageCounter().check_quota(OWNER_ID, 'late_rent')
        assert exc_info.value.http_status == 403

    def test_owner_without_profile_is_free_tier(self, app_ctx):
        counter = UsageCounter()

        counter.check_quota('no-profile', 'late_rent')
        with pytest.raises(QuotaExceeded):
            counter.check_quota('no-profile', 'lease_agreement')

        counter.increment('no-profile')
        assert counter.documents_this_month('no-profile') == 0

    def test_overlapping_increments_are_both_counted(self, app_ctx):
        """Two requests holding the same profile row each add one."""
        other_session = Session(db.engine)
        try:
            first = UsageCounter()
            second = UsageCounter(session=other_session)

            # Both load the profile before either writes
            assert first.documents_this_month(OWNER_ID) == 0
            assert second.documents_this_month(OWNER_ID) == 0

            first.increment(OWNER_ID)
            second.increment(OWNER_ID)
        finally:
            other_session.close()

        db.session.expire_all()
        assert db.session.get(Profile, OWNER_ID).documents_this_month == 2
