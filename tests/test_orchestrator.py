"""
Document Generator Tests

Generation and regeneration against the real document store on an
in-memory database, with a scripted generation client.

Run with: python -m pytest tests/test_orchestrator.py -v
"""

import pytest

from models import db, Document, Profile
from services.documents import (
    DocumentGenerator,
    DocumentStore,
    InvalidDocumentType,
    InvalidFormData,
    MissingFormData,
    NotFound,
    QuotaExceeded,
    StorageFailure,
    UpstreamUnavailable,
    DOCUMENT_SYSTEM_PROMPT,
)
from services.usage_service import UsageCounter

from conftest import FakeGenerationClient, LATE_RENT_FORM, OWNER_ID, OTHER_OWNER_ID


class BrokenUsageCounter(UsageCounter):
    """Usage counter whose increment always fails."""

    def increment(self, owner_id):
        raise StorageFailure("Failed to record document usage")


@pytest.fixture
def generator(app_ctx, fake_client):
    return DocumentGenerator(DocumentStore(), fake_client, UsageCounter())


def _usage(owner_id):
    return db.session.get(Profile, owner_id).documents_this_month


class TestGenerate:
    """First-time generation."""

    def test_generates_and_saves(self, generator, fake_client):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        assert doc.title == 'Late Rent Notice - J. Smith'
        assert doc.content == fake_client.reply
        assert doc.form_data == LATE_RENT_FORM
        assert doc.document_type == 'late_rent'
        assert doc.state == 'TX'
        assert doc.signature_status is None

        saved = db.session.get(Document, doc.id)
        assert saved.user_id == OWNER_ID

    def test_sends_system_prompt_and_built_prompt(self, generator, fake_client):
        generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        assert len(fake_client.calls) == 1
        system_prompt, user_prompt = fake_client.calls[0]
        assert system_prompt == DOCUMENT_SYSTEM_PROMPT
        assert '- Total Amount Owed: $450.00' in user_prompt

    def test_cross_references_are_copied(self, generator):
        form_data = dict(LATE_RENT_FORM, propertyId='prop-1', tenantId='tenant-1')
        doc = generator.generate(OWNER_ID, 'late_rent', form_data)

        assert doc.property_id == 'prop-1'
        assert doc.tenant_id == 'tenant-1'

    def test_counts_usage_once(self, generator):
        generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)
        assert _usage(OWNER_ID) == 1

    def test_unknown_type_calls_nothing(self, generator, fake_client):
        with pytest.raises(InvalidDocumentType):
            generator.generate(OWNER_ID, 'eviction', LATE_RENT_FORM)

        assert fake_client.calls == []
        assert Document.query.count() == 0

    def test_invalid_form_calls_nothing(self, generator, fake_client):
        with pytest.raises(InvalidFormData):
            generator.generate(OWNER_ID, 'late_rent', {'amountDue': 450})

        assert fake_client.calls == []

    def test_upstream_failure_saves_nothing(self, app_ctx):
        client = FakeGenerationClient(error=UpstreamUnavailable("Text generation service returned status 503", 503))
        generator = DocumentGenerator(DocumentStore(), client, UsageCounter())

        with pytest.raises(UpstreamUnavailable):
            generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        assert Document.query.count() == 0
        assert _usage(OWNER_ID) == 0

    def test_usage_failure_keeps_document(self, app_ctx, fake_client):
        generator = DocumentGenerator(DocumentStore(), fake_client, BrokenUsageCounter())

        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        assert db.session.get(Document, doc.id) is not None


class TestQuota:
    """Plan tier limits are checked before the model is called."""

    def test_free_tier_monthly_limit(self, generator, fake_client):
        profile = db.session.get(Profile, OWNER_ID)
        profile.documents_this_month = 3
        db.session.commit()

        with pytest.raises(QuotaExceeded):
            generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        assert fake_client.calls == []

    def test_free_tier_document_types(self, generator, fake_client):
        form_data = {
            'tenantName': 'J. Smith',
            'newLeaseStart': '2025-07-01',
            'newLeaseEnd': '2026-06-30',
            'newRent': 1250,
        }
        with pytest.raises(QuotaExceeded):
            generator.generate(OWNER_ID, 'lease_renewal', form_data)

        assert fake_client.calls == []

    def test_paid_tier_is_unlimited(self, generator):
        profile = db.session.get(Profile, OTHER_OWNER_ID)
        profile.documents_this_month = 50
        db.session.commit()

        doc = generator.generate(OTHER_OWNER_ID, 'late_rent', LATE_RENT_FORM)
        assert doc.user_id == OTHER_OWNER_ID


class TestRegenerate:
    """Regeneration from stored form data."""

    def test_replaces_content_only(self, generator, fake_client):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)
        doc_id, title, created_at = doc.id, doc.title, doc.created_at

        fake_client.reply = 'Second draft'
        doc = generator.regenerate(OWNER_ID, doc_id)

        assert doc.content == 'Second draft'
        assert doc.title == title
        assert doc.form_data == LATE_RENT_FORM
        assert doc.created_at == created_at

    def test_repeated_regeneration_sends_identical_prompts(self, generator, fake_client):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        first = generator.regenerate(OWNER_ID, doc.id).content
        second = generator.regenerate(OWNER_ID, doc.id).content

        assert first == second
        assert fake_client.calls[0] == fake_client.calls[1] == fake_client.calls[2]

    def test_does_not_count_usage(self, generator):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)
        generator.regenerate(OWNER_ID, doc.id)

        assert _usage(OWNER_ID) == 1

    def test_missing_form_data(self, generator, fake_client):
        doc = DocumentStore().insert(OWNER_ID, 'late_rent', 'Late Rent Notice - J. Smith', 'old', None)

        with pytest.raises(MissingFormData):
            generator.regenerate(OWNER_ID, doc.id)

        assert fake_client.calls == []

    def test_other_owner_gets_not_found(self, generator, fake_client):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)

        with pytest.raises(NotFound):
            generator.regenerate(OTHER_OWNER_ID, doc.id)

        assert len(fake_client.calls) == 1

    def test_unknown_document(self, generator):
        with pytest.raises(NotFound):
            generator.regenerate(OWNER_ID, 'does-not-exist')

    def test_failure_keeps_old_content(self, generator, fake_client):
        doc = generator.generate(OWNER_ID, 'late_rent', LATE_RENT_FORM)
        original = doc.content

        fake_client.error = UpstreamUnavailable("Text generation service is unreachable")
        with pytest.raises(UpstreamUnavailable):
            generator.regenerate(OWNER_ID, doc.id)

        assert db.session.get(Document, doc.id).content == original
