"""
Shared fixtures: an app on an in-memory database, seeded owner profiles,
a logged-in test client and a scripted generation client.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app import create_app
from models import db, Profile
from services.documents import compute_signature

WEBHOOK_SECRET = 'test-webhook-secret'

OWNER_ID = '11111111-1111-1111-1111-111111111111'
OTHER_OWNER_ID = '22222222-2222-2222-2222-222222222222'

LATE_RENT_FORM = {'tenantName': 'J. Smith', 'amountDue': 450, 'daysLate': 5}


class FakeGenerationClient:
    """Stands in for GenerationClient; records every prompt it is sent."""

    def __init__(self, reply='## THREE-DAY NOTICE TO PAY RENT OR VACATE\n\nPay $450.00 within 3 days.', error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


def signed_headers(body, secret=WEBHOOK_SECRET):
    """Headers carrying a valid HMAC signature for body."""
    if isinstance(body, str):
        body = body.encode('utf-8')
    return {'X-Signature': compute_signature(secret, body)}


@pytest.fixture
def app():
    app = create_app('config.TestConfig')
    with app.app_context():
        db.create_all()
        db.session.add(Profile(
            id=OWNER_ID,
            email='landlord@example.com',
            full_name='Pat Landlord',
            subscription_tier='free'
        ))
        db.session.add(Profile(
            id=OTHER_OWNER_ID,
            email='other@example.com',
            full_name='Other Landlord',
            subscription_tier='pro'
        ))
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(app):
    """Test client with OWNER_ID logged in."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['_user_id'] = OWNER_ID
        sess['_fresh'] = True
    return client


@pytest.fixture
def fake_client():
    return FakeGenerationClient()
