"""
Stripe payment account provisioning tests
"""

import pytest
from types import SimpleNamespace

import stripe

from venue_admin.config import settings
from venue_admin.core.exceptions import UpstreamServiceError
from venue_admin.services.payment_service import AccountStatus, PaymentAccountProvisioner

pytestmark = pytest.mark.unit


@pytest.fixture
def provisioner():
    return PaymentAccountProvisioner()


class TestProvision:

    async def test_creates_standard_account(self, provisioner, monkeypatch):
        calls = []

        def fake_create(**params):
            calls.append(params)
            return SimpleNamespace(id="acct_123")

        monkeypatch.setattr(stripe.Account, "create", fake_create)

        account_id = await provisioner.provision(
            venue_id="venue-1",
            owner_id="owner-1",
            venue_name="Riverside Sports Centre",
            owner_email="owner@venues.test",
        )

        assert account_id == "acct_123"
        params = calls[0]
        assert params["type"] == "standard"
        assert params["email"] == "owner@venues.test"
        assert params["business_type"] == "company"
        assert params["company"] == {"name": "Riverside Sports Centre"}
        assert params["metadata"] == {"venueId": "venue-1", "ownerId": "owner-1"}
        assert params["capabilities"]["card_payments"] == {"requested": True}
        assert params["capabilities"]["transfers"] == {"requested": True}

    async def test_stripe_error_becomes_upstream_error(self, provisioner, monkeypatch):
        def fake_create(**params):
            raise stripe.StripeError("Your account cannot create connected accounts")

        monkeypatch.setattr(stripe.Account, "create", fake_create)

        with pytest.raises(UpstreamServiceError) as exc_info:
            await provisioner.provision("venue-1", "owner-1", "Venue", "owner@venues.test")
        assert exc_info.value.service == "stripe"
        assert "connected accounts" in exc_info.value.message


class TestOnboarding:

    async def test_onboarding_link_urls(self, provisioner, monkeypatch):
        calls = []

        def fake_link(**params):
            calls.append(params)
            return SimpleNamespace(url="https://connect.stripe.com/setup/s/abc", expires_at=1_900_000_000)

        monkeypatch.setattr(stripe.AccountLink, "create", fake_link)

        link = await provisioner.create_onboarding_link("acct_123", "venue-1")

        assert link.url == "https://connect.stripe.com/setup/s/abc"
        assert link.expires_at.timestamp() == 1_900_000_000
        assert calls[0]["account"] == "acct_123"
        assert calls[0]["type"] == "account_onboarding"
        assert calls[0]["refresh_url"] == f"{settings.APP_URL}/dashboard/venues/venue-1"
        assert calls[0]["return_url"] == f"{settings.APP_URL}/dashboard/venues/venue-1?onboarding=complete"

    async def test_retrieve_account(self, provisioner, monkeypatch):
        monkeypatch.setattr(
            stripe.Account,
            "retrieve",
            lambda account_id: SimpleNamespace(id=account_id, details_submitted=True, charges_enabled=False)
        )

        status = await provisioner.retrieve_account("acct_123")
        assert status.details_submitted
        assert not status.onboarding_complete

    def test_onboarding_complete_requires_both_flags(self):
        assert AccountStatus("acct", details_submitted=True, charges_enabled=True).onboarding_complete
        assert not AccountStatus("acct", details_submitted=False, charges_enabled=True).onboarding_complete
