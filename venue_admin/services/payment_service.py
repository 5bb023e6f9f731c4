"""
Payment account provisioning with Stripe Connect
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import stripe

from venue_admin.config import settings
from venue_admin.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

# Initialize Stripe
stripe.api_key = settings.STRIPE_SECRET_KEY


@dataclass
class OnboardingLink:
    url: str
    expires_at: Optional[datetime] = None


@dataclass
class AccountStatus:
    account_id: str
    details_submitted: bool
    charges_enabled: bool

    @property
    def onboarding_complete(self) -> bool:
        return self.details_submitted and self.charges_enabled


class PaymentAccountProvisioner:
    """Creates and inspects Stripe standard connected accounts for venues"""

    async def provision(
        self,
        venue_id: str,
        owner_id: str,
        venue_name: str,
        owner_email: str
    ) -> str:
        """
        Create a standard connected account and return its id.

        No onboarding link is created here; links are short-lived and are
        requested on demand.
        """
        try:
            account = await asyncio.to_thread(
                stripe.Account.create,
                type="standard",
                email=owner_email,
                business_type="company",
                company={"name": venue_name},
                metadata={"venueId": venue_id, "ownerId": owner_id},
                capabilities={
                    "card_payments": {"requested": True},
                    "transfers": {"requested": True},
                },
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating account for venue {venue_id}: {e}")
            raise UpstreamServiceError("stripe", f"Payment account creation failed: {e}")

        logger.info(f"Created Stripe account {account.id} for venue {venue_id}")
        return account.id

    async def create_onboarding_link(self, account_id: str, venue_id: str) -> OnboardingLink:
        venue_url = f"{settings.APP_URL}/dashboard/venues/{venue_id}"
        try:
            link = await asyncio.to_thread(
                stripe.AccountLink.create,
                account=account_id,
                refresh_url=venue_url,
                return_url=f"{venue_url}?onboarding=complete",
                type="account_onboarding",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating onboarding link for {account_id}: {e}")
            raise UpstreamServiceError("stripe", f"Onboarding link creation failed: {e}")

        expires_at = None
        if getattr(link, "expires_at", None):
            expires_at = datetime.fromtimestamp(link.expires_at, tz=timezone.utc)
        return OnboardingLink(url=link.url, expires_at=expires_at)

    async def retrieve_account(self, account_id: str) -> AccountStatus:
        try:
            account = await asyncio.to_thread(stripe.Account.retrieve, account_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe error retrieving account {account_id}: {e}")
            raise UpstreamServiceError("stripe", f"Payment account lookup failed: {e}")

        return AccountStatus(
            account_id=account.id,
            details_submitted=bool(account.details_submitted),
            charges_enabled=bool(account.charges_enabled),
        )
