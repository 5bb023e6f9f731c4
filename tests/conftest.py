"""
Test configuration and fixtures
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment before the application reads its settings
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["SEED_REFERENCE_DATA"] = "false"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"

from venue_admin.core.database import Database
from venue_admin.core.exceptions import UpstreamServiceError
from venue_admin.core.security import create_session_token
from venue_admin.models.user import User, UserRole
from venue_admin.models.venue import Venue, VenueStatus
from venue_admin.schemas.auth import SessionUser
from venue_admin.schemas.upload import StoredMedia
from venue_admin.services.identity_service import IdentityRecord
from venue_admin.services.payment_service import AccountStatus, OnboardingLink
from venue_admin.services.storage_service import KEY_PREFIX, build_key


class FakeStorage:
    """In-memory stand-in for MediaStorage"""

    def __init__(self):
        self.objects = {}
        self.fail_keys = set()
        self.errors = {}
        self.relocations = []

    def public_url(self, storage_key):
        return f"https://media.test/{storage_key}"

    async def upload(self, content, filename, content_type=None, namespace=None):
        key = build_key(filename, namespace)
        self.objects[key] = content
        return StoredMedia(url=self.public_url(key), storage_key=key)

    async def relocate(self, storage_key, from_namespace, to_namespace):
        if storage_key in self.errors:
            raise self.errors[storage_key]
        if storage_key in self.fail_keys:
            raise UpstreamServiceError("storage", f"Failed to relocate {storage_key}")
        new_key = f"{KEY_PREFIX}/{to_namespace}/{storage_key.rsplit('/', 1)[-1]}"
        self.objects[new_key] = self.objects.pop(storage_key, b"")
        self.relocations.append((storage_key, new_key))
        return StoredMedia(url=self.public_url(new_key), storage_key=new_key)


class FakePayments:
    """In-memory stand-in for PaymentAccountProvisioner"""

    def __init__(self):
        self.fail = False
        self.error = None
        self.calls = []
        self.onboarded = set()

    async def provision(self, venue_id, owner_id, venue_name, owner_email):
        self.calls.append({
            "venue_id": venue_id,
            "owner_id": owner_id,
            "venue_name": venue_name,
            "owner_email": owner_email,
        })
        if self.error is not None:
            raise self.error
        if self.fail:
            raise UpstreamServiceError("stripe", "Payment account creation failed: card_declined")
        return f"acct_test_{len(self.calls)}"

    async def create_onboarding_link(self, account_id, venue_id):
        return OnboardingLink(url=f"https://connect.stripe.test/setup/{account_id}")

    async def retrieve_account(self, account_id):
        complete = account_id in self.onboarded
        return AccountStatus(account_id=account_id, details_submitted=complete, charges_enabled=complete)


class FakeIdentity:
    """In-memory stand-in for FirebaseIdentityProvider"""

    VALID_TOKEN = "valid-firebase-token"

    def __init__(self):
        self.users = {}
        self.verified_tokens = []
        self.lookup_error = None

    async def verify_id_token(self, token):
        if token != self.VALID_TOKEN:
            raise ValueError("Invalid ID token")
        self.verified_tokens.append(token)
        return {"uid": "firebase-uid"}

    async def get_user_by_email(self, email):
        if self.lookup_error is not None:
            raise self.lookup_error
        uid = self.users.get(email)
        return IdentityRecord(uid=uid, email=email) if uid else None


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database per test"""
    db = Database("sqlite+aiosqlite:///:memory:", echo=False)
    await db.connect()
    yield db
    await db.dispose()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest_asyncio.fixture
async def app(database, storage, payments, identity):
    """Application wired to the test database and fake providers"""
    from venue_admin.main import create_app

    application = create_app()
    application.state.database = database
    application.state.storage = storage
    application.state.payments = payments
    application.state.identity = identity
    yield application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


async def create_user(database, **fields) -> User:
    async with database.session() as session:
        user = User(**fields)
        session.add(user)
        await session.commit()
        return user


async def create_venue(database, owner, **fields) -> Venue:
    values = {
        "name": "Test Arena",
        "address": "1 Test Street",
        "country": "GB",
        "currency": "GBP",
        "longitude": -0.12,
        "latitude": 51.5,
        "commission_percentage": 10,
        "status": VenueStatus.PENDING,
    }
    values.update(fields)
    async with database.session() as session:
        venue = Venue(owner_id=owner.id, **values)
        session.add(venue)
        await session.commit()
        return venue


@pytest_asyncio.fixture
async def admin_user(database, identity):
    identity.users["admin@venues.test"] = "firebase-admin-uid"
    return await create_user(
        database,
        firebase_id="firebase-admin-uid",
        name="Admin User",
        email="admin@venues.test",
        role=UserRole.ADMIN,
        permissions=["venues:write"],
    )


@pytest_asyncio.fixture
async def venue_owner(database):
    return await create_user(
        database,
        firebase_id="firebase-owner-uid",
        name="Olivia Owner",
        email="owner@venues.test",
        role=UserRole.VENUE_OWNER,
        country="GB",
        currency="GBP",
    )


@pytest_asyncio.fixture
async def customer_user(database, identity):
    identity.users["customer@venues.test"] = "firebase-customer-uid"
    return await create_user(
        database,
        firebase_id="firebase-customer-uid",
        name="Casey Customer",
        email="customer@venues.test",
        role=UserRole.CUSTOMER,
        username="casey",
    )


def auth_headers(user: User) -> dict:
    token = create_session_token(SessionUser(
        id=str(user.id),
        email=user.email or "",
        name=user.name,
        role=user.role.value,
        firebase_id=user.firebase_id,
    ))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def customer_headers(customer_user):
    return auth_headers(customer_user)


@pytest.fixture
def venue_payload(venue_owner):
    return {
        "ownerId": str(venue_owner.id),
        "name": "Riverside Sports Centre",
        "description": "Indoor courts by the river",
        "address": "12 Bank Street, London",
        "country": "GB",
        "currency": "GBP",
        "longitude": -0.1276,
        "latitude": 51.5072,
        "commissionPercentage": 12.5,
        "sportsTypes": ["Padel", "Tennis"],
        "amenities": ["parking"],
        "images": [],
    }


@pytest.fixture
def make_venue(database):
    """Factory inserting a venue directly, bypassing the API"""
    async def _make_venue(owner, **fields) -> Venue:
        return await create_venue(database, owner, **fields)
    return _make_venue


@pytest_asyncio.fixture
async def owner_without_email(database):
    return await create_user(
        database,
        firebase_id="firebase-phone-only-uid",
        name="Phone Only Owner",
        email=None,
        role=UserRole.VENUE_OWNER,
    )


@pytest.fixture
def make_user(database):
    """Factory inserting a user directly"""
    async def _make_user(**fields) -> User:
        return await create_user(database, **fields)
    return _make_user
