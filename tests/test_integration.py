"""
Integration Tests for the Giving Service
Tests through the HTTP API with an in-memory SQLite database
"""
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from giving_api.main import app
from giving_api.database.database import get_db
from giving_api.models import Base, Donation, DonationStatus, DonationType, PaymentProvider, Currency
from giving_api.services.payment_provider import get_payment_client

TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_HEADERS = {"x-user-id": "admin-1", "x-user-role": "admin"}


class FakePaymentClient:
    def __init__(self):
        self.create_checkout_session = AsyncMock(return_value={
            "id": "cs_test_123",
            "url": "https://checkout.stripe.com/c/pay/cs_test_123",
            "mode": "payment",
            "payment_intent": "unique-intent"
        })


# ============================================================================
# FIXTURES
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def session_factory():
    """Fresh database with all tables for every test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, payment_client):
    """Create test client with database and payment provider overrides"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_client] = lambda: payment_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_campaign(client, slug="help-the-school", state="active", allow_donation_on_complete=False):
    response = await client.post("/campaigns", json={
        "title": "Help the school",
        "slug": slug,
        "state": state,
        "allow_donation_on_complete": allow_donation_on_complete,
        "currency": "BGN"
    })
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def campaign(client):
    return await create_campaign(client)


@pytest_asyncio.fixture
async def vault(client, campaign):
    response = await client.post("/vaults", json={"name": "Main vault", "campaign_id": campaign["id"]})
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def person(client):
    response = await client.post("/persons", json={
        "first_name": "Jane",
        "last_name": "Donor",
        "email": "jane@example.com"
    })
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def donation(session_factory, vault):
    """Donation created by the payment flow, waiting for confirmation"""
    async with session_factory() as session:
        donation = Donation(
            type=DonationType.DONATION,
            status=DonationStatus.INITIAL,
            provider=PaymentProvider.STRIPE,
            currency=Currency.BGN,
            amount=1000,
            target_vault_id=vault["id"],
            ext_payment_intent_id="pi_integration_1",
            billing_email="donor@example.com"
        )
        session.add(donation)
        await session.commit()
        return donation.id


# ============================================================================
# HEALTH
# ============================================================================

@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["kafka_connected"] is False


@pytest.mark.asyncio
async def test_readiness_reports_payment_circuit(client):
    response = await client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["database"] == "connected"
    assert data["payment_provider"] == "closed"


@pytest.mark.asyncio
async def test_request_id_echoed(client):
    response = await client.get("/health", headers={"x-request-id": "req-42"})
    assert response.headers["x-request-id"] == "req-42"

    response = await client.get("/health")
    assert response.headers["x-request-id"]


# ============================================================================
# CAMPAIGNS, VAULTS, PERSONS
# ============================================================================

@pytest.mark.asyncio
async def test_new_vault_starts_empty(client, vault, campaign):
    assert vault["amount"] == 0
    assert vault["campaign_id"] == campaign["id"]

    response = await client.get(f"/campaigns/{campaign['id']}/vaults")
    assert response.status_code == 200
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_duplicate_campaign_slug(client, campaign):
    response = await client.post("/campaigns", json={"title": "Again", "slug": campaign["slug"]})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_vault_for_unknown_campaign(client):
    response = await client.post("/vaults", json={"name": "Orphan", "campaign_id": "missing"})
    assert response.status_code == 404
    assert response.json()["message"] == "No Campaign record with ID: missing"


@pytest.mark.asyncio
async def test_get_unknown_person(client):
    response = await client.get("/persons/missing")
    assert response.status_code == 404


# ============================================================================
# DONATION UPDATES
# ============================================================================

@pytest.mark.asyncio
async def test_succeeded_update_credits_vault_once(client, donation, vault):
    response = await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["status"] == "succeeded"

    response = await client.get(f"/vaults/{vault['id']}")
    assert response.json()["amount"] == 1000

    # Repeating the update must not credit the vault again
    response = await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    response = await client.get(f"/vaults/{vault['id']}")
    assert response.json()["amount"] == 1000


@pytest.mark.asyncio
async def test_non_success_update_leaves_vault(client, donation, vault):
    response = await client.patch(f"/donations/{donation}", json={"status": "payment_failed"}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    response = await client.get(f"/vaults/{vault['id']}")
    assert response.json()["amount"] == 0


@pytest.mark.asyncio
async def test_assign_person_keeps_status(client, donation, person):
    await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)

    response = await client.patch(
        f"/donations/{donation}",
        json={"target_person_id": person["id"]},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 200
    data = response.json()
    assert data["person_id"] == person["id"]
    assert data["status"] == "succeeded"

    response = await client.get(f"/donations/person/{person['id']}")
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_unknown_person_leaves_donation_unchanged(client, donation, vault):
    response = await client.patch(
        f"/donations/{donation}",
        json={"status": "succeeded", "target_person_id": "missing-person"},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 404

    response = await client.get(f"/donations/{donation}")
    data = response.json()
    assert data["status"] == "initial"
    assert data["person_id"] is None

    response = await client.get(f"/vaults/{vault['id']}")
    assert response.json()["amount"] == 0


@pytest.mark.asyncio
async def test_update_unknown_donation(client):
    response = await client.patch("/donations/missing", json={"status": "succeeded"}, headers=ADMIN_HEADERS)
    assert response.status_code == 404
    assert response.json()["message"] == "No Donation record with ID: missing"


@pytest.mark.asyncio
async def test_refunded_donation_cannot_succeed_again(client, donation, vault):
    await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)
    response = await client.patch(f"/donations/{donation}", json={"status": "refund"}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    response = await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)
    assert response.status_code == 406

    response = await client.get(f"/vaults/{vault['id']}")
    assert response.json()["amount"] == 1000


@pytest.mark.asyncio
async def test_update_requires_authentication(client, donation):
    response = await client.patch(f"/donations/{donation}", json={"status": "succeeded"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_requires_admin(client, donation):
    response = await client.patch(
        f"/donations/{donation}",
        json={"status": "succeeded"},
        headers={"x-user-id": "user-1", "x-user-role": "user"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_rejects_unknown_status(client, donation):
    response = await client.patch(f"/donations/{donation}", json={"status": "paid"}, headers=ADMIN_HEADERS)
    assert response.status_code == 422


# ============================================================================
# DONATION LISTS
# ============================================================================

@pytest.mark.asyncio
async def test_public_list_only_shows_succeeded(client, session_factory, donation, vault, campaign):
    async with session_factory() as session:
        session.add(Donation(amount=500, target_vault_id=vault["id"], status=DonationStatus.WAITING))
        await session.commit()

    await client.patch(f"/donations/{donation}", json={"status": "succeeded"}, headers=ADMIN_HEADERS)

    response = await client.get("/donations/list-public", params={"campaign_id": campaign["id"]})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["donations"][0]["id"] == donation
    assert "billing_email" not in data["donations"][0]

    response = await client.get("/donations", params={"campaign_id": campaign["id"]})
    assert response.json()["total"] == 2


# ============================================================================
# CHECKOUT SESSIONS
# ============================================================================

@pytest.mark.asyncio
async def test_checkout_for_active_campaign(client, campaign, payment_client):
    response = await client.post("/donations/create-checkout-session", json={
        "mode": "payment",
        "amount": 100,
        "campaign_id": campaign["id"],
        "success_url": "http://test.com/success",
        "cancel_url": "http://test.com/cancel"
    })

    assert response.status_code == 200
    assert response.json()["id"] == "cs_test_123"
    payment_client.create_checkout_session.assert_awaited_once()
    params = payment_client.create_checkout_session.await_args.args[0]
    assert params["payment_intent_data"]["metadata"]["campaignId"] == campaign["id"]


@pytest.mark.asyncio
async def test_checkout_rejected_for_complete_campaign(client, payment_client):
    campaign = await create_campaign(client, slug="finished", state="complete")

    response = await client.post("/donations/create-checkout-session", json={
        "mode": "payment",
        "amount": 100,
        "campaign_id": campaign["id"],
        "success_url": "http://test.com/success",
        "cancel_url": "http://test.com/cancel"
    })

    assert response.status_code == 406
    assert response.json()["message"] == "Campaign cannot accept donations in state: complete"
    payment_client.create_checkout_session.assert_not_awaited()


@pytest.mark.asyncio
async def test_checkout_allowed_for_complete_campaign_with_override(client, payment_client):
    campaign = await create_campaign(client, slug="finished-open", state="complete", allow_donation_on_complete=True)

    response = await client.post("/donations/create-checkout-session", json={
        "mode": "payment",
        "amount": 100,
        "campaign_id": campaign["id"],
        "success_url": "http://test.com/success",
        "cancel_url": "http://test.com/cancel"
    })

    assert response.status_code == 200
    payment_client.create_checkout_session.assert_awaited_once()


@pytest.mark.asyncio
async def test_checkout_unknown_campaign(client, payment_client):
    response = await client.post("/donations/create-checkout-session", json={
        "mode": "payment",
        "amount": 100,
        "campaign_id": "missing",
        "success_url": "http://test.com/success",
        "cancel_url": "http://test.com/cancel"
    })

    assert response.status_code == 404
    payment_client.create_checkout_session.assert_not_awaited()
