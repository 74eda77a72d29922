"""
Integration tests running the clients against the stub club services app.

The stub is served in-process through httpx's ASGI transport, so no server
needs to be running.
"""

import httpx
import pytest
from decimal import Decimal

from club_commerce.domain.cart import CartStore
from club_commerce.domain.checkout import CheckoutOrchestrator
from club_commerce.domain.exceptions import ProcessorRequestError, RemoteServiceError
from club_commerce.domain.models import ClubContext, ProductDraft
from club_commerce.domain.reporting import TransactionFilter
from club_commerce.infrastructure.clients.catalog import CatalogClient
from club_commerce.infrastructure.clients.payments import PaymentsClient
from club_commerce.infrastructure.clients.transactions import TransactionsClient
from club_commerce.infrastructure.storage.cart_storage import InMemoryCartStorage
from club_commerce.shop import ClubAdmin, ProductCatalog, ShopSession, TransactionHistory
from mock_services.club_api.main import DEMO_EMAIL, create_app

BASE_URL = "http://testserver"

pytestmark = pytest.mark.integration


@pytest.fixture
def club_app():
    return create_app()


@pytest.fixture
def transport(club_app) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=club_app)


@pytest.fixture
def clients(transport):
    return (
        CatalogClient(base_url=BASE_URL, transport=transport),
        PaymentsClient(base_url=BASE_URL, transport=transport),
        TransactionsClient(base_url=BASE_URL, transport=transport),
    )


@pytest.fixture
def session(club_context, clients) -> ShopSession:
    catalog_client, payments_client, transactions_client = clients
    return ShopSession(
        context=club_context,
        cart=CartStore(InMemoryCartStorage()),
        catalog=ProductCatalog(catalog_client),
        orchestrator=CheckoutOrchestrator(payments_client),
        history=TransactionHistory(transactions_client),
    )


async def test_catalog_is_folded_into_products(session: ShopSession):
    """Test plan records come back as installment plans of their product"""
    products = await session.load_products()

    assert [p.id for p in products] == ["Season Membership", "Training Kit", "Match Fee"]
    membership = session.catalog.find("Season Membership")
    assert membership.is_membership
    assert [(p.months, p.multiplier) for p in membership.installment_plans] == [(6, Decimal("1.1"))]

    options = session.price_options(session.catalog.find("Training Kit"))
    assert [(o.months, o.total_price) for o in options] == [(0, Decimal("45.00")), (3, Decimal("47.25"))]
    assert [p.id for p in session.products_in("match")] == ["Match Fee"]


async def test_buyer_flow_checkout_and_summary(session: ShopSession):
    """Test browse, fill the cart, check out, then see the latest purchase"""
    await session.load_products()
    session.add_to_cart(session.catalog.find("Training Kit"))
    session.add_to_cart(session.catalog.find("Match Fee"))
    session.add_to_cart(session.catalog.find("Match Fee"))

    assert session.cart.get_total_price() == Decimal("65.00")

    url = await session.checkout()
    assert url.startswith("https://checkout.stripe.test/c/pay/cs_test_")
    assert session.cart.get_total_items() == 3

    latest = await session.checkout_succeeded(DEMO_EMAIL)

    assert session.cart.is_empty
    assert latest.id == "cs_test_0002"
    assert latest.amount == Decimal("55.00")


async def test_checkout_with_stale_price_is_rejected(session: ShopSession, club_app):
    """Test the processor's error body reaches the caller and the cart survives"""
    await session.load_products()
    session.add_to_cart(session.catalog.find("Match Fee"))
    for record in club_app.state.products[("Riverside FC", "U12", "Division 1")]:
        record["stripe_price_id"] = record["stripe_price_id"] + "_rotated"

    with pytest.raises(ProcessorRequestError) as exc_info:
        await session.checkout()

    assert exc_info.value.payload["unknown"] == ["Match Fee"]
    assert session.cart.get_total_items() == 1


async def test_checkout_cancelled_clears_cart(session: ShopSession):
    await session.load_products()
    session.add_to_cart(session.catalog.find("Match Fee"))

    session.checkout_cancelled()

    assert session.cart.is_empty


async def test_history_report(session: ShopSession):
    """Test reports aggregate the fetched history"""
    await session.history.refresh(DEMO_EMAIL, session.context)

    report = session.history.report(TransactionFilter(status="completed"))
    assert report.count == 1
    assert report.spend_by_category == {"merchandise": Decimal("45.00"), "match": Decimal("10.00")}

    everything = session.history.report(TransactionFilter(), spend_category="membership")
    assert everything.count == 2
    assert everything.total_spend == Decimal("132.00")


async def test_unknown_member_history_fails_and_resets(session: ShopSession):
    await session.history.refresh(DEMO_EMAIL, session.context)

    with pytest.raises(RemoteServiceError) as exc_info:
        await session.history.refresh("stranger@example.com", session.context)

    assert exc_info.value.status_code == 404
    assert session.history.transactions == []
    assert session.history.error == "Failed to load transactions."


async def test_admin_publishes_products(clients):
    """Test published drafts are listed back with their plans"""
    catalog_client, payments_client, _ = clients
    context = ClubContext(club_name="Hillside United", age_group="U14", division="Division 2")
    admin = ClubAdmin(context, catalog_client, payments_client)

    variants = await admin.publish_products(
        [ProductDraft(name="Kit", price="40.00", category="merchandise", selected_plans=[0, 6])]
    )
    assert [v.price for v in variants] == [Decimal("40.00"), Decimal("44.00")]

    products = await ProductCatalog(catalog_client).refresh(context)
    assert [p.id for p in products] == ["Kit"]
    assert [p.months for p in products[0].installment_plans] == [6]


async def test_admin_payout_account_lifecycle(clients):
    """Test a new club has no account until onboarding starts"""
    catalog_client, payments_client, _ = clients
    admin = ClubAdmin(
        ClubContext(club_name="Hillside United", age_group="U14", division="Division 2"),
        catalog_client,
        payments_client,
    )

    assert await admin.payment_account_status() is None
    with pytest.raises(RemoteServiceError) as exc_info:
        await admin.dashboard_link()
    assert exc_info.value.status_code == 404

    onboarding_url = await admin.start_onboarding("treasurer@hillside.example")
    account_id = await admin.payment_account_status()

    assert onboarding_url == f"https://connect.stripe.test/setup/{account_id}"
    assert await admin.dashboard_link() == f"https://connect.stripe.test/express/{account_id}"


async def test_demo_club_has_account(clients, club_context):
    catalog_client, payments_client, _ = clients
    admin = ClubAdmin(club_context, catalog_client, payments_client)

    assert await admin.payment_account_status() == "acct_demo"
