"""Unit tests for checkout orchestration"""

import httpx
import pytest
from prometheus_client import REGISTRY
from unittest.mock import AsyncMock

from club_commerce.domain.cart import CartStore
from club_commerce.domain.checkout import CheckoutOrchestrator, build_line_items
from club_commerce.domain.exceptions import (
    AuthenticationError,
    EmptyCartError,
    MissingContextError,
    ProcessorRequestError,
)
from club_commerce.domain.models import CheckoutLineItem, ClubContext
from club_commerce.infrastructure.clients.payments import PaymentsClient

CHECKOUT_URL = "https://checkout.stripe.test/c/pay/cs_test_123"


def _outcome_count(outcome: str) -> float:
    return REGISTRY.get_sample_value("club_checkout_sessions_total", {"outcome": outcome}) or 0.0


@pytest.fixture
def payments():
    gateway = AsyncMock()
    gateway.create_checkout_session.return_value = CHECKOUT_URL
    return gateway


def test_build_line_items(cart: CartStore, membership, training_kit):
    """Test one line item per cart line with catalog ids and quantity"""
    cart.add_to_cart(membership)
    cart.add_to_cart(training_kit)
    cart.add_to_cart(training_kit)

    assert build_line_items(cart.lines) == [
        CheckoutLineItem("Season Membership", "prod_member", "price_member", 1),
        CheckoutLineItem("Training Kit", "prod_kit", "price_kit", 2),
    ]


async def test_empty_cart_rejected_without_remote_call(cart: CartStore, club_context, payments):
    """Test empty cart fails fast and nothing is sent"""
    orchestrator = CheckoutOrchestrator(payments)

    with pytest.raises(EmptyCartError, match="Cart is empty"):
        await orchestrator.checkout(cart.lines, club_context)

    payments.create_checkout_session.assert_not_awaited()
    assert cart.is_empty


@pytest.mark.parametrize(
    "context",
    [
        ClubContext(club_name=None, age_group="U12", division="Division 1"),
        ClubContext(club_name="Riverside FC", age_group="", division="Division 1"),
        ClubContext(club_name="Riverside FC", age_group="U12", division="  "),
    ],
)
async def test_incomplete_context_rejected(cart: CartStore, membership, payments, context):
    """Test club, age group and division are all required"""
    cart.add_to_cart(membership)
    orchestrator = CheckoutOrchestrator(payments)

    with pytest.raises(MissingContextError):
        await orchestrator.checkout(cart.lines, context)

    payments.create_checkout_session.assert_not_awaited()


async def test_checkout_returns_redirect_url(cart: CartStore, membership, training_kit, club_context, payments):
    """Test the session is requested once with the cart's line items"""
    cart.add_to_cart(membership)
    cart.add_to_cart(training_kit)
    orchestrator = CheckoutOrchestrator(payments)

    url = await orchestrator.checkout(cart.lines, club_context)

    assert url == CHECKOUT_URL
    payments.create_checkout_session.assert_awaited_once()
    sent_context, sent_items = payments.create_checkout_session.await_args.args
    assert sent_context == club_context
    assert [item.catalog_price_id for item in sent_items] == ["price_member", "price_kit"]
    # Checkout never clears the cart
    assert cart.get_total_items() == 2


async def test_processor_rejection_propagates(cart: CartStore, membership, club_context, payments):
    """Test a rejected session surfaces with its payload and leaves the cart alone"""
    payments.create_checkout_session.side_effect = ProcessorRequestError(
        "Failed to create checkout session: 400",
        status_code=400,
        payload={"error": "No such price"},
    )
    cart.add_to_cart(membership)
    orchestrator = CheckoutOrchestrator(payments)

    with pytest.raises(ProcessorRequestError) as exc_info:
        await orchestrator.checkout(cart.lines, club_context)

    assert exc_info.value.payload == {"error": "No such price"}
    assert cart.quantity_of(membership.id) == 1
    payments.create_checkout_session.assert_awaited_once()


async def test_unreachable_gateway_is_a_processor_error(cart: CartStore, membership, club_context):
    """Test a timeout surfaces as ProcessorRequestError after a single attempt"""
    attempts = []

    def timeout(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectTimeout("connect timed out", request=request)

    cart.add_to_cart(membership)
    client = PaymentsClient(base_url="http://gateway.test", transport=httpx.MockTransport(timeout))
    orchestrator = CheckoutOrchestrator(client)
    errors_before = _outcome_count("error")

    with pytest.raises(ProcessorRequestError) as exc_info:
        await orchestrator.checkout(cart.lines, club_context)

    assert exc_info.value.status_code is None
    assert exc_info.value.payload is None
    assert len(attempts) == 1
    assert _outcome_count("error") == errors_before + 1
    assert cart.quantity_of(membership.id) == 1


async def test_missing_token_counts_as_checkout_error(cart: CartStore, membership, club_context, payments):
    """Test an authentication failure is recorded before it propagates"""
    payments.create_checkout_session.side_effect = AuthenticationError("User not authenticated - please log in again")
    cart.add_to_cart(membership)
    orchestrator = CheckoutOrchestrator(payments)
    errors_before = _outcome_count("error")

    with pytest.raises(AuthenticationError):
        await orchestrator.checkout(cart.lines, club_context)

    assert _outcome_count("error") == errors_before + 1
    assert payments.create_checkout_session.await_count == 1
