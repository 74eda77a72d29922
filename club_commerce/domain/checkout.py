"""Checkout orchestration - turns the cart into a hosted payment session"""

import logging
import time
from typing import Iterable, List, Protocol, Sequence

from club_commerce.domain.exceptions import (
    AuthenticationError,
    EmptyCartError,
    ProcessorRequestError,
    RemoteServiceError,
)
from club_commerce.domain.models import CartLine, CheckoutLineItem, ClubContext
from club_commerce.infrastructure.observability.logging import log_checkout
from club_commerce.infrastructure.observability.metrics import record_checkout

logger = logging.getLogger(__name__)


class CheckoutSessionGateway(Protocol):
    async def create_checkout_session(
        self, context: ClubContext, line_items: Sequence[CheckoutLineItem]
    ) -> str: ...


def build_line_items(cart_lines: Iterable[CartLine]) -> List[CheckoutLineItem]:
    """Processor line items for every cart line, in cart order"""
    return [
        CheckoutLineItem(
            product_id=line.product.id,
            catalog_product_id=line.product.catalog_product_id,
            catalog_price_id=line.product.catalog_price_id,
            quantity=line.quantity,
        )
        for line in cart_lines
    ]


class CheckoutOrchestrator:
    """Validates a cart and requests one checkout session for it"""

    def __init__(self, payments: CheckoutSessionGateway):
        self.payments = payments

    async def checkout(self, cart_lines: Sequence[CartLine], context: ClubContext) -> str:
        """
        Request a hosted checkout session for the cart.

        Flow:
        1. Reject an empty cart or an incomplete club context (no remote call)
        2. Map cart lines to processor line items
        3. Create the session and return its redirect URL

        No retries. The cart is never modified here: on failure the buyer can
        retry, and clearing after a cancel or success is up to the caller.

        Raises:
            EmptyCartError: Cart has no lines
            MissingContextError: Club name, age group or division missing
            ProcessorRequestError: Session creation was rejected or the
                gateway could not be reached
            AuthenticationError: No identity token available
            InvalidResponseShapeError: Session created without a redirect URL
        """
        if not cart_lines:
            record_checkout("invalid_cart")
            raise EmptyCartError("Cart is empty! Add products before checking out.")

        context.require_complete()

        line_items = build_line_items(cart_lines)
        total_items = sum(item.quantity for item in line_items)
        start_time = time.time()

        try:
            checkout_url = await self.payments.create_checkout_session(context, line_items)
        except ProcessorRequestError as e:
            # No status code: the gateway was never reached
            record_checkout("rejected" if e.status_code is not None else "error", len(line_items))
            logger.warning(f"Checkout session rejected: {e}", extra={"payload": e.payload})
            raise
        except (AuthenticationError, RemoteServiceError) as e:
            record_checkout("error", len(line_items))
            logger.error(f"Checkout session failed: {e}")
            raise

        duration_ms = (time.time() - start_time) * 1000
        record_checkout("created", len(line_items))
        log_checkout(context.club_name, len(line_items), total_items, "created", duration_ms)

        return checkout_url
