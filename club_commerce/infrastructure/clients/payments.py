"""Payments service HTTP client for checkout sessions and club payout accounts"""

from typing import Optional, Sequence

from club_commerce.domain.exceptions import ProcessorRequestError, RemoteServiceError
from club_commerce.domain.models import CheckoutLineItem, ClubContext
from club_commerce.infrastructure.clients.base import ClubServiceClient, context_params
from club_commerce.infrastructure.clients.schemas import (
    AccountStatusResponse,
    CheckoutSessionResponse,
    LoginLinkResponse,
    OnboardingResponse,
)


class PaymentsClient(ClubServiceClient):
    """Client for the payment processor endpoints of the club gateway"""

    service = "payments"

    async def create_checkout_session(
        self, context: ClubContext, line_items: Sequence[CheckoutLineItem]
    ) -> str:
        """
        Create a hosted checkout session and return its URL.

        A single attempt: the session endpoint is not idempotent, so a failed
        request is surfaced rather than retried.

        Raises:
            ProcessorRequestError: Non-success status (carries the error body),
                or timeout / transport failure (no status, no payload)
            AuthenticationError: No identity token available
            InvalidResponseShapeError: Success without a checkout URL
        """
        body = {
            **context_params(context),
            "cart": [
                {
                    "id": item.product_id,
                    "productId": item.catalog_product_id,
                    "priceId": item.catalog_price_id,
                    "quantity": item.quantity,
                }
                for item in line_items
            ],
        }

        try:
            response = await self._send("POST", "/stripe/create-checkout-session", json=body)
        except RemoteServiceError as e:
            raise ProcessorRequestError(f"Failed to create checkout session: {e}") from e

        if response.is_error:
            self._record_failure()
            try:
                payload = response.json()
            except ValueError:
                payload = response.text or None
            raise ProcessorRequestError(
                f"Failed to create checkout session: {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )

        return self._parse(response, CheckoutSessionResponse).checkoutUrl

    async def get_account_status(self, club_name: str) -> Optional[str]:
        """Payout account id of the club, or None when it has not onboarded"""
        response = await self._request("GET", "/stripe/status", params={"clubName": club_name})
        return self._parse(response, AccountStatusResponse).stripe_account_id

    async def create_connected_account(self, club_name: str, email: str) -> str:
        """Start payout onboarding for a club; returns the onboarding URL"""
        response = await self._request(
            "POST", "/stripe/connect", json={"clubName": club_name, "email": email}
        )
        return self._parse(response, OnboardingResponse).onboarding_url

    async def create_login_link(self, club_name: str) -> str:
        """One-time link into the club's payout dashboard"""
        response = await self._request("POST", "/stripe/login-link", json={"clubName": club_name})
        return self._parse(response, LoginLinkResponse).url
