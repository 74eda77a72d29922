"""Buyer and club admin flows composed from the catalog, cart, checkout and reporting pieces"""

import logging
from typing import List, Optional, Sequence

from club_commerce.config import settings
from club_commerce.domain.cart import CartStore
from club_commerce.domain.catalog import build_product_variants, filter_by_category, validate_drafts
from club_commerce.domain.checkout import CheckoutOrchestrator
from club_commerce.domain.exceptions import DomainException, MissingContextError, RemoteServiceError
from club_commerce.domain.installments import plan_options
from club_commerce.domain.models import (
    CartLine,
    ClubContext,
    PlanOption,
    Product,
    ProductDraft,
    ProductVariant,
    Transaction,
)
from club_commerce.domain.reporting import (
    TransactionFilter,
    TransactionReport,
    build_report,
    latest_transaction,
    validate_date_range,
)
from club_commerce.infrastructure.clients.catalog import CatalogClient
from club_commerce.infrastructure.clients.payments import PaymentsClient
from club_commerce.infrastructure.clients.transactions import TransactionsClient

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Last fetched catalog for a club context; never shows stale products after a failure"""

    def __init__(self, client: CatalogClient):
        self.client = client
        self.products: List[Product] = []
        self.error: Optional[str] = None

    async def refresh(self, context: ClubContext) -> List[Product]:
        context.require_complete()

        self.error = None
        try:
            self.products = await self.client.list_products(context)
        except DomainException as e:
            self.products = []
            self.error = "Error loading products. Please try again."
            logger.error(f"Error fetching products: {e}", extra={"club_name": context.club_name})
            raise

        return self.products

    def find(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)


class TransactionHistory:
    """Last fetched purchase history; reset to empty when a fetch fails"""

    def __init__(self, client: TransactionsClient):
        self.client = client
        self.transactions: List[Transaction] = []
        self.error: Optional[str] = None

    async def refresh(self, email: Optional[str], context: ClubContext) -> List[Transaction]:
        if not email or not email.strip():
            raise MissingContextError("A member email is required to load transactions.")

        self.error = None
        try:
            self.transactions = await self.client.list_transactions(email, context)
        except DomainException as e:
            self.transactions = []
            self.error = "Failed to load transactions."
            logger.error(f"Error fetching transactions: {e}", extra={"club_name": context.club_name})
            raise

        return self.transactions

    def report(self, criteria: TransactionFilter, spend_category: str = "all") -> TransactionReport:
        """
        Filtered view of the last fetched history with its spend totals.

        Raises:
            InvalidDateRangeError: start date falls after the end date
        """
        validate_date_range(criteria.start_date, criteria.end_date)
        return build_report(self.transactions, criteria, spend_category)


class ShopSession:
    """Buyer flow for one club context: browse, fill the cart, check out"""

    def __init__(
        self,
        context: ClubContext,
        cart: CartStore,
        catalog: ProductCatalog,
        orchestrator: CheckoutOrchestrator,
        history: TransactionHistory,
    ):
        self.context = context
        self.cart = cart
        self.catalog = catalog
        self.orchestrator = orchestrator
        self.history = history

    async def load_products(self) -> List[Product]:
        return await self.catalog.refresh(self.context)

    def products_in(self, category: str = "all") -> List[Product]:
        return filter_by_category(self.catalog.products, category)

    def price_options(self, product: Product) -> List[PlanOption]:
        return plan_options(product)

    # Cart pay-in-full only: plan choice is not carried into the cart
    def add_to_cart(self, product: Product) -> Sequence[CartLine]:
        return self.cart.add_to_cart(product)

    def remove_from_cart(self, product_id: str) -> Sequence[CartLine]:
        return self.cart.remove_from_cart(product_id)

    def remove_item_completely(self, product_id: str) -> Sequence[CartLine]:
        return self.cart.remove_item_completely(product_id)

    async def checkout(self) -> str:
        """Redirect URL of a new hosted checkout for the current cart"""
        return await self.orchestrator.checkout(self.cart.lines, self.context)

    def checkout_cancelled(self) -> None:
        self.cart.clear_cart()

    async def checkout_succeeded(self, email: Optional[str]) -> Optional[Transaction]:
        """
        Clear the cart and load the purchase summary.

        The cart is cleared even if the history fetch fails; that failure is
        recorded on the history store and the summary is None.
        """
        self.cart.clear_cart()
        try:
            transactions = await self.history.refresh(email, self.context)
        except (MissingContextError, RemoteServiceError) as e:
            logger.warning(f"Purchase summary unavailable: {e}")
            return None
        return latest_transaction(transactions)


class ClubAdmin:
    """Club admin flow: publish products and manage the payout account"""

    def __init__(self, context: ClubContext, catalog_client: CatalogClient, payments_client: PaymentsClient):
        self.context = context
        self.catalog_client = catalog_client
        self.payments_client = payments_client

    async def publish_products(self, drafts: Sequence[ProductDraft]) -> List[ProductVariant]:
        """
        Validate drafts and publish one catalog record per payment option.

        Raises:
            MissingContextError: Club context incomplete
            ProductValidationError: Drafts failed validation (nothing published)
            RemoteServiceError: Catalog rejected the request
        """
        self.context.require_complete()
        validate_drafts(drafts, settings.installment_options)

        variants = build_product_variants(drafts, settings.installment_options)
        await self.catalog_client.create_products(self.context, variants)
        logger.info(
            "Products published",
            extra={"club_name": self.context.club_name, "records": len(variants)},
        )
        return variants

    async def payment_account_status(self) -> Optional[str]:
        return await self.payments_client.get_account_status(self._club_name())

    async def start_onboarding(self, email: str) -> str:
        if not email or not email.strip():
            raise MissingContextError("An admin email is required to create a payout account.")
        return await self.payments_client.create_connected_account(self._club_name(), email)

    async def dashboard_link(self) -> str:
        return await self.payments_client.create_login_link(self._club_name())

    def _club_name(self) -> str:
        if not self.context.club_name or not self.context.club_name.strip():
            raise MissingContextError("Club name is required to manage the payout account.")
        return self.context.club_name
