"""Wiring of clients, stores and flows from settings"""

from club_commerce.config import settings
from club_commerce.domain.cart import CartStorage, CartStore
from club_commerce.domain.checkout import CheckoutOrchestrator
from club_commerce.domain.models import ClubContext
from club_commerce.infrastructure.clients.base import TokenProvider
from club_commerce.infrastructure.clients.catalog import CatalogClient
from club_commerce.infrastructure.clients.payments import PaymentsClient
from club_commerce.infrastructure.clients.transactions import TransactionsClient
from club_commerce.infrastructure.observability.logging import setup_logging
from club_commerce.infrastructure.storage.cart_storage import JsonFileCartStorage
from club_commerce.shop import ClubAdmin, ProductCatalog, ShopSession, TransactionHistory

# Setup logging
setup_logging(settings.log_level)


def get_catalog_client(token_provider: TokenProvider | None = None) -> CatalogClient:
    """Provide catalog API client instance"""
    return CatalogClient(token_provider=token_provider)


def get_payments_client(token_provider: TokenProvider | None = None) -> PaymentsClient:
    """Provide payments API client instance"""
    return PaymentsClient(token_provider=token_provider)


def get_transactions_client(token_provider: TokenProvider | None = None) -> TransactionsClient:
    """Provide transactions API client instance"""
    return TransactionsClient(token_provider=token_provider)


def get_cart_store(storage: CartStorage | None = None) -> CartStore:
    """Provide a cart rehydrated from durable storage"""
    return CartStore(storage or JsonFileCartStorage())


def create_shop_session(
    context: ClubContext,
    token_provider: TokenProvider | None = None,
    storage: CartStorage | None = None,
) -> ShopSession:
    """Buyer flow for a club context, backed by the configured gateway"""
    return ShopSession(
        context=context,
        cart=get_cart_store(storage),
        catalog=ProductCatalog(get_catalog_client(token_provider)),
        orchestrator=CheckoutOrchestrator(get_payments_client(token_provider)),
        history=TransactionHistory(get_transactions_client(token_provider)),
    )


def create_club_admin(context: ClubContext, token_provider: TokenProvider | None = None) -> ClubAdmin:
    """Club admin flow for a club context"""
    return ClubAdmin(
        context=context,
        catalog_client=get_catalog_client(token_provider),
        payments_client=get_payments_client(token_provider),
    )
