"""Pytest fixtures for testing"""

import logging

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from club_commerce.domain.cart import CartStore
from club_commerce.domain.models import ClubContext, InstallmentPlan, Product, PurchasedItem, Transaction
from club_commerce.infrastructure.storage.cart_storage import InMemoryCartStorage


@pytest.fixture
def club_context() -> ClubContext:
    return ClubContext(club_name="Riverside FC", age_group="U12", division="Division 1")


@pytest.fixture
def membership() -> Product:
    """Membership at 100.00 with 6- and 12-month plans"""
    return Product(
        id="Season Membership",
        catalog_product_id="prod_member",
        catalog_price_id="price_member",
        base_price=Decimal("100.00"),
        category="membership",
        installment_plans=frozenset(
            {
                InstallmentPlan(months=6, multiplier=Decimal("1.1"), catalog_price_id="price_member_6"),
                InstallmentPlan(months=12, multiplier=Decimal("1.2"), catalog_price_id="price_member_12"),
            }
        ),
        is_membership=True,
    )


@pytest.fixture
def training_kit() -> Product:
    return Product(
        id="Training Kit",
        catalog_product_id="prod_kit",
        catalog_price_id="price_kit",
        base_price=Decimal("24.99"),
        category="merchandise",
    )


@pytest.fixture
def storage() -> InMemoryCartStorage:
    return InMemoryCartStorage()


@pytest.fixture
def cart(storage: InMemoryCartStorage) -> CartStore:
    return CartStore(storage)


def make_transaction(
    tx_id: str,
    items: list[tuple[str, str, str]],
    status: str = "completed",
    timestamp: datetime | None = None,
) -> Transaction:
    """Transaction from (name, category, total price) item triples"""
    purchased = tuple(
        PurchasedItem(
            product_id=f"prod_{i}",
            product_name=name,
            category=category,
            quantity=1,
            total_price=Decimal(price),
        )
        for i, (name, category, price) in enumerate(items)
    )
    return Transaction(
        id=tx_id,
        amount=sum((item.total_price for item in purchased), Decimal("0")),
        currency="eur",
        status=status,
        club="Riverside FC",
        age_group="U12",
        division="Division 1",
        timestamp=timestamp or datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
        purchased_items=purchased,
    )


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Purchase history across statuses, categories and days"""
    return [
        make_transaction(
            "tx_1",
            [("Training Block", "training", "50.00")],
            status="completed",
            timestamp=datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc),
        ),
        make_transaction(
            "tx_2",
            [("Evening Training", "training", "30.00"), ("Cup Match Fee", "match", "20.00")],
            status="pending",
            timestamp=datetime(2025, 3, 5, 8, 15, tzinfo=timezone.utc),
        ),
        make_transaction(
            "tx_3",
            [("Season Membership (6-Month Plan)", "membership", "132.00")],
            status="completed",
            timestamp=datetime(2025, 2, 1, 9, 0, tzinfo=timezone.utc),
        ),
        make_transaction(
            "tx_4",
            [("Home Jersey", "merchandise", "12.50")],
            status="failed",
            timestamp=datetime(2025, 3, 11, 0, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def root_logger():
    """Restore root handlers after setup_logging replaces them"""
    logger = logging.getLogger()
    handlers, level = logger.handlers[:], logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
