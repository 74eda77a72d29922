"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import FrozenSet, List, Optional, Tuple

from club_commerce.domain.exceptions import MissingContextError

PRODUCT_CATEGORIES = ("membership", "merchandise", "training", "match", "other")
TRANSACTION_STATUSES = ("completed", "pending", "failed")

# Plan month count meaning "pay in full"
PAY_IN_FULL = 0


@dataclass(frozen=True)
class ClubContext:
    """Club, age group and division scoping every catalog, cart and report call"""

    club_name: Optional[str]
    age_group: Optional[str]
    division: Optional[str]

    @property
    def is_complete(self) -> bool:
        return all(
            value is not None and value.strip()
            for value in (self.club_name, self.age_group, self.division)
        )

    def require_complete(self) -> "ClubContext":
        if not self.is_complete:
            raise MissingContextError("Club name, age group, and division are required.")
        return self


@dataclass(frozen=True)
class InstallmentPlan:
    """Alternative payment schedule for a product"""

    months: int
    multiplier: Decimal
    catalog_price_id: Optional[str] = None


@dataclass(frozen=True)
class Product:
    """Purchasable catalog entry; id doubles as the display name"""

    id: str
    catalog_product_id: str
    catalog_price_id: str
    base_price: Decimal
    category: str  # one of PRODUCT_CATEGORIES
    installment_plans: FrozenSet[InstallmentPlan] = frozenset()
    is_membership: bool = False


@dataclass(frozen=True)
class CartLine:
    """Product in the cart with a quantity of at least one"""

    product: Product
    quantity: int


@dataclass(frozen=True)
class CheckoutLineItem:
    """Line item shape handed to the payment processor"""

    product_id: str
    catalog_product_id: str
    catalog_price_id: str
    quantity: int


@dataclass(frozen=True)
class PlanOption:
    """Price of a product under one payment option, as shown to a buyer"""

    months: int
    total_price: Decimal
    monthly_price: Optional[Decimal]


@dataclass(frozen=True)
class PurchasedItem:
    """Single product line within a completed purchase"""

    product_id: str
    product_name: str
    category: str
    quantity: int
    total_price: Decimal
    installment_months: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Historical purchase reported by the transactions service"""

    id: str
    amount: Decimal
    currency: str
    status: str  # one of TRANSACTION_STATUSES
    club: str
    age_group: str
    division: str
    timestamp: datetime
    purchased_items: Tuple[PurchasedItem, ...] = ()


@dataclass
class ProductDraft:
    """Admin input for a product to publish, before validation"""

    name: str
    price: str
    category: str
    selected_plans: List[int] = field(default_factory=lambda: [PAY_IN_FULL])


@dataclass(frozen=True)
class CatalogListing:
    """One record of the remote catalog; plan variants are listed separately"""

    id: str
    catalog_product_id: str
    catalog_price_id: str
    price: Decimal
    category: str
    installment_months: Optional[int] = None
    is_membership: bool = False


@dataclass(frozen=True)
class ProductVariant:
    """Catalog record to publish for one payment option of a product draft"""

    name: str
    price: Decimal
    category: str
    installment_months: Optional[int]
    is_membership: bool
