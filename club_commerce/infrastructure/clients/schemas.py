"""Pydantic schemas for club services response validation"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from club_commerce.utils.date_utils import parse_timestamp

CategoryName = Literal["membership", "merchandise", "training", "match", "other"]
TransactionStatus = Literal["completed", "pending", "failed"]


class WireModel(BaseModel):
    """Gateway payloads carry fields we do not use; ignore them"""

    model_config = ConfigDict(extra="ignore")


class CatalogProductRecord(WireModel):
    """Single entry of GET /products/list"""

    id: str = Field(..., min_length=1)
    stripe_product_id: str = Field(..., min_length=1)
    stripe_price_id: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    installmentMonths: Optional[int] = Field(None, gt=0)
    category: CategoryName
    isMembership: bool = False


class ProductListResponse(WireModel):
    """Response for GET /products/list"""

    products: List[CatalogProductRecord]


class PurchasedItemRecord(WireModel):
    """Product line inside a transaction"""

    productId: str
    productName: str
    category: str
    quantity: int = Field(..., gt=0)
    installmentMonths: Optional[int] = Field(None, gt=0)
    totalPrice: Decimal


class TransactionRecord(WireModel):
    """Single entry of GET /transactions/list"""

    id: str = Field(..., min_length=1)
    amount: Decimal
    currency: str
    status: TransactionStatus
    club: str
    ageGroup: str
    division: str
    timestamp: datetime
    purchasedItems: List[PurchasedItemRecord] = Field(default_factory=list)

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_instant(cls, value):
        if isinstance(value, str):
            return parse_timestamp(value)
        return value

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TransactionListResponse(WireModel):
    """Response for GET /transactions/list"""

    transactions: List[TransactionRecord]


class CheckoutSessionResponse(WireModel):
    """Response for POST /stripe/create-checkout-session"""

    checkoutUrl: str = Field(..., min_length=1)


class AccountStatusResponse(WireModel):
    """Response for GET /stripe/status"""

    stripe_account_id: Optional[str] = None


class OnboardingResponse(WireModel):
    """Response for POST /stripe/connect"""

    onboarding_url: str = Field(..., min_length=1)


class LoginLinkResponse(WireModel):
    """Response for POST /stripe/login-link"""

    url: str = Field(..., min_length=1)
