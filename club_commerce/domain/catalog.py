"""Catalog normalization and product publishing rules"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from club_commerce.config import settings
from club_commerce.domain.exceptions import ProductValidationError
from club_commerce.domain.models import (
    PAY_IN_FULL,
    PRODUCT_CATEGORIES,
    CatalogListing,
    InstallmentPlan,
    Product,
    ProductDraft,
    ProductVariant,
)
from club_commerce.utils.money import round_money

logger = logging.getLogger(__name__)


def plan_variant_name(name: str, months: int) -> str:
    """Catalog name of an installment variant, e.g. 'Kit (6-Month Plan)'"""
    return f"{name} ({months}-Month Plan)"


def normalize_catalog(listings: Sequence[CatalogListing]) -> List[Product]:
    """
    Fold the catalog's flat listing into Products with installment plans.

    The catalog publishes every payment option as its own record: the
    pay-in-full record carries the product name, each plan record carries
    the name suffixed with " (N-Month Plan)" and a plan-adjusted price.

    Rules:
    - Each pay-in-full record becomes a Product
    - A plan record whose pay-in-full record exists becomes an InstallmentPlan
      of that Product, multiplier = plan price / base price (unrounded)
    - A plan record with no usable pay-in-full record is kept as a
      standalone Product so it stays purchasable
    - Listing order is preserved; repeated ids keep their first record
    """
    bases: Dict[str, CatalogListing] = {}
    for listing in listings:
        if listing.installment_months is None and listing.id not in bases:
            bases[listing.id] = listing

    plans: Dict[str, Dict[int, InstallmentPlan]] = {base_id: {} for base_id in bases}
    orphans: Dict[str, CatalogListing] = {}
    for listing in listings:
        if listing.installment_months is None:
            continue

        base = bases.get(_base_name(listing))
        if base is None or base.price <= 0:
            orphans.setdefault(listing.id, listing)
            continue

        # Unrounded so base * multiplier rounds back to the listed plan price
        multiplier = listing.price / base.price
        plans[base.id].setdefault(
            listing.installment_months,
            InstallmentPlan(
                months=listing.installment_months,
                multiplier=multiplier,
                catalog_price_id=listing.catalog_price_id,
            ),
        )

    products: List[Product] = []
    seen = set()
    for listing in listings:
        if listing.id in seen:
            continue
        if listing.id in bases:
            products.append(_to_product(bases[listing.id], plans[listing.id].values()))
        elif listing.id in orphans:
            logger.warning(f"Installment listing {listing.id!r} has no pay-in-full listing")
            products.append(_to_product(orphans[listing.id], ()))
        seen.add(listing.id)

    return products


def filter_by_category(products: Iterable[Product], category: str) -> List[Product]:
    """Products in a category; 'all' keeps everything"""
    if category == "all":
        return list(products)
    return [product for product in products if product.category == category]


def validate_drafts(
    drafts: Sequence[ProductDraft],
    options: Optional[Mapping[int, Decimal]] = None,
) -> None:
    """
    Check admin product drafts before publishing.

    Raises:
        ProductValidationError: field_errors maps draft index to
            {field: message} for every failing draft
    """
    if not drafts:
        raise ProductValidationError({}, "Please add at least one product.")

    options = settings.installment_options if options is None else options
    field_errors: Dict[int, Dict[str, str]] = {}

    for index, draft in enumerate(drafts):
        errors: Dict[str, str] = {}

        if not draft.name or not draft.name.strip():
            errors["name"] = "Product name is required"

        if not draft.category:
            errors["category"] = "Category is required"
        elif draft.category not in PRODUCT_CATEGORIES:
            errors["category"] = f"Unknown category: {draft.category}"

        if not draft.price:
            errors["price"] = "Price is required"
        else:
            price = _parse_price(draft.price)
            if price is None or price <= 0:
                errors["price"] = "Price must be a positive number"

        if not draft.selected_plans:
            errors["selected_plans"] = "Select at least one payment option"
        elif any(months != PAY_IN_FULL and months not in options for months in draft.selected_plans):
            errors["selected_plans"] = "Unsupported installment plan selected"

        if errors:
            field_errors[index] = errors

    if field_errors:
        raise ProductValidationError(field_errors)


def build_product_variants(
    drafts: Sequence[ProductDraft],
    options: Optional[Mapping[int, Decimal]] = None,
) -> List[ProductVariant]:
    """
    Expand validated drafts into one catalog record per payment option.

    Example:
        Kit at 40.00 with options [0, 6] →
        [Kit 40.00 (pay in full), Kit (6-Month Plan) 44.00]
    """
    options = settings.installment_options if options is None else options
    variants: List[ProductVariant] = []

    for draft in drafts:
        name = draft.name.strip()
        base_price = round_money(Decimal(draft.price.strip()))
        for months in draft.selected_plans:
            if months == PAY_IN_FULL:
                variants.append(
                    ProductVariant(
                        name=name,
                        price=base_price,
                        category=draft.category,
                        installment_months=None,
                        is_membership=draft.category == "membership",
                    )
                )
            else:
                variants.append(
                    ProductVariant(
                        name=plan_variant_name(name, months),
                        price=round_money(base_price * options[months]),
                        category=draft.category,
                        installment_months=months,
                        is_membership=draft.category == "membership",
                    )
                )

    return variants


def _base_name(listing: CatalogListing) -> Optional[str]:
    suffix = f" ({listing.installment_months}-Month Plan)"
    if listing.id.endswith(suffix):
        return listing.id[: -len(suffix)]
    return None


def _parse_price(raw: str) -> Optional[Decimal]:
    try:
        price = Decimal(raw.strip())
    except InvalidOperation:
        return None
    return price if price.is_finite() else None


def _to_product(listing: CatalogListing, plans: Iterable[InstallmentPlan]) -> Product:
    return Product(
        id=listing.id,
        catalog_product_id=listing.catalog_product_id,
        catalog_price_id=listing.catalog_price_id,
        base_price=round_money(listing.price),
        category=listing.category,
        installment_plans=frozenset(plans),
        is_membership=listing.is_membership,
    )
