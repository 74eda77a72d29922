"""Cart store - line items the buyer intends to purchase, kept durable across restarts"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from club_commerce.domain.models import CartLine, InstallmentPlan, Product
from club_commerce.infrastructure.observability.metrics import cart_persistence_failures_counter
from club_commerce.utils.money import round_money, to_decimal

logger = logging.getLogger(__name__)

CartSnapshot = List[Dict[str, Any]]


class CartStorage(ABC):
    """Persistence port holding one full serialized cart"""

    @abstractmethod
    def load(self) -> Optional[CartSnapshot]:
        """Return the stored snapshot, or None if nothing is stored."""

    @abstractmethod
    def save(self, snapshot: CartSnapshot) -> None:
        """Replace the stored snapshot."""

    @abstractmethod
    def clear(self) -> None:
        """Erase the stored snapshot."""


class CartStore:
    """
    Owns the buyer's cart.

    Invariants:
    - at most one CartLine per product id
    - every quantity is >= 1 (decrementing to zero removes the line)

    Every mutation writes the full cart through the storage port. Storage
    failures are logged and counted, never raised: the cart keeps working
    in memory for the rest of the session.
    """

    def __init__(self, storage: CartStorage):
        self._storage = storage
        self._lines: Dict[str, CartLine] = self._rehydrate()

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def get_total_price(self) -> Decimal:
        """Sum of base price times quantity; plan choice is not tracked in the cart"""
        total = sum(
            (line.product.base_price * line.quantity for line in self._lines.values()),
            Decimal("0"),
        )
        return round_money(total)

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    # --- Mutations ------------------------------------------------------------

    def add_to_cart(self, product: Product) -> Tuple[CartLine, ...]:
        existing = self._lines.get(product.id)
        if existing:
            self._lines[product.id] = replace(existing, quantity=existing.quantity + 1)
        else:
            self._lines[product.id] = CartLine(product=product, quantity=1)
        return self._commit()

    def remove_from_cart(self, product_id: str) -> Tuple[CartLine, ...]:
        existing = self._lines.get(product_id)
        if existing is None:
            return self.lines

        if existing.quantity <= 1:
            del self._lines[product_id]
        else:
            self._lines[product_id] = replace(existing, quantity=existing.quantity - 1)
        return self._commit()

    def remove_item_completely(self, product_id: str) -> Tuple[CartLine, ...]:
        if product_id not in self._lines:
            return self.lines

        del self._lines[product_id]
        return self._commit()

    def clear_cart(self) -> Tuple[CartLine, ...]:
        self._lines.clear()
        try:
            self._storage.clear()
        except (OSError, ValueError) as e:
            cart_persistence_failures_counter.labels(operation="clear").inc()
            logger.warning(f"Failed to clear stored cart: {e}")
        return self.lines

    # --- Persistence ----------------------------------------------------------

    def _commit(self) -> Tuple[CartLine, ...]:
        snapshot = self.lines
        try:
            self._storage.save(cart_to_snapshot(snapshot))
        except (OSError, ValueError, TypeError) as e:
            cart_persistence_failures_counter.labels(operation="save").inc()
            logger.warning(f"Failed to save cart: {e}")
        return snapshot

    def _rehydrate(self) -> Dict[str, CartLine]:
        try:
            snapshot = self._storage.load()
        except (OSError, ValueError) as e:
            cart_persistence_failures_counter.labels(operation="load").inc()
            logger.warning(f"Failed to load cart: {e}")
            return {}

        if not snapshot:
            return {}

        try:
            lines = cart_from_snapshot(snapshot)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            cart_persistence_failures_counter.labels(operation="load").inc()
            logger.warning(f"Discarding unreadable stored cart: {e}")
            return {}

        return {line.product.id: line for line in lines}


# --- Serialization ------------------------------------------------------------


def cart_to_snapshot(lines: Tuple[CartLine, ...]) -> CartSnapshot:
    """Serialize cart lines as a JSON-compatible list of {product, quantity}"""
    return [
        {
            "product": {
                "id": line.product.id,
                "productId": line.product.catalog_product_id,
                "priceId": line.product.catalog_price_id,
                "price": str(line.product.base_price),
                "category": line.product.category,
                "isMembership": line.product.is_membership,
                "installmentPlans": [
                    {
                        "months": plan.months,
                        "multiplier": str(plan.multiplier),
                        "priceId": plan.catalog_price_id,
                    }
                    for plan in sorted(line.product.installment_plans, key=lambda p: p.months)
                ],
            },
            "quantity": line.quantity,
        }
        for line in lines
    ]


def cart_from_snapshot(snapshot: CartSnapshot) -> List[CartLine]:
    """
    Rebuild cart lines from a stored snapshot.

    Lines with a non-positive quantity are dropped and repeated product ids
    are merged so the restored cart honours the store invariants.
    """
    merged: Dict[str, CartLine] = {}
    for raw in snapshot:
        quantity = int(raw["quantity"])
        if quantity <= 0:
            continue

        product = _product_from_raw(raw["product"])
        existing = merged.get(product.id)
        if existing:
            merged[product.id] = replace(existing, quantity=existing.quantity + quantity)
        else:
            merged[product.id] = CartLine(product=product, quantity=quantity)

    return list(merged.values())


def _product_from_raw(raw: Dict[str, Any]) -> Product:
    return Product(
        id=raw["id"],
        catalog_product_id=raw["productId"],
        catalog_price_id=raw["priceId"],
        base_price=to_decimal(raw["price"]),
        category=raw["category"],
        installment_plans=frozenset(
            InstallmentPlan(
                months=int(plan["months"]),
                multiplier=to_decimal(plan["multiplier"]),
                catalog_price_id=plan.get("priceId"),
            )
            for plan in raw.get("installmentPlans", [])
        ),
        is_membership=bool(raw.get("isMembership", False)),
    )
