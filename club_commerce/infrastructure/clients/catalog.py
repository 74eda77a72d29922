"""Catalog service HTTP client for listing and publishing club products"""

from typing import List, Sequence

from club_commerce.domain.catalog import normalize_catalog
from club_commerce.domain.models import CatalogListing, ClubContext, Product, ProductVariant
from club_commerce.infrastructure.clients.base import ClubServiceClient, context_params
from club_commerce.infrastructure.clients.schemas import ProductListResponse


class CatalogClient(ClubServiceClient):
    """Client for the club product catalog API"""

    service = "catalog"

    async def list_products(self, context: ClubContext) -> List[Product]:
        """
        Fetch the catalog for a club context, folded into Products with plans.

        Raises:
            RemoteServiceError: On timeout, HTTP errors
            InvalidResponseShapeError: Response does not match the expected shape
        """
        response = await self._request("GET", "/products/list", params=context_params(context))
        data = self._parse(response, ProductListResponse)

        listings = [
            CatalogListing(
                id=record.id,
                catalog_product_id=record.stripe_product_id,
                catalog_price_id=record.stripe_price_id,
                price=record.price,
                category=record.category,
                installment_months=record.installmentMonths,
                is_membership=record.isMembership,
            )
            for record in data.products
        ]
        return normalize_catalog(listings)

    async def create_products(self, context: ClubContext, variants: Sequence[ProductVariant]) -> None:
        """Publish product records, one per payment option, to the club's catalog"""
        await self._request(
            "POST",
            "/products/create",
            json={
                **context_params(context),
                "products": [
                    {
                        "name": variant.name,
                        "price": float(variant.price),
                        "installmentMonths": variant.installment_months,
                        "category": variant.category,
                        "isMembership": variant.is_membership,
                    }
                    for variant in variants
                ],
            },
        )
