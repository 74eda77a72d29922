"""Transactions service HTTP client for fetching purchase history"""

from typing import List

from club_commerce.domain.models import ClubContext, PurchasedItem, Transaction
from club_commerce.infrastructure.clients.base import ClubServiceClient, context_params
from club_commerce.infrastructure.clients.schemas import TransactionListResponse
from club_commerce.utils.money import round_money


class TransactionsClient(ClubServiceClient):
    """Client for the club transactions API"""

    service = "transactions"

    async def list_transactions(self, email: str, context: ClubContext) -> List[Transaction]:
        """
        Fetch a member's purchase history within a club context, newest first.

        Raises:
            RemoteServiceError: On timeout, HTTP errors
            InvalidResponseShapeError: Response does not match the expected shape
        """
        response = await self._request(
            "GET",
            "/transactions/list",
            params={"email": email, **context_params(context)},
        )
        data = self._parse(response, TransactionListResponse)

        return [
            Transaction(
                id=txn.id,
                amount=round_money(txn.amount),
                currency=txn.currency,
                status=txn.status,
                club=txn.club,
                age_group=txn.ageGroup,
                division=txn.division,
                timestamp=txn.timestamp,
                purchased_items=tuple(
                    PurchasedItem(
                        product_id=item.productId,
                        product_name=item.productName,
                        category=item.category,
                        quantity=item.quantity,
                        total_price=round_money(item.totalPrice),
                        installment_months=item.installmentMonths,
                    )
                    for item in txn.purchasedItems
                ),
            )
            for txn in data.transactions
        ]
