"""Stub club services gateway for local development and client tests"""

import uuid
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

ContextKey = Tuple[str, str, str]

DEMO_CONTEXT: ContextKey = ("Riverside FC", "U12", "Division 1")
DEMO_EMAIL = "parent@example.com"


class ProductIn(BaseModel):
    name: str
    price: float
    installmentMonths: Optional[int] = None
    category: str
    isMembership: bool = False


class CreateProductsBody(BaseModel):
    clubName: str
    ageGroup: str
    division: str
    products: List[ProductIn]


class CheckoutItem(BaseModel):
    id: str
    productId: str
    priceId: str
    quantity: int


class CheckoutBody(BaseModel):
    clubName: str
    ageGroup: str
    division: str
    cart: List[CheckoutItem]


class ConnectBody(BaseModel):
    clubName: str
    email: str


class LoginLinkBody(BaseModel):
    clubName: str


def _record(name: str, price: float, category: str, months: Optional[int] = None) -> dict:
    return {
        "id": name,
        "stripe_product_id": f"prod_{uuid.uuid4().hex[:12]}",
        "stripe_price_id": f"price_{uuid.uuid4().hex[:12]}",
        "price": price,
        "installmentMonths": months,
        "category": category,
        "isMembership": category == "membership",
    }


def seed_products() -> Dict[ContextKey, List[dict]]:
    return {
        DEMO_CONTEXT: [
            _record("Season Membership", 120.0, "membership"),
            _record("Season Membership (6-Month Plan)", 132.0, "membership", 6),
            _record("Training Kit", 45.0, "merchandise"),
            _record("Training Kit (3-Month Plan)", 47.25, "merchandise", 3),
            _record("Match Fee", 10.0, "match"),
        ]
    }


def seed_transactions() -> Dict[str, List[dict]]:
    club, age_group, division = DEMO_CONTEXT
    return {
        DEMO_EMAIL: [
            {
                "id": "cs_test_0002",
                "amount": 55.0,
                "currency": "eur",
                "status": "completed",
                "club": club,
                "ageGroup": age_group,
                "division": division,
                "timestamp": "2025-03-14T18:30:00Z",
                "purchasedItems": [
                    {"productId": "prod_kit", "productName": "Training Kit", "category": "merchandise",
                     "quantity": 1, "installmentMonths": None, "totalPrice": 45.0},
                    {"productId": "prod_match", "productName": "Match Fee", "category": "match",
                     "quantity": 1, "installmentMonths": None, "totalPrice": 10.0},
                ],
            },
            {
                "id": "cs_test_0001",
                "amount": 132.0,
                "currency": "eur",
                "status": "pending",
                "club": club,
                "ageGroup": age_group,
                "division": division,
                "timestamp": "2025-02-01T09:00:00Z",
                "purchasedItems": [
                    {"productId": "prod_member", "productName": "Season Membership (6-Month Plan)",
                     "category": "membership", "quantity": 1, "installmentMonths": 6, "totalPrice": 132.0},
                ],
            },
        ]
    }


def create_app() -> FastAPI:
    """Fresh stub with its own in-memory state"""
    app = FastAPI(title="Mock Club Services", version="1.0.0")
    app.state.products = seed_products()
    app.state.transactions = seed_transactions()
    app.state.accounts = {DEMO_CONTEXT[0]: "acct_demo"}
    app.state.sessions = []

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.get("/products/list")
    def list_products(clubName: str, ageGroup: str, division: str):
        return {"products": app.state.products.get((clubName, ageGroup, division), [])}

    @app.post("/products/create")
    def create_products(body: CreateProductsBody):
        if not body.products:
            raise HTTPException(status_code=400, detail="no products supplied")
        catalog = app.state.products.setdefault((body.clubName, body.ageGroup, body.division), [])
        for product in body.products:
            catalog.append(_record(product.name, product.price, product.category, product.installmentMonths))
        return {"created": len(body.products)}

    @app.post("/stripe/create-checkout-session")
    def create_checkout_session(body: CheckoutBody):
        if body.clubName not in app.state.accounts:
            return JSONResponse(status_code=400, content={"error": "Club has no connected Stripe account"})
        catalog = app.state.products.get((body.clubName, body.ageGroup, body.division), [])
        known_prices = {record["stripe_price_id"] for record in catalog}
        unknown = [item.id for item in body.cart if item.priceId not in known_prices]
        if not body.cart or unknown:
            return JSONResponse(status_code=400, content={"error": "Invalid cart", "unknown": unknown})
        session_id = f"cs_test_{uuid.uuid4().hex[:16]}"
        app.state.sessions.append({"id": session_id, "cart": [item.model_dump() for item in body.cart]})
        return {"checkoutUrl": f"https://checkout.stripe.test/c/pay/{session_id}"}

    @app.get("/transactions/list")
    def list_transactions(email: str, clubName: str = "", ageGroup: str = "", division: str = ""):
        transactions = app.state.transactions.get(email)
        if transactions is None:
            raise HTTPException(status_code=404, detail="user not found")
        scoped = [
            tx for tx in transactions
            if (not clubName or tx["club"] == clubName)
            and (not ageGroup or tx["ageGroup"] == ageGroup)
            and (not division or tx["division"] == division)
        ]
        return {"transactions": scoped}

    @app.get("/stripe/status")
    def stripe_status(clubName: str):
        return {"stripe_account_id": app.state.accounts.get(clubName)}

    @app.post("/stripe/connect")
    def stripe_connect(body: ConnectBody):
        account_id = app.state.accounts.setdefault(body.clubName, f"acct_{uuid.uuid4().hex[:12]}")
        return {"onboarding_url": f"https://connect.stripe.test/setup/{account_id}"}

    @app.post("/stripe/login-link")
    def stripe_login_link(body: LoginLinkBody):
        account_id = app.state.accounts.get(body.clubName)
        if account_id is None:
            raise HTTPException(status_code=404, detail="club has no Stripe account")
        return {"url": f"https://connect.stripe.test/express/{account_id}"}

    return app


app = create_app()
