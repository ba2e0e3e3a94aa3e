"""
Tests for signup, login and the guest cart hand-over
"""

import pytest
from sqlalchemy import select

from storefront.core.exceptions import StorageException, UnauthorizedException
from storefront.models import User
from storefront.api.v1.auth.schemas import SignupRequest, LoginRequest
from storefront.api.v1.auth.services import AuthService
from storefront.api.v1.cart.services import CartService

SESSION_HEADER = "X-Session-ID"


def failing_merge(monkeypatch):
    async def merge_cart(self, session_id, user_id):
        raise StorageException("Failed to merge carts: database is locked")

    monkeypatch.setattr(CartService, "merge_cart", merge_cart)


class TestSignup:
    """Tests for AuthService.signup"""

    @pytest.mark.asyncio
    async def test_signup_merges_guest_cart(self, db, products, guest_owner):
        await CartService(db).add_to_cart(guest_owner, products["emma"], 2)

        user, outcome = await AuthService(db).signup(
            SignupRequest(email="New@Example.com", password="correct-horse-battery"),
            session_id=guest_owner.session_id
        )

        assert user.email == "new@example.com"
        assert outcome.merged == 1

    @pytest.mark.asyncio
    async def test_failed_merge_keeps_account(self, db, session_factory, products, guest_owner, monkeypatch):
        """The account survives a merge failure and the guest cart is left for later."""
        await CartService(db).add_to_cart(guest_owner, products["emma"], 2)
        failing_merge(monkeypatch)

        user, outcome = await AuthService(db).signup(
            SignupRequest(email="new@example.com", password="correct-horse-battery"),
            session_id=guest_owner.session_id
        )

        assert outcome is None
        assert user.email == "new@example.com"
        async with session_factory() as session:
            stored = await session.execute(select(User).where(User.email == "new@example.com"))
            assert stored.scalar_one().id == user.id

        monkeypatch.undo()
        guest_cart = await CartService(db).get_cart_items(guest_owner)
        assert [item.quantity for item in guest_cart.items] == [2]

    @pytest.mark.asyncio
    async def test_failed_merge_on_login_is_reported(self, db, products, guest_owner, monkeypatch):
        """Login has no account to protect, so the failure propagates."""
        service = AuthService(db)
        await service.signup(SignupRequest(email="new@example.com", password="correct-horse-battery"))
        await CartService(db).add_to_cart(guest_owner, products["emma"], 1)
        failing_merge(monkeypatch)

        with pytest.raises(StorageException):
            await service.login(
                LoginRequest(email="new@example.com", password="correct-horse-battery"),
                session_id=guest_owner.session_id
            )

    @pytest.mark.asyncio
    async def test_inactive_account_cannot_log_in(self, db, products):
        service = AuthService(db)
        user, _ = await service.signup(SignupRequest(email="new@example.com", password="correct-horse-battery"))
        user.is_active = False
        await db.commit()

        with pytest.raises(UnauthorizedException):
            await service.login(LoginRequest(email="new@example.com", password="correct-horse-battery"))


class TestSignupApi:
    @pytest.mark.asyncio
    async def test_signup_succeeds_when_merge_fails(self, client, products, monkeypatch):
        headers = {SESSION_HEADER: "guest-merge-fails"}
        await client.post("/api/v1/cart/add", json={"product_id": products["emma"], "quantity": 2}, headers=headers)
        failing_merge(monkeypatch)

        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "new@example.com", "password": "correct-horse-battery"},
            headers=headers
        )

        assert response.status_code == 201
        assert response.json()["cart"] == {"merged": 0, "dropped": []}
        assert "set-cookie" not in response.headers

        monkeypatch.undo()
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "new@example.com", "password": "correct-horse-battery"},
            headers=headers
        )
        assert login.json()["cart"] == {"merged": 1, "dropped": []}
