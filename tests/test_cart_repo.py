from decimal import Decimal

import pytest

from storefront.domain.cart import Cart, CartLine, Hit, Miss
from storefront.domain.exceptions import IdentityError


def _cart():
    return Cart.from_lines(
        [CartLine(product_id=1, quantity=2, unit_price=Decimal("50.00"), display_name="Keyboard")]
    )


class TestCartRepo:
    def test_miss_is_empty_cart(self, cart_repo, fake_redis):
        assert isinstance(cart_repo.lookup("cart:user:1"), Miss)
        cart = cart_repo.get(user_id=1)
        assert cart == Cart.empty()
        assert fake_redis.writes == 0

    def test_save_then_get(self, cart_repo):
        cart_repo.save(_cart(), user_id=1)
        result = cart_repo.lookup("cart:user:1")
        assert isinstance(result, Hit)
        assert result.cart.total == Decimal("100.00")
        assert cart_repo.get(user_id=1).line_count == 2

    def test_save_sets_ttl(self, cart_repo, fake_redis):
        cart_repo.save(_cart(), session_id="s1")
        assert fake_redis.ttls["cart:session:s1"] == 3600

    def test_save_overwrites(self, cart_repo):
        cart_repo.save(_cart(), user_id=1)
        cart_repo.save(Cart.empty(), user_id=1)
        assert cart_repo.get(user_id=1).lines == []

    def test_user_and_session_carts_are_separate(self, cart_repo):
        cart_repo.save(_cart(), session_id="s1")
        assert cart_repo.get(user_id=1).lines == []
        assert cart_repo.get(session_id="s1").line_count == 2

    def test_delete_is_idempotent(self, cart_repo, fake_redis):
        cart_repo.save(_cart(), user_id=1)
        cart_repo.delete(user_id=1)
        cart_repo.delete(user_id=1)
        assert "cart:user:1" not in fake_redis.store

    def test_requires_identity(self, cart_repo):
        with pytest.raises(IdentityError):
            cart_repo.get()
        with pytest.raises(IdentityError):
            cart_repo.save(_cart())
        with pytest.raises(IdentityError):
            cart_repo.delete()
