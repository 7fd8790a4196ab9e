# storefront/repos/cart_repo.py
import redis

from storefront.domain.cart import Cart, CacheResult, Hit, Miss, cart_key
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Koszyk trzymany w redisie pod kluczem user/sesja.
    -brak klucza = pusty koszyk, to nie jest blad
    -kazdy zapis resetuje TTL (sliding expiry)
    -last write wins, brak CAS na wpisie koszyka
    """

    def __init__(self, client: redis.Redis, ttl: int = CART_TTL_SECONDS):
        self.redis = client
        self.ttl = ttl

    @redis_retry()
    def lookup(self, key: str) -> CacheResult:
        raw = self.redis.get(key)
        if raw is None:
            return Miss()
        return Hit(Cart.from_json(raw))

    def get(self, user_id: int | None = None, session_id: str | None = None) -> Cart:
        result = self.lookup(cart_key(user_id, session_id))
        if isinstance(result, Hit):
            return result.cart
        return Cart.empty()

    @redis_retry()
    def save(self, cart: Cart, user_id: int | None = None, session_id: str | None = None) -> None:
        key = cart_key(user_id, session_id)
        #SETEX cart:user:1 604800 "{...}"
        self.redis.setex(key, self.ttl, cart.to_json())
        logger.info(f"Saved {key}: {len(cart.lines)} lines, total {cart.total}")

    @redis_retry()
    def delete(self, user_id: int | None = None, session_id: str | None = None) -> None:
        key = cart_key(user_id, session_id)
        #DEL na nieistniejacym kluczu zwraca 0, nie blad
        self.redis.delete(key)
        logger.info(f"Deleted {key}")
