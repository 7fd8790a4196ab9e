# storefront/data/cache.py
import redis

from storefront.utils.settings import REDIS_URL

_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """
    Wspolny klient redisa dla calego procesu.
    Polaczenia sa leniwe, wiec stworzenie klienta nic nie kosztuje.
    """
    global _client
    if _client is None:
        _client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _client
