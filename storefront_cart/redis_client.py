"""
Redis-backed key-value storage with connection pooling and error mapping.
"""
import redis
from typing import Optional
from redis.exceptions import RedisError

from storefront_cart.config import Config
from storefront_cart.exceptions import StorageError


class RedisStorage:
    """KeyValueStorage over plain Redis string keys"""

    def __init__(self, client: Optional[redis.Redis] = None):
        self.pool: Optional[redis.ConnectionPool] = None
        self.client: Optional[redis.Redis] = client
        if self.client is None:
            self._connect()

    def _connect(self):
        """Initialize Redis connection pool"""
        try:
            self.pool = redis.ConnectionPool.from_url(
                Config.redis_url(),
                max_connections=Config.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=Config.REDIS_SOCKET_CONNECT_TIMEOUT,
                socket_timeout=Config.REDIS_SOCKET_TIMEOUT,
                decode_responses=True
            )
            self.client = redis.Redis(connection_pool=self.pool)
        except (RedisError, ValueError) as e:
            raise StorageError(f"Failed to configure Redis: {e}")

    def get(self, key: str) -> Optional[str]:
        """Get value from Redis"""
        try:
            return self.client.get(key)
        except RedisError as e:
            raise StorageError(f"Redis read failed for {key}: {e}")

    def set(self, key: str, value: str) -> None:
        """Set value in Redis"""
        try:
            self.client.set(key, value)
        except RedisError as e:
            raise StorageError(f"Redis write failed for {key}: {e}")

    def ping(self) -> bool:
        """Test Redis connection"""
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def close(self):
        """Close connection pool"""
        if self.pool:
            self.pool.disconnect()


# Global Redis storage instance
_redis_storage: Optional[RedisStorage] = None

def get_redis_storage() -> RedisStorage:
    """Get or create Redis storage instance (singleton)"""
    global _redis_storage
    if _redis_storage is None:
        Config.load_redis_secrets()
        _redis_storage = RedisStorage()
    return _redis_storage
