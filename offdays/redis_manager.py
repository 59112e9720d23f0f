"""
Redis Connection Manager
Provides a singleton asyncio Redis client with connection pooling
"""
import os
import logging
from typing import Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisConnectionManager:
    """
    Singleton Redis connection manager
    Holds the one connection pool shared by all requests
    """

    _instance: Optional['RedisConnectionManager'] = None
    _client: Optional[redis.Redis] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._client is None:
            self._connect()

    def _connect(self):
        """Initialize the Redis connection pool (connections open lazily)"""
        redis_host = os.getenv('REDIS_HOST', 'localhost')
        redis_port = int(os.getenv('REDIS_PORT', '6379'))
        redis_db = int(os.getenv('REDIS_DB', '0'))
        redis_password = os.getenv('REDIS_PASSWORD', None)

        # Connection pool settings
        max_connections = int(os.getenv('REDIS_MAX_CONNECTIONS', '10'))
        socket_timeout = float(os.getenv('REDIS_SOCKET_TIMEOUT', '5.0'))
        socket_connect_timeout = float(os.getenv('REDIS_CONNECT_TIMEOUT', '5.0'))

        pool = redis.ConnectionPool(
            host=redis_host,
            port=redis_port,
            db=redis_db,
            password=redis_password,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_connect_timeout,
            decode_responses=True  # Auto-decode bytes to strings
        )
        self._client = redis.Redis(connection_pool=pool)

        logger.info(
            f"Redis pool configured: {redis_host}:{redis_port} (db={redis_db})"
        )

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance"""
        if self._client is None:
            self._connect()
        return self._client

    async def close(self):
        """Close Redis connection"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")


def get_redis_client() -> redis.Redis:
    """
    Get Redis client instance

    Returns:
        redis.asyncio.Redis: Pooled Redis client
    """
    manager = RedisConnectionManager()
    return manager.client
