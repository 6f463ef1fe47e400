"""
Generic Redis connection management.
Shared by every component that persists state in Redis.
"""

import redis
import structlog

logger = structlog.get_logger(__name__)


class RedisConnection:
    """Base class for Redis connection management"""

    def __init__(
        self,
        host: str,
        port: int,
        password: str | None = None,
        ssl: bool = False,
        timeout_ms: int = 5000,
        clustered: bool = False,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.ssl = ssl
        self.timeout_ms = timeout_ms
        self.clustered = clustered
        self.client = None
        self._connect()

    @classmethod
    def from_configuration(cls, config) -> "RedisConnection":
        """Build a connection from a loaded process configuration"""
        return cls(
            host=config.REDIS_HOSTNAME,
            port=config.REDIS_PORT,
            password=config.REDIS_PASSWORD,
            ssl=config.REDIS_SSL,
            timeout_ms=config.REDIS_TIMEOUT,
            clustered=config.REDIS_CLUSTERED,
        )

    def _connect(self):
        """Create the Redis client"""
        client_class = redis.RedisCluster if self.clustered else redis.Redis
        try:
            self.client = client_class(
                host=self.host,
                port=self.port,
                password=self.password,
                ssl=self.ssl,
                socket_timeout=self.timeout_ms / 1000,
                decode_responses=True,
            )
            logger.info(
                "Redis client created",
                host=self.host,
                port=self.port,
                clustered=self.clustered,
            )
        except Exception as e:
            logger.error("Failed to create Redis client", error=str(e))
            raise

    def check_health(self) -> bool:
        """Check if the Redis server answers a ping"""
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return False

    def close(self):
        """Close the Redis client"""
        if self.client:
            self.client.close()
            logger.info("Redis connection closed")
