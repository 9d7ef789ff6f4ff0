"""RQ queue definitions."""

import logging

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from rq import Queue

from enricher.core.config import settings
from enricher.queue.models import QueueName

logger = logging.getLogger(__name__)

# Created on first use so importing this module never touches Redis
redis_pool: redis.ConnectionPool | None = None
_queues: dict[QueueName, Queue] = {}


def get_redis_pool() -> redis.ConnectionPool:
    """Get the shared Redis connection pool."""
    global redis_pool

    if redis_pool is None:
        redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_POOL_SIZE,
            socket_timeout=5,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        logger.debug(
            "Created Redis connection pool for %s (max_connections=%s)",
            settings.REDIS_URL,
            settings.REDIS_POOL_SIZE,
        )
    return redis_pool


def get_redis_connection() -> redis.Redis:
    """Get a Redis connection from the shared pool.

    Raises:
        RuntimeError: If Redis cannot be reached
    """
    conn = redis.Redis(connection_pool=get_redis_pool())
    try:
        conn.ping()
    except RedisConnectionError as e:
        logger.error(f"Redis connection failed: {e}")
        raise RuntimeError(f"Redis connection failed: {e}") from e
    return conn


def get_queue(name: QueueName) -> Queue:
    """Get the queue instance for ``name``, creating it on first use.

    Raises:
        RuntimeError: If the queue cannot be created
    """
    queue = _queues.get(name)
    if queue is None:
        try:
            queue = Queue(
                name.value,
                connection=redis.Redis(connection_pool=get_redis_pool()),
                default_timeout=settings.JOB_TIMEOUT,
                is_async=True,
            )
        except Exception as e:
            logger.error(f"Failed to create {name.value} queue: {e}")
            raise RuntimeError(f"Failed to create {name.value} queue: {e}") from e
        _queues[name] = queue
        logger.info(f"Created {name.value} queue")
    return queue


def get_all_queues() -> list[Queue]:
    """Get every enrichment queue, in declaration order."""
    return [get_queue(name) for name in QueueName]


def check_queue_health() -> dict[str, dict[str, object]]:
    """Report the size of each enrichment queue.

    Returns:
        Health status keyed by queue name
    """
    health: dict[str, dict[str, object]] = {}
    for name in QueueName:
        try:
            queue = get_queue(name)
            health[name.value] = {"count": queue.count, "is_empty": queue.is_empty()}
        except Exception as e:
            health[name.value] = {"error": str(e)}
    return health
