import redis

from VM_Engine.vm_shared import config, errors
from VM_Engine.vm_shared.types import HealthStatus
from VM_Engine.vm_db.watched import STORE_FAILURES


def create_ledger_client() -> redis.Redis:
    r = redis.Redis(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        db=config.REDIS_LEDGER_DB,
        decode_responses=False,
        socket_connect_timeout=config.REDIS_SOCKET_TIMEOUT,
        socket_timeout=config.REDIS_SOCKET_TIMEOUT,
    )
    try:
        r.ping()
    except STORE_FAILURES:
        raise errors.LedgerUnavailableError(f"Cannot connect to Redis at {config.REDIS_HOST}:{config.REDIS_PORT}")
    return r


def _count_keys(client: redis.Redis, prefix: str) -> int:
    count = 0
    for _key in client.scan_iter(match=f"{prefix}:*", count=100):
        count += 1
    return count


def health_check(client) -> HealthStatus:
    connected = False
    buyers = 0
    products = 0

    try:
        connected = bool(client.ping())
        buyers = _count_keys(client, config.BUYER_KEY_PREFIX)
        products = _count_keys(client, config.PRODUCT_KEY_PREFIX)
    except STORE_FAILURES:
        pass

    return HealthStatus(
        connected=connected,
        buyer_count=buyers,
        product_count=products,
    )


def close(client) -> None:
    client.close()
