"""
Bounded optimistic transactions over Redis WATCH / MULTI / EXEC.

The body receives a pipeline that is already watching the given keys and is
still in immediate mode, so reads return values straight away. It must call
``pipe.multi()`` before queueing writes. Whatever it returns is handed back
once EXEC commits. Exceptions raised by the body abort the attempt without
writing anything and propagate unchanged.
"""

import logging
from typing import Callable, Optional, TypeVar

import redis

from VM_Engine.vm_shared import config, errors

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Socket timeouts are raised separately from ConnectionError by redis-py
STORE_FAILURES = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def run_watched(
    client: redis.Redis,
    operation: str,
    body: Callable[[redis.client.Pipeline], T],
    *keys: str,
    retries: Optional[int] = None,
) -> T:
    if retries is None:
        retries = config.LEDGER_OPTIMISTIC_LOCK_RETRIES

    try:
        for attempt in range(retries):
            with client.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(*keys)
                    value = body(pipe)
                    pipe.execute()
                    return value
                except redis.WatchError:
                    logger.debug("%s: watched key changed, retrying (attempt %d)", operation, attempt + 1)
                    continue

        logger.warning("%s: gave up after %d conflicting attempts", operation, retries)
        raise errors.ConcurrencyError(operation)
    except STORE_FAILURES:
        raise errors.LedgerUnavailableError(operation)
