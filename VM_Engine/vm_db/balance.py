from typing import Optional

import redis

from VM_Engine.vm_shared import config, errors
from VM_Engine.vm_shared.types import BuyerRecord
from VM_Engine.vm_db.watched import STORE_FAILURES, run_watched


class BalanceLedger:
    def __init__(self, client: redis.Redis):
        self.db: redis.Redis = client

    def buyer_key(self, buyer_id: str) -> str:
        return f"{config.BUYER_KEY_PREFIX}:{buyer_id}"

    def _deserialize_record(self, data: dict[bytes, bytes]) -> BuyerRecord:
        return BuyerRecord(
            buyer_id=data[b"buyer_id"].decode(),
            username=data[b"username"].decode(),
            deposit=int(data[b"deposit"]),
        )

    def read_deposit(self, conn, buyer_id: str) -> int:
        """Read a buyer's deposit through ``conn`` (client or watching pipeline)."""
        val = conn.hget(self.buyer_key(buyer_id), "deposit")
        if val is None:
            raise errors.BuyerNotFoundError(buyer_id)
        return int(val)

    def queue_zero(self, pipe: redis.client.Pipeline, buyer_id: str) -> None:
        pipe.hset(self.buyer_key(buyer_id), "deposit", 0)

    # ─── Buyer Management ───

    def register_buyer(self, buyer_id: str, username: str = "") -> bool:
        buyer_key = self.buyer_key(buyer_id)

        def _register(pipe):
            if pipe.exists(buyer_key):
                return False
            pipe.multi()
            pipe.hset(buyer_key, mapping={
                "buyer_id": buyer_id,
                "username": username,
                "deposit": 0,
            })
            return True

        return run_watched(self.db, "register_buyer", _register, buyer_key)

    def exists(self, buyer_id: str) -> bool:
        try:
            return bool(self.db.exists(self.buyer_key(buyer_id)))
        except STORE_FAILURES:
            raise errors.LedgerUnavailableError("exists")

    def get_record(self, buyer_id: str) -> Optional[BuyerRecord]:
        try:
            data = self.db.hgetall(self.buyer_key(buyer_id))
            if not data:
                return None
            return self._deserialize_record(data)
        except STORE_FAILURES:
            raise errors.LedgerUnavailableError("get_record")

    # ─── Ledger Operations ───

    def get(self, buyer_id: str) -> int:
        try:
            return self.read_deposit(self.db, buyer_id)
        except STORE_FAILURES:
            raise errors.LedgerUnavailableError("get_balance")

    def add(self, buyer_id: str, coin_value: int) -> int:
        if coin_value <= 0:
            raise errors.InvalidOperationError(f"Deposit must be positive, got {coin_value}")
        buyer_key = self.buyer_key(buyer_id)

        def _add(pipe):
            current = self.read_deposit(pipe, buyer_id)
            pipe.multi()
            pipe.hincrby(buyer_key, "deposit", coin_value)
            return current + coin_value

        return run_watched(self.db, "add_balance", _add, buyer_key)

    def zero(self, buyer_id: str) -> int:
        """Reset the deposit to 0 and return what it held before."""
        buyer_key = self.buyer_key(buyer_id)

        def _zero(pipe):
            previous = self.read_deposit(pipe, buyer_id)
            pipe.multi()
            self.queue_zero(pipe, buyer_id)
            return previous

        return run_watched(self.db, "zero_balance", _zero, buyer_key)
