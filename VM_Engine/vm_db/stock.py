import redis

from VM_Engine.vm_shared import config, errors
from VM_Engine.vm_shared.types import ProductSnapshot, Stock
from VM_Engine.vm_db.watched import STORE_FAILURES, run_watched


class StockLedger:
    def __init__(self, client: redis.Redis):
        self.db: redis.Redis = client

    def product_key(self, product_id: str) -> str:
        return f"{config.PRODUCT_KEY_PREFIX}:{product_id}"

    def _validate_product(self, amount_available: int, cost: int) -> None:
        if amount_available < 0:
            raise errors.InvalidOperationError(f"Amount available must be non-negative, got {amount_available}")
        if cost < config.MIN_PRODUCT_COST:
            raise errors.InvalidOperationError(f"Cost must be at least {config.MIN_PRODUCT_COST} cents, got {cost}")
        if cost % config.SMALLEST_COIN != 0:
            raise errors.InvalidOperationError(f"Cost must be a multiple of {config.SMALLEST_COIN} cents, got {cost}")

    def _deserialize_snapshot(self, product_id: str, data: dict[bytes, bytes]) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=product_id,
            product_name=data[b"product_name"].decode(),
            amount_available=int(data[b"amount_available"]),
            cost=int(data[b"cost"]),
            seller_id=data[b"seller_id"].decode(),
        )

    def read_snapshot(self, conn, product_id: str) -> ProductSnapshot:
        """Read a product through ``conn`` (client or watching pipeline)."""
        data = conn.hgetall(self.product_key(product_id))
        if not data:
            raise errors.ProductNotFoundError(product_id)
        return self._deserialize_snapshot(product_id, data)

    def queue_decrement(self, pipe: redis.client.Pipeline, product_id: str, quantity: int) -> None:
        pipe.hincrby(self.product_key(product_id), "amount_available", -quantity)

    # ─── Product Management ───

    def register_product(
        self,
        product_id: str,
        product_name: str,
        amount_available: int,
        cost: int,
        seller_id: str,
    ) -> bool:
        self._validate_product(amount_available, cost)
        product_key = self.product_key(product_id)

        def _register(pipe):
            if pipe.exists(product_key):
                return False
            pipe.multi()
            pipe.hset(product_key, mapping={
                "product_id": product_id,
                "product_name": product_name,
                "amount_available": amount_available,
                "cost": cost,
                "seller_id": seller_id,
            })
            return True

        return run_watched(self.db, "register_product", _register, product_key)

    # ─── Ledger Operations ───

    def get(self, product_id: str) -> Stock:
        return self.get_snapshot(product_id).stock

    def get_snapshot(self, product_id: str) -> ProductSnapshot:
        try:
            return self.read_snapshot(self.db, product_id)
        except STORE_FAILURES:
            raise errors.LedgerUnavailableError("get_stock")

    def decrement(self, product_id: str, quantity: int) -> int:
        if quantity < 1:
            raise errors.InvalidOperationError(f"Quantity must be at least 1, got {quantity}")
        product_key = self.product_key(product_id)

        def _decrement(pipe):
            available = self.read_snapshot(pipe, product_id).amount_available
            if available < quantity:
                raise errors.InsufficientStockError(product_id, available, quantity)
            pipe.multi()
            self.queue_decrement(pipe, product_id, quantity)
            return available - quantity

        return run_watched(self.db, "decrement_stock", _decrement, product_key)

    # ─── Query Operations ───

    def get_available_products(self) -> list[ProductSnapshot]:
        try:
            products = []
            cursor = 0
            prefix_len = len(config.PRODUCT_KEY_PREFIX) + 1
            while True:
                cursor, keys = self.db.scan(cursor=cursor, match=f"{config.PRODUCT_KEY_PREFIX}:*", count=100)
                if keys:
                    pipe = self.db.pipeline(transaction=False)
                    for key in keys:
                        pipe.hgetall(key)
                    results = pipe.execute()

                    for key, data in zip(keys, results):
                        if not data:
                            continue
                        snapshot = self._deserialize_snapshot(key.decode()[prefix_len:], data)
                        if snapshot.amount_available > 0:
                            products.append(snapshot)

                if cursor == 0:
                    break

            return sorted(products, key=lambda p: p.product_id)
        except STORE_FAILURES:
            raise errors.LedgerUnavailableError("get_available_products")
