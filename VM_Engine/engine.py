"""
Transaction engine for a single-buyer vending machine.

Balances and product stock live in one Redis database (see vm_db), which
lets a purchase drain the buyer's deposit and decrement stock in a single
WATCH / MULTI / EXEC transaction:

    deposit:  validate coin → BalanceLedger.add
    buy:      read stock → check stock → read deposit → check funds
              → (decrement stock + zero deposit, atomically) → make change
    reset:    BalanceLedger.zero → reject if it was already empty

Every rejection happens before anything is written, so a failed call leaves
both ledgers untouched. Optimistic-lock retries belong to vm_db; this module
never retries on its own.
"""

import logging
from dataclasses import replace

import redis

from VM_Engine.vm_shared import errors
from VM_Engine.vm_shared.change import make_change
from VM_Engine.vm_shared.coins import Coin
from VM_Engine.vm_shared.types import DepositReceipt, Outcome, PurchaseReceipt, ResetReceipt
from VM_Engine.vm_db.balance import BalanceLedger
from VM_Engine.vm_db.stock import StockLedger
from VM_Engine.vm_db.watched import run_watched

logger = logging.getLogger(__name__)


class TransactionEngine:
    OPERATIONS = ("deposit", "buy", "reset")

    def __init__(self, client: redis.Redis):
        self.db: redis.Redis = client
        self.balances = BalanceLedger(client)
        self.stock = StockLedger(client)

    def deposit(self, buyer_id: str, coin_value: int) -> DepositReceipt:
        logger.info("Processing deposit of %s cents for buyer %s", coin_value, buyer_id)
        try:
            coin = Coin.validate(coin_value)
            new_balance = self.balances.add(buyer_id, int(coin))
        except errors.VendingEngineError as e:
            logger.warning("Deposit rejected for buyer %s: %s", buyer_id, e)
            raise

        logger.info("Deposit successful. New deposit amount: %d cents", new_balance)
        return DepositReceipt(new_balance=new_balance)

    def buy(self, buyer_id: str, product_id: str, quantity: int) -> PurchaseReceipt:
        logger.info("Processing purchase of %s units of product %s for buyer %s", quantity, product_id, buyer_id)
        if quantity < 1:
            logger.warning("Purchase rejected for buyer %s: quantity %s", buyer_id, quantity)
            raise errors.InvalidOperationError(f"Quantity must be at least 1, got {quantity}")

        def _settle(pipe):
            product = self.stock.read_snapshot(pipe, product_id)
            if product.amount_available < quantity:
                raise errors.InsufficientStockError(product_id, product.amount_available, quantity)

            total_cost = product.cost * quantity
            balance = self.balances.read_deposit(pipe, buyer_id)
            if balance < total_cost:
                raise errors.InsufficientFundsError(buyer_id, total_cost, balance)

            # The whole deposit is consumed; anything above total_cost goes back as change.
            pipe.multi()
            self.stock.queue_decrement(pipe, product_id, quantity)
            self.balances.queue_zero(pipe, buyer_id)
            return product, total_cost, balance

        try:
            product, total_cost, balance = run_watched(
                self.db,
                "buy",
                _settle,
                self.stock.product_key(product_id),
                self.balances.buyer_key(buyer_id),
            )
        except errors.VendingEngineError as e:
            logger.warning("Purchase rejected for buyer %s: %s", buyer_id, e)
            raise

        change_amount = balance - total_cost
        receipt = PurchaseReceipt(
            total_spent=total_cost,
            quantity_purchased=quantity,
            change=make_change(change_amount),
            product=replace(product, amount_available=product.amount_available - quantity),
        )
        logger.info("Purchase successful. Total spent: %d cents, Change: %d cents", total_cost, change_amount)
        return receipt

    def reset(self, buyer_id: str) -> ResetReceipt:
        logger.info("Resetting deposit for buyer %s", buyer_id)
        try:
            previous = self.balances.zero(buyer_id)
            if previous == 0:
                raise errors.InvalidOperationError("No deposit to reset")
        except errors.VendingEngineError as e:
            logger.warning("Reset rejected for buyer %s: %s", buyer_id, e)
            raise

        logger.info("Deposit reset successful. Returned: %d cents", previous)
        return ResetReceipt(returned_amount=previous)

    def attempt(self, operation: str, *args) -> Outcome:
        """Run ``operation`` and fold business failures into an Outcome.

        Ledger infrastructure errors (unavailable store, exhausted retries)
        are not business outcomes and still propagate.
        """
        if operation not in self.OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")

        try:
            receipt = getattr(self, operation)(*args)
        except errors.VendingEngineError as e:
            return Outcome(kind=e.kind, detail=str(e))
        return Outcome(receipt=receipt)
