import logging

import pytest

from VM_Engine.vm_shared import errors
from VM_Engine.vm_shared.errors import ErrorKind
from VM_Engine.vm_shared.types import DepositReceipt, PurchaseReceipt, ResetReceipt


def _fund(engine, buyer_id, *coins):
    for coin in coins:
        engine.deposit(buyer_id, coin)


# ── Deposit ──

def test_deposit_returns_new_balance(engine, buyer):
    receipt = engine.deposit(buyer, 100)
    assert isinstance(receipt, DepositReceipt)
    assert receipt.new_balance == 100
    assert receipt.message == "Deposit successful"

    assert engine.deposit(buyer, 50).new_balance == 150


@pytest.mark.parametrize("value", [25, 0, -5, 1, 200])
def test_deposit_invalid_coin_leaves_balance_unchanged(engine, buyer, value):
    engine.deposit(buyer, 20)
    with pytest.raises(errors.InvalidCoinError):
        engine.deposit(buyer, value)
    assert engine.balances.get(buyer) == 20


def test_deposit_unknown_buyer_raises(engine):
    with pytest.raises(errors.BuyerNotFoundError):
        engine.deposit("ghost", 10)


# ── Buy ──

def test_buy_drains_balance_and_returns_change(engine, buyer, cola):
    _fund(engine, buyer, 100, 50)

    receipt = engine.buy(buyer, cola, 1)

    assert isinstance(receipt, PurchaseReceipt)
    assert receipt.total_spent == 60
    assert receipt.quantity_purchased == 1
    assert receipt.change == {50: 1, 20: 2}
    assert receipt.change_total == 90
    assert receipt.product.product_id == cola
    assert receipt.product.amount_available == 9
    assert engine.stock.get(cola).amount_available == 9
    assert engine.balances.get(buyer) == 0


def test_buy_exact_amount_gives_no_change(engine, buyer, cola):
    _fund(engine, buyer, 50, 10)
    receipt = engine.buy(buyer, cola, 1)
    assert receipt.change == {}
    assert engine.balances.get(buyer) == 0


def test_buy_multiple_units(engine, buyer, cola):
    _fund(engine, buyer, 100, 100)
    receipt = engine.buy(buyer, cola, 3)
    assert receipt.total_spent == 180
    assert receipt.change == {20: 1}
    assert engine.stock.get(cola).amount_available == 7


def test_buy_insufficient_stock_changes_nothing(engine, buyer, cola):
    _fund(engine, buyer, 100, 100, 100, 100, 100, 100, 100)
    with pytest.raises(errors.InsufficientStockError):
        engine.buy(buyer, cola, 11)
    assert engine.balances.get(buyer) == 700
    assert engine.stock.get(cola).amount_available == 10


def test_buy_insufficient_funds_changes_nothing(engine, buyer, cola):
    _fund(engine, buyer, 50)
    with pytest.raises(errors.InsufficientFundsError) as exc:
        engine.buy(buyer, cola, 1)
    assert exc.value.required == 60
    assert exc.value.available == 50
    assert engine.balances.get(buyer) == 50
    assert engine.stock.get(cola).amount_available == 10


def test_buy_stock_is_checked_before_funds(engine, buyer, cola):
    with pytest.raises(errors.InsufficientStockError):
        engine.buy(buyer, cola, 11)


@pytest.mark.parametrize("quantity", [0, -1])
def test_buy_non_positive_quantity_raises(engine, buyer, cola, quantity):
    _fund(engine, buyer, 100)
    with pytest.raises(errors.InvalidOperationError):
        engine.buy(buyer, cola, quantity)
    assert engine.balances.get(buyer) == 100


def test_buy_unknown_product_raises(engine, buyer):
    with pytest.raises(errors.ProductNotFoundError):
        engine.buy(buyer, "ghost", 1)


def test_buy_unknown_buyer_raises_and_keeps_stock(engine, cola):
    with pytest.raises(errors.BuyerNotFoundError):
        engine.buy("ghost", cola, 1)
    assert engine.stock.get(cola).amount_available == 10


def test_receipt_to_dict(engine, buyer, cola):
    _fund(engine, buyer, 100)
    data = engine.buy(buyer, cola, 1).to_dict()
    assert data["total_spent"] == 60
    assert data["change"] == {20: 2}
    assert data["product"]["product_name"] == "Cola"


# ── Reset ──

def test_reset_returns_balance(engine, buyer):
    _fund(engine, buyer, 20, 5)
    receipt = engine.reset(buyer)
    assert isinstance(receipt, ResetReceipt)
    assert receipt.returned_amount == 25
    assert receipt.message == "Deposit reset successful. Returned: 25 cents"
    assert engine.balances.get(buyer) == 0


def test_reset_empty_balance_raises(engine, buyer):
    with pytest.raises(errors.InvalidOperationError, match="No deposit to reset"):
        engine.reset(buyer)
    assert engine.balances.get(buyer) == 0


def test_reset_after_buy_raises(engine, buyer, cola):
    _fund(engine, buyer, 100)
    engine.buy(buyer, cola, 1)
    with pytest.raises(errors.InvalidOperationError):
        engine.reset(buyer)


def test_reset_unknown_buyer_raises(engine):
    with pytest.raises(errors.BuyerNotFoundError):
        engine.reset("ghost")


# ── Outcomes ──

def test_attempt_success_carries_receipt(engine, buyer):
    outcome = engine.attempt("deposit", buyer, 10)
    assert outcome.ok
    assert outcome.kind is None
    assert outcome.receipt.new_balance == 10


@pytest.mark.parametrize("operation,args,kind", [
    ("deposit", ("alice_test_uuid", 25), ErrorKind.INVALID_COIN),
    ("deposit", ("ghost", 10), ErrorKind.NOT_FOUND),
    ("buy", ("alice_test_uuid", "cola_test_uuid", 11), ErrorKind.INSUFFICIENT_STOCK),
    ("buy", ("alice_test_uuid", "cola_test_uuid", 1), ErrorKind.INSUFFICIENT_FUNDS),
    ("buy", ("alice_test_uuid", "cola_test_uuid", 0), ErrorKind.INVALID_OPERATION),
    ("reset", ("alice_test_uuid",), ErrorKind.INVALID_OPERATION),
])
def test_attempt_failure_is_tagged(engine, buyer, cola, operation, args, kind):
    outcome = engine.attempt(operation, *args)
    assert not outcome.ok
    assert outcome.receipt is None
    assert outcome.kind is kind
    assert outcome.detail


def test_attempt_unknown_operation_raises(engine):
    with pytest.raises(ValueError):
        engine.attempt("refund", "alice")


# ── Logging ──

def test_rejection_is_logged_as_warning(engine, buyer, caplog):
    with caplog.at_level(logging.INFO, logger="VM_Engine.engine"):
        with pytest.raises(errors.InvalidCoinError):
            engine.deposit(buyer, 25)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Deposit rejected" in warnings[0].getMessage()
