import pytest

from VM_Engine.vm_db.balance import BalanceLedger
from VM_Engine.vm_db.stock import StockLedger


@pytest.fixture
def balances(ledger_client):
    return BalanceLedger(ledger_client)


@pytest.fixture
def stock(ledger_client):
    return StockLedger(ledger_client)


@pytest.fixture
def registered_buyer(balances):
    buyer_id = "alice_test_uuid"
    balances.register_buyer(buyer_id, "alice")
    return buyer_id


@pytest.fixture
def registered_product(stock):
    product_id = "cola_test_uuid"
    stock.register_product(product_id, "Cola", amount_available=10, cost=60, seller_id="seller_001")
    return product_id
