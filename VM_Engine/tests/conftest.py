import pytest

from VM_Engine.engine import TransactionEngine


@pytest.fixture
def engine(ledger_client):
    return TransactionEngine(ledger_client)


@pytest.fixture
def buyer(engine):
    buyer_id = "alice_test_uuid"
    engine.balances.register_buyer(buyer_id, "alice")
    return buyer_id


@pytest.fixture
def cola(engine):
    product_id = "cola_test_uuid"
    engine.stock.register_product(product_id, "Cola", amount_available=10, cost=60, seller_id="seller_001")
    return product_id
