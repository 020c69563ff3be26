import pytest
import fakeredis


@pytest.fixture
def ledger_server():
    return fakeredis.FakeServer()


@pytest.fixture
def ledger_client(ledger_server):
    r = fakeredis.FakeRedis(server=ledger_server)
    yield r
    r.flushdb()
    r.close()
