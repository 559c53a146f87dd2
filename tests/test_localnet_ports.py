import pytest
import requests

from job_counter.localnet import ALGOD_ADDR, INDEXER_ADDR, is_up

@pytest.mark.skipif(not is_up(ALGOD_ADDR), reason="LocalNet algod not running")
def test_algod_health():
    r = requests.get(f"{ALGOD_ADDR}/health", timeout=10)
    assert r.status_code == 200

@pytest.mark.skipif(not is_up(INDEXER_ADDR), reason="LocalNet indexer not running")
def test_indexer_health():
    r = requests.get(f"{INDEXER_ADDR}/health", timeout=10)
    assert r.status_code == 200

def test_is_up_false_when_nothing_listens():
    assert is_up("http://127.0.0.1:9", timeout=1) is False
