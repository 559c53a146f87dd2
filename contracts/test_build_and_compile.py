import json

import pytest
import requests
from pyteal import compileTeal, Mode

import build
from job_contract import approval_program
from job_counter.localnet import ALGOD_ADDR, ALGOD_TOKEN, is_up

def test_artifacts_written(tmp_path):
    build.main(tmp_path)
    approval = tmp_path / "approval.teal"
    clear = tmp_path / "clear.teal"
    assert approval.exists()
    assert clear.exists()
    j = json.loads((tmp_path / "contract.manifest.json").read_text())
    assert "artifacts" in j and "approval" in j["artifacts"]
    assert j["artifacts"]["approval"]["sha256"] == build.sha256_hex(approval.read_text())
    assert j["global_schema"] == {"num_uints": 2, "num_byte_slices": 1}

def test_approval_program_uses_counter_keys():
    teal = compileTeal(approval_program(), mode=Mode.Application, version=build.TEAL_VERSION)
    assert teal.startswith(f"#pragma version {build.TEAL_VERSION}")
    for key in ('"addr"', '"id"', '"counter"', '"increase"'):
        assert key in teal

@pytest.mark.skipif(not is_up(), reason="LocalNet algod not running")
def test_algod_compile_endpoint_localnet():
    approval, _ = build.compile_programs()
    headers = {"Content-Type": "text/plain", "X-Algo-API-Token": ALGOD_TOKEN}

    r = requests.post(
        f"{ALGOD_ADDR}/v2/teal/compile",
        data=approval,
        headers=headers,
        timeout=15,
    )
    assert r.status_code == 200, f"compile failed: {r.status_code} {r.text}"
    assert "result" in r.json()
