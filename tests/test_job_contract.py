import random

import pytest
from algosdk.util import algos_to_microalgos

from job_counter import ContractCode, CounterState, JobContract
from job_counter.sandbox import TREASURY_BALANCE, Blockchain, has_transaction

CODE = ContractCode(approval=b"\x08\x31\x18\x14", clear=b"\x08\x81\x01")
VALUE = algos_to_microalgos(0.05)


@pytest.fixture
def chain():
    blockchain = Blockchain()
    job_contract = blockchain.open(JobContract.create_from_config(CounterState(id=0, counter=0), CODE))
    deployer = blockchain.treasury("deployer")

    deploy_result = job_contract.send_deploy(deployer.get_sender(), VALUE)

    assert has_transaction(
        deploy_result.transactions,
        from_=deployer.address,
        to=job_contract.address,
        deploy=True,
        success=True,
        op="deploy",
    )
    return blockchain, job_contract


def test_deploy(chain):
    _, job_contract = chain
    assert job_contract.get_id() == 0
    assert job_contract.get_counter() == 0


def test_increase_counter(chain):
    blockchain, job_contract = chain
    increase_times = 3
    total = 0
    for i in range(increase_times):
        increaser = blockchain.treasury(f"increaser{i}")
        counter_before = job_contract.get_counter()
        increase_by = random.randint(1, 100)

        increase_result = job_contract.send_increase(increaser.get_sender(), increase_by, VALUE)

        assert has_transaction(
            increase_result.transactions,
            from_=increaser.address,
            to=job_contract.address,
            success=True,
            op="increase",
        )
        total += increase_by
        counter_after = job_contract.get_counter()
        assert counter_after == counter_before + increase_by
        assert counter_after == total


def test_attached_value_is_paid(chain):
    blockchain, job_contract = chain
    increaser = blockchain.treasury("payer")
    held = blockchain.contracts[job_contract.address]["balance"]
    before = increaser.balance
    job_contract.send_increase(increaser.get_sender(), 1, VALUE)
    assert increaser.balance == before - VALUE
    assert blockchain.contracts[job_contract.address]["balance"] == held + VALUE


def test_increase_without_funds_is_aborted(chain):
    blockchain, job_contract = chain
    poor = blockchain.treasury("poor", balance=10)
    result = job_contract.send_increase(poor.get_sender(), 5, VALUE)
    assert has_transaction(result.transactions, from_=poor.address, success=False, aborted=True)
    assert job_contract.get_counter() == 0


def test_increase_to_missing_contract_bounces():
    blockchain = Blockchain()
    increaser = blockchain.treasury("increaser")
    ghost = JobContract.create_from_config(CounterState(id=7), CODE)
    # bypass the client check and hit the chain directly
    result = blockchain.increase(increaser.get_sender(), ghost.address, 3, VALUE)
    assert has_transaction(result.transactions, to=ghost.address, success=False, aborted=True)
    assert increaser.balance == TREASURY_BALANCE  # refunded
    assert blockchain.read_state(ghost.address) is None
