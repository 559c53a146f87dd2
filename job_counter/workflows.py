# job_counter/workflows.py
# Deploy and increment flows: build -> send -> poll for confirmation.
import random, time
from collections import namedtuple
from enum import Enum
from typing import Callable, Optional

from algosdk.util import algos_to_microalgos

from .client import JobContract, Provider
from .errors import DeployTimeout, JobCounterError, NotDeployed
from .poller import ConfirmationPoller
from .state import DEFAULT_NETWORK, ContractCode, CounterState, Sender

ID_RANGE = 10000
DEFAULT_VALUE = algos_to_microalgos(0.05)
DEPLOY_ATTEMPTS = 10
DEPLOY_INTERVAL = 2.0

DeployResult = namedtuple("DeployResult", "address id")
IncrementResult = namedtuple("IncrementResult", "address counter_before counter_after attempts")


class Stage(Enum):
    BUILT = "built"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def random_id(rng=random) -> int:
    return rng.randrange(ID_RANGE)


def wait_for_deploy(provider: Provider, address: str, attempts: int = DEPLOY_ATTEMPTS,
                    interval: float = DEPLOY_INTERVAL, sleep: Callable[[float], None] = time.sleep) -> int:
    """Existence check, not a value check. Returns the attempt it showed up on."""
    for attempt in range(1, attempts + 1):
        if provider.is_contract_deployed(address):
            return attempt
        if attempt < attempts:
            sleep(interval)
    raise DeployTimeout(address, attempts)


class DeploymentWorkflow:
    def __init__(self, provider: Provider, sender: Sender, code: ContractCode,
                 value: int = DEFAULT_VALUE, network: str = DEFAULT_NETWORK,
                 attempts: int = DEPLOY_ATTEMPTS, interval: float = DEPLOY_INTERVAL,
                 sleep: Callable[[float], None] = time.sleep):
        self.provider = provider
        self.sender = sender
        self.code = code
        self.value = value
        self.network = network
        self.attempts = attempts
        self.interval = interval
        self.sleep = sleep
        self.stage: Optional[Stage] = None
        self.contract: Optional[JobContract] = None

    def run(self, id: Optional[int] = None) -> DeployResult:
        state = CounterState(id=random_id() if id is None else id, counter=0)
        self.contract = self.provider.open(
            JobContract.create_from_config(state, self.code, network=self.network)
        )
        self.stage = Stage.BUILT
        try:
            self.contract.send_deploy(self.sender, self.value)
            self.stage = Stage.SUBMITTED
            wait_for_deploy(self.provider, self.contract.address,
                            attempts=self.attempts, interval=self.interval, sleep=self.sleep)
            deployed_id = self.contract.get_id()
        except JobCounterError:
            self.stage = Stage.FAILED
            raise
        self.stage = Stage.CONFIRMED
        return DeployResult(self.contract.address, deployed_id)


class IncrementWorkflow:
    def __init__(self, provider: Provider, sender: Sender, poller: Optional[ConfirmationPoller] = None,
                 value: int = DEFAULT_VALUE):
        self.provider = provider
        self.sender = sender
        self.poller = poller or ConfirmationPoller()
        self.value = value

    def run(self, address: str, increase_by: int = 1) -> IncrementResult:
        contract = self.provider.open(JobContract.create_from_address(address))
        if not self.provider.is_contract_deployed(contract.address):
            raise NotDeployed(contract.address)

        counter_before = contract.get_counter()
        contract.send_increase(self.sender, increase_by, self.value)
        result = self.poller.poll(counter_before, contract.get_counter)
        return IncrementResult(contract.address, counter_before, result.value, result.attempts)
