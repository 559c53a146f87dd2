# job_counter/client.py
# Typed handle to one JobContract instance, bound to a provider (algod or sandbox).
from dataclasses import dataclass, replace
from typing import Any, Optional

from .errors import DeployConflict, InvalidAmount, InvalidConfig, NotDeployed
from .state import (
    DEFAULT_NETWORK, ContractCode, CounterState, Sender,
    derive_address, parse_address, validate_state,
)


class Provider:
    """What a JobContract needs from the chain side."""

    def read_state(self, address: str) -> Optional[CounterState]:
        raise NotImplementedError

    def deploy(self, sender: Sender, address: str, state: CounterState, code: ContractCode, value: int) -> Any:
        raise NotImplementedError

    def increase(self, sender: Sender, address: str, increase_by: int, value: int) -> Any:
        raise NotImplementedError

    def is_contract_deployed(self, address: str) -> bool:
        return self.read_state(address) is not None

    def open(self, contract: "JobContract") -> "JobContract":
        return contract.open(self)


@dataclass(frozen=True)
class JobContract:
    address: str
    init: Optional[CounterState] = None
    code: Optional[ContractCode] = None
    provider: Optional[Provider] = None

    @classmethod
    def create_from_config(cls, state: CounterState, code: ContractCode,
                           network: str = DEFAULT_NETWORK) -> "JobContract":
        validate_state(state)
        return cls(address=derive_address(state, code, network), init=state, code=code)

    @classmethod
    def create_from_address(cls, address: str) -> "JobContract":
        return cls(address=parse_address(address))

    def open(self, provider: Provider) -> "JobContract":
        return replace(self, provider=provider)

    def _provider(self) -> Provider:
        if self.provider is None:
            raise InvalidConfig(f"JobContract {self.address} is not opened with a provider")
        return self.provider

    # ---- Getters ----

    def get_state(self) -> CounterState:
        state = self._provider().read_state(self.address)
        if state is None:
            raise NotDeployed(self.address)
        return state

    def get_id(self) -> int:
        return self.get_state().id

    def get_counter(self) -> int:
        return self.get_state().counter

    # ---- Messages ----

    def send_deploy(self, sender: Sender, value: int):
        if self.init is None or self.code is None:
            raise InvalidConfig("send_deploy needs a contract built with create_from_config")
        provider = self._provider()
        existing = provider.read_state(self.address)
        if existing is not None:
            if existing.id != self.init.id:
                raise DeployConflict(self.address, existing.id, self.init.id)
            return None  # already deployed with the same id
        return provider.deploy(sender, self.address, self.init, self.code, value)

    def send_increase(self, sender: Sender, increase_by: int, value: int):
        if not isinstance(increase_by, int) or isinstance(increase_by, bool) or increase_by <= 0:
            raise InvalidAmount(increase_by)
        return self._provider().increase(sender, self.address, increase_by, value)
