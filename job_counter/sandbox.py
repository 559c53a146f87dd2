# job_counter/sandbox.py
"""
In-memory chain for tests.

Mirrors the bits of a local test chain the JobContract tests need:
funded treasuries, contract accounts holding CounterState, a transaction
record per delivered message and a matcher over those records.

`confirmation_lag=k` queues every message and applies it on the k-th
state read after it was sent, so callers see eventual rather than
immediate consistency.
"""
import hashlib
from dataclasses import dataclass, field
from typing import Optional

from algosdk import encoding
from algosdk.util import algos_to_microalgos

from .client import Provider
from .state import ContractCode, CounterState, Sender

TREASURY_BALANCE = algos_to_microalgos(1_000_000)


@dataclass
class Transaction:
    from_: str
    to: str
    value: int
    deploy: bool = False
    success: bool = True
    aborted: bool = False
    op: str = ""


@dataclass
class SendResult:
    transactions: list = field(default_factory=list)


@dataclass
class Treasury:
    address: str
    blockchain: "Blockchain"

    def get_sender(self) -> Sender:
        return Sender(self.address)

    @property
    def balance(self) -> int:
        return self.blockchain.balances[self.address]


def has_transaction(transactions, **fields) -> bool:
    """True if any transaction matches every given field (use `from_` for the sender)."""
    return any(all(getattr(tx, k) == v for k, v in fields.items()) for tx in transactions)


class Blockchain(Provider):
    def __init__(self, confirmation_lag: int = 0):
        self.confirmation_lag = confirmation_lag
        self.balances: dict[str, int] = {}
        self.contracts: dict[str, dict] = {}
        self.transactions: list[Transaction] = []
        self.messages_sent = 0
        self._queue: list[list] = []   # [reads_left, deliver_fn]

    # ---- Accounts ----

    def treasury(self, name: str, balance: int = TREASURY_BALANCE) -> Treasury:
        addr = encoding.encode_address(hashlib.sha256(b"treasury:" + name.encode("utf-8")).digest())
        self.balances.setdefault(addr, balance)
        return Treasury(addr, self)

    def set_state(self, address: str, state: CounterState) -> None:
        self.contracts.setdefault(address, {"balance": 0})["state"] = state

    # ---- Provider ----

    def read_state(self, address: str) -> Optional[CounterState]:
        self._tick()
        c = self.contracts.get(address)
        return c["state"] if c else None

    def deploy(self, sender: Sender, address: str, state: CounterState, code: ContractCode, value: int) -> SendResult:
        def deliver(tx: Transaction):
            c = self.contracts.get(address)
            if c is None:
                self.contracts[address] = {"state": state, "balance": value}
                tx.deploy = True
            else:
                c["balance"] += value
        return self._send(sender, address, value, "deploy", deliver)

    def increase(self, sender: Sender, address: str, increase_by: int, value: int) -> SendResult:
        def deliver(tx: Transaction):
            c = self.contracts.get(address)
            if c is None or increase_by <= 0:
                self._bounce(tx)
                return
            s = c["state"]
            c["state"] = CounterState(id=s.id, counter=s.counter + increase_by)
            c["balance"] += value
        return self._send(sender, address, value, "increase", deliver)

    # ---- Internals ----

    def _bounce(self, tx: Transaction) -> None:
        tx.success = False
        tx.aborted = True
        self.balances[tx.from_] += tx.value

    def _send(self, sender: Sender, address: str, value: int, op: str, deliver) -> SendResult:
        self.messages_sent += 1
        result = SendResult()
        tx = Transaction(from_=sender.address, to=address, value=value, op=op)
        if self.balances.get(sender.address, 0) < value:
            tx.success = False
            tx.aborted = True
            self._record(result, tx)
            return result
        self.balances[sender.address] -= value

        def apply():
            deliver(tx)
            self._record(result, tx)

        if self.confirmation_lag > 0:
            self._queue.append([self.confirmation_lag, apply])
        else:
            apply()
        return result

    def _record(self, result: SendResult, tx: Transaction) -> None:
        result.transactions.append(tx)
        self.transactions.append(tx)

    def _tick(self) -> None:
        due = []
        for item in self._queue:
            item[0] -= 1
            if item[0] <= 0:
                due.append(item)
        for item in due:
            self._queue.remove(item)
            item[1]()
