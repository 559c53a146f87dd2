# job_counter/state.py
# Counter state, compiled code and address derivation (pure, no I/O).
import base64, hashlib
from dataclasses import dataclass
from typing import Any, Optional

from algosdk import encoding

from .errors import InvalidConfig

# -------- Global keys (must match contracts/job_contract.py) --------
ADDR_KEY = b"addr"        # bytes: 32-byte derived address digest
ID_KEY = b"id"            # uint
COUNTER_KEY = b"counter"  # uint

ADDRESS_DOMAIN = b"job-contract/v1"
DEFAULT_NETWORK = "localnet"


@dataclass(frozen=True)
class CounterState:
    id: int
    counter: int = 0


@dataclass(frozen=True)
class ContractCode:
    approval: bytes
    clear: bytes


@dataclass(frozen=True)
class Sender:
    """Who pays for and authorizes a submission. `signer` is None in the sandbox."""
    address: str
    signer: Any = None


def itob(n: int) -> bytes:
    return n.to_bytes(8, "big")


def validate_state(state: CounterState) -> None:
    for name in ("id", "counter"):
        v = getattr(state, name)
        if not isinstance(v, int) or isinstance(v, bool):
            raise InvalidConfig(f"{name} must be an integer, got {v!r}")
        if v < 0 or v >= 2**64:
            raise InvalidConfig(f"{name} must fit in a uint64, got {v}")


def address_digest(state: CounterState, code: ContractCode, network: str = DEFAULT_NETWORK) -> bytes:
    validate_state(state)
    h = hashlib.sha256()
    h.update(ADDRESS_DOMAIN + b"|" + network.encode("utf-8") + b"|")
    h.update(hashlib.sha256(code.approval).digest())
    h.update(hashlib.sha256(code.clear).digest())
    h.update(itob(state.id) + itob(state.counter))
    return h.digest()


def derive_address(state: CounterState, code: ContractCode, network: str = DEFAULT_NETWORK) -> str:
    return encoding.encode_address(address_digest(state, code, network))


def parse_address(address: str) -> str:
    if not isinstance(address, str) or not encoding.is_valid_address(address):
        raise InvalidConfig(f"malformed address: {address!r}")
    return address


def decode_global_state(entries: list[dict]) -> dict[bytes, Any]:
    """algod `global-state` list -> {key_bytes: int | bytes}."""
    out: dict[bytes, Any] = {}
    for item in entries or []:
        key = base64.b64decode(item["key"])
        value = item.get("value", {})
        if value.get("type") == 1:
            out[key] = base64.b64decode(value.get("bytes", ""))
        else:
            out[key] = value.get("uint", 0)
    return out


def state_from_globals(globals_: dict[bytes, Any]) -> Optional[CounterState]:
    if ID_KEY not in globals_:
        return None
    return CounterState(id=int(globals_[ID_KEY]), counter=int(globals_.get(COUNTER_KEY, 0)))
