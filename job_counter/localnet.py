# job_counter/localnet.py
# LocalNet wiring: env config, algod/kmd clients, kmd-backed sender, algod provider.
import base64, os
from pathlib import Path
from typing import Optional
from urllib.error import URLError

import requests
from algosdk import encoding, error
from algosdk.atomic_transaction_composer import AccountTransactionSigner
from algosdk.kmd import KMDClient
from algosdk.transaction import ApplicationCreateTxn, ApplicationNoOpTxn, OnComplete, StateSchema
from algosdk.v2client.algod import AlgodClient

from .client import Provider
from .errors import NotDeployed, TransportError
from .state import (
    ADDR_KEY, ContractCode, CounterState, Sender,
    decode_global_state, itob, state_from_globals,
)

ALGOD_ADDR = os.getenv("ALGOD_LOCAL", "http://localhost:4001")
ALGOD_TOKEN = os.getenv("ALGOD_LOCAL_TOKEN", "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa")
KMD_ADDR = os.getenv("KMD_LOCAL", "http://localhost:4002")
KMD_TOKEN = os.getenv("KMD_LOCAL_TOKEN", ALGOD_TOKEN)  # usually same in sandbox
INDEXER_ADDR = os.getenv("INDEXER_LOCAL", "http://localhost:8980")
ARTIFACTS = Path(os.getenv("JOB_ARTIFACTS", "artifacts"))

# Globals: id,counter (uints) + addr (bytes) -> 2/1
GLOBAL_SCHEMA = StateSchema(num_uints=2, num_byte_slices=1)
LOCAL_SCHEMA = StateSchema(num_uints=0, num_byte_slices=0)

_TRANSPORT_ERRORS = (error.AlgodHTTPError, error.KMDHTTPError, URLError)


def get_algod() -> AlgodClient:
    return AlgodClient(ALGOD_TOKEN, ALGOD_ADDR, headers={"X-Algo-API-Token": ALGOD_TOKEN})


def get_kmd() -> KMDClient:
    return KMDClient(KMD_TOKEN, KMD_ADDR)


def is_up(base_url: str = ALGOD_ADDR, timeout: float = 3) -> bool:
    try:
        r = requests.get(f"{base_url}/health", timeout=timeout)
    except requests.RequestException:
        return False
    return r.status_code == 200


def kmd_sender(kmd: Optional[KMDClient] = None) -> Sender:
    """First key of the first kmd wallet, as a signing Sender."""
    k = kmd or get_kmd()
    try:
        wallets = k.list_wallets()
    except _TRANSPORT_ERRORS as e:
        raise TransportError(f"kmd unreachable at {KMD_ADDR}: {e}") from e
    wl = wallets["wallets"] if isinstance(wallets, dict) else wallets
    if not wl:
        raise TransportError("No KMD wallets found in LocalNet")
    wid = wl[0]["id"] if isinstance(wl[0], dict) else wl[0]
    for pw in ["", "a", "testpassword"]:
        try:
            h = k.init_wallet_handle(wid, pw)
        except error.KMDHTTPError:
            continue  # wrong password
        except URLError as e:
            raise TransportError(f"kmd unreachable at {KMD_ADDR}: {e}") from e

        # the handle is always released; the first failure is the one reported
        failure = None
        try:
            keys = k.list_keys(h)
            addr = keys[0] if keys else k.generate_key(h)
            sk = k.export_key(h, pw, addr)
        except _TRANSPORT_ERRORS as e:
            failure = e
        try:
            k.release_wallet_handle(h)
        except _TRANSPORT_ERRORS as e:
            failure = failure or e
        if failure is not None:
            raise TransportError(f"kmd wallet {wid}: {failure}") from failure
        return Sender(addr, AccountTransactionSigner(sk))
    raise TransportError("Could not unlock KMD wallet with '', 'a', or 'testpassword'")


def load_code(algod: AlgodClient, artifacts: Path = ARTIFACTS) -> ContractCode:
    """Compile artifacts/*.teal (written by contracts/build.py) via algod."""
    approval_src = (artifacts / "approval.teal").read_text()
    clear_src = (artifacts / "clear.teal").read_text()
    try:
        approval = base64.b64decode(algod.compile(approval_src)["result"])
        clear = base64.b64decode(algod.compile(clear_src)["result"])
    except _TRANSPORT_ERRORS as e:
        raise TransportError(f"compile failed: {e}") from e
    return ContractCode(approval, clear)


class AlgodProvider(Provider):
    """
    JobContract provider backed by algod.

    Application ids are assigned by the chain, so a derived address is
    resolved by scanning the creator's created apps for a matching `addr`
    global. Submissions return the txid without waiting for confirmation.
    """

    def __init__(self, algod: AlgodClient, creator: str):
        self.algod = algod
        self.creator = creator

    def _call(self, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except _TRANSPORT_ERRORS as e:
            raise TransportError(f"algod {getattr(fn, '__name__', fn)} failed: {e}") from e

    def find_app(self, address: str) -> tuple[Optional[int], Optional[CounterState]]:
        digest = encoding.decode_address(address)
        info = self._call(self.algod.account_info, self.creator)
        for app in info.get("created-apps", []):
            g = decode_global_state(app.get("params", {}).get("global-state", []))
            if g.get(ADDR_KEY) == digest:
                return app["id"], state_from_globals(g)
        return None, None

    def read_state(self, address: str) -> Optional[CounterState]:
        return self.find_app(address)[1]

    def _params(self, value: int):
        sp = self._call(self.algod.suggested_params)
        # attached value is paid as the flat fee
        sp.flat_fee = True
        sp.fee = value
        return sp

    def _submit(self, sender: Sender, txn) -> str:
        stxn = sender.signer.sign_transactions([txn], [0])[0]
        return self._call(self.algod.send_transaction, stxn)

    def deploy(self, sender: Sender, address: str, state: CounterState, code: ContractCode, value: int) -> str:
        txn = ApplicationCreateTxn(
            sender=sender.address,
            sp=self._params(value),
            on_complete=OnComplete.NoOpOC,
            approval_program=code.approval,
            clear_program=code.clear,
            global_schema=GLOBAL_SCHEMA,
            local_schema=LOCAL_SCHEMA,
            app_args=[encoding.decode_address(address), itob(state.id), itob(state.counter)],
            note=b"job contract deploy",
        )
        return self._submit(sender, txn)

    def increase(self, sender: Sender, address: str, increase_by: int, value: int) -> str:
        app_id, _ = self.find_app(address)
        if app_id is None:
            raise NotDeployed(address)
        txn = ApplicationNoOpTxn(
            sender=sender.address,
            sp=self._params(value),
            index=app_id,
            app_args=[b"increase", itob(increase_by)],
        )
        return self._submit(sender, txn)
