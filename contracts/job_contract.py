# contracts/job_contract.py
# JobContract: an id plus a counter that anyone can increase by a positive amount.
from pyteal import *

# -------- Global keys --------
ADDR_KEY = Bytes("addr")        # bytes: derived address digest (lookup key for clients)
ID_KEY = Bytes("id")            # uint: fixed at create
COUNTER_KEY = Bytes("counter")  # uint: only ever increases


def approval_program() -> Expr:
    is_creator = Txn.sender() == Global.creator_address()

    # create(addr_digest, itob(id), itob(counter))
    on_create = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        Assert(Len(Txn.application_args[0]) == Int(32)),
        App.globalPut(ADDR_KEY, Txn.application_args[0]),
        App.globalPut(ID_KEY, Btoi(Txn.application_args[1])),
        App.globalPut(COUNTER_KEY, Btoi(Txn.application_args[2])),
        Approve(),
    )

    # increase(itob(amount))  [amount > 0]
    amount = Btoi(Txn.application_args[1])
    do_increase = Seq(
        Assert(Txn.application_args.length() == Int(2)),
        Assert(amount > Int(0)),
        App.globalPut(COUNTER_KEY, App.globalGet(COUNTER_KEY) + amount),
        Log(Bytes("increase")),
        Approve(),
    )

    on_noop = Cond(
        [Txn.application_args[0] == Bytes("increase"), do_increase],
    )

    program = Cond(
        [Txn.application_id() == Int(0), on_create],
        [Txn.on_completion() == OnComplete.NoOp, on_noop],
        [Txn.on_completion() == OnComplete.DeleteApplication, Seq(Assert(is_creator), Approve())],
        [Int(1), Reject()],
    )
    return program


def clear_state_program() -> Expr:
    return Approve()


if __name__ == "__main__":
    print(compileTeal(approval_program(), mode=Mode.Application, version=8))
