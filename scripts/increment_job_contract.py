# scripts/increment_job_contract.py
# Increase a deployed JobContract's counter by 1 and wait until the change is visible.
#   python scripts/increment_job_contract.py [ADDRESS]
import os, sys

from job_counter import (
    ConfirmationPoller, ConfirmationTimeout, IncrementWorkflow, JobCounterError, PollCancelled,
)
from job_counter.localnet import AlgodProvider, get_algod, kmd_sender

POLL_INTERVAL = float(os.getenv("JOB_POLL_INTERVAL", "2.0"))
_max = os.getenv("JOB_POLL_MAX_ATTEMPTS")
POLL_MAX_ATTEMPTS = int(_max) if _max else None  # unset: wait until it changes

def show_attempt(progress):
    # first unchanged read comes right after the increase was sent
    if progress.attempt == 1:
        print("Waiting for counter to increase...")
    print(f"Attempt {progress.attempt}")

def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    address = args[0] if args else input("JobContract address: ").strip()

    algod = get_algod()
    poller = ConfirmationPoller(interval=POLL_INTERVAL, max_attempts=POLL_MAX_ATTEMPTS, observer=show_attempt)
    try:
        sender = kmd_sender()
        workflow = IncrementWorkflow(AlgodProvider(algod, sender.address), sender, poller=poller)
        result = workflow.run(address)
    except (ConfirmationTimeout, PollCancelled) as e:
        print(f"Error: {type(e).__name__}: counter still {e.last_value} after {e.attempts} attempts")
        sys.exit(1)
    except JobCounterError as e:
        print(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)

    print(f"Counter increased successfully! ({result.counter_before} -> {result.counter_after})")

if __name__ == "__main__":
    main()
