# scripts/deploy_job_contract.py
# Deploy a JobContract with a random id to LocalNet.  Run contracts/build.py first.
import os, sys

from job_counter import DeploymentWorkflow, JobCounterError
from job_counter.localnet import AlgodProvider, get_algod, kmd_sender, load_code

NETWORK = os.getenv("JOB_NETWORK", "localnet")

def main():
    algod = get_algod()
    try:
        sender = kmd_sender()
        code = load_code(algod)
        workflow = DeploymentWorkflow(AlgodProvider(algod, sender.address), sender, code, network=NETWORK)
        result = workflow.run()
    except JobCounterError as e:
        print(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)

    print("Deployed at", result.address)
    print("ID", result.id)

if __name__ == "__main__":
    main()
