# job_counter: client, poller and workflows for the JobContract counter app.
from .client import JobContract, Provider
from .errors import (
    ConfirmationTimeout, DeployConflict, DeployTimeout, InvalidAmount, InvalidConfig,
    JobCounterError, NotDeployed, PollCancelled, TransportError,
)
from .poller import ConfirmationPoller, PollProgress, PollResult
from .state import ContractCode, CounterState, Sender, derive_address
from .workflows import (
    DEFAULT_VALUE, DeployResult, DeploymentWorkflow, IncrementResult, IncrementWorkflow,
    Stage, wait_for_deploy,
)
