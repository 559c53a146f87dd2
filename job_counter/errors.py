# job_counter/errors.py
# Failure kinds raised by the client, the poller and the workflows.


class JobCounterError(Exception):
    """Base class for every job counter failure."""


class InvalidConfig(JobCounterError):
    pass


class InvalidAmount(JobCounterError):
    def __init__(self, increase_by):
        self.increase_by = increase_by
        super().__init__(f"increase_by must be a positive integer, got {increase_by!r}")


class NotDeployed(JobCounterError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Contract at address {address} is not deployed")


class DeployConflict(JobCounterError):
    def __init__(self, address: str, existing_id: int, requested_id: int):
        self.address = address
        self.existing_id = existing_id
        self.requested_id = requested_id
        super().__init__(
            f"{address} already holds id={existing_id}, refusing to deploy id={requested_id}"
        )


class DeployTimeout(JobCounterError):
    def __init__(self, address: str, attempts: int):
        self.address = address
        self.attempts = attempts
        super().__init__(f"{address} not visible on chain after {attempts} attempts")


class ConfirmationTimeout(JobCounterError):
    def __init__(self, last_value, attempts: int):
        self.last_value = last_value
        self.attempts = attempts
        super().__init__(f"value still {last_value!r} after {attempts} attempts")


class PollCancelled(JobCounterError):
    def __init__(self, last_value, attempts: int):
        self.last_value = last_value
        self.attempts = attempts
        super().__init__(f"polling cancelled after {attempts} attempts (last value {last_value!r})")


class TransportError(JobCounterError):
    """algod/kmd/network failure. Propagated as is, never retried here."""
