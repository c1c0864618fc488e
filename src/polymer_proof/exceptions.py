"""
Exception hierarchy for polymer-proof.

Exception Categories:
- Caller errors: bad input that will never succeed (InvalidArgument, EmptyHandle,
  EventNotFound, MissingChainContext, ConfigurationError)
- RPC errors: transport or service-reported failures talking to the proof API
  (ProofRequestFailed, ProofQueryFailed)
- Job outcomes: the proof job itself failed, timed out, or polling was cancelled
"""

from typing import Any


class PolymerProofError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(PolymerProofError, ValueError):
    """
    Exception for configuration/startup errors.

    Use when:
    - The API key is missing
    - A configured value is out of range or malformed
    """

    pass


class InvalidArgument(PolymerProofError, ValueError):
    """Bad caller input such as a missing selector or a negative index."""

    pass


class EventNotFound(PolymerProofError):
    """The requested event signature is not present in the receipt logs."""

    def __init__(self, event_signature: str, topic: str):
        super().__init__(
            f"Event {event_signature} not found in transaction receipt"
        )
        self.event_signature = event_signature
        self.topic = topic


class MissingChainContext(PolymerProofError):
    """No chain id (or no blockchain client) is available."""

    pass


class EmptyHandle(PolymerProofError, ValueError):
    """A blank job id was passed where a job handle is required."""

    def __init__(self, message: str = "Job ID is required"):
        super().__init__(message)


class ProofRpcError(PolymerProofError):
    """
    Base class for failures talking to the proof API.

    Attributes:
        method: JSON-RPC method that failed
        status_code: HTTP status code, when the failure was a non-2xx response
        rpc_error: The JSON-RPC ``error`` member, when the service reported one
    """

    def __init__(
        self,
        message: str,
        method: str,
        status_code: int | None = None,
        rpc_error: Any = None,
    ):
        super().__init__(message)
        self.method = method
        self.status_code = status_code
        self.rpc_error = rpc_error


class ProofRequestFailed(ProofRpcError):
    """Submitting a proof request (log_requestProof) failed."""

    pass


class ProofQueryFailed(ProofRpcError):
    """Querying a proof job (log_queryProof) failed."""

    pass


class ProofGenerationFailed(PolymerProofError):
    """The service reported the job in its terminal ``error`` state."""

    def __init__(self, job_id: str, failure_reason: str | None):
        super().__init__(
            f"Proof generation failed: {failure_reason or 'Unknown error'}"
        )
        self.job_id = job_id
        self.failure_reason = failure_reason


class ProofGenerationTimedOut(PolymerProofError):
    """All poll attempts were used without reaching a terminal state."""

    def __init__(self, job_id: str, max_attempts: int):
        super().__init__(
            f"Proof generation timed out after {max_attempts} attempts"
        )
        self.job_id = job_id
        self.max_attempts = max_attempts


class PollCancelled(PolymerProofError):
    """Polling was aborted through its cancellation event."""

    def __init__(self, job_id: str, attempts: int):
        super().__init__(
            f"Polling for job {job_id} cancelled after {attempts} attempts"
        )
        self.job_id = job_id
        self.attempts = attempts
