"""
polymer-proof package.

Requests Polymer proofs for blockchain event logs and waits for the proof
jobs to complete.
"""

__version__ = "0.1.0"

from .config import ProofConfig
from .exceptions import (
    ConfigurationError,
    EmptyHandle,
    EventNotFound,
    InvalidArgument,
    MissingChainContext,
    PollCancelled,
    PolymerProofError,
    ProofGenerationFailed,
    ProofGenerationTimedOut,
    ProofQueryFailed,
    ProofRequestFailed,
    ProofRpcError,
)
from .log_resolver import event_topic, resolve_log_index
from .models import JobState, JobStatus, PollPolicy, ProofCoordinates, ProofJob
from .orchestrator import ProofOrchestrator

__all__ = [
    "ConfigurationError",
    "EmptyHandle",
    "EventNotFound",
    "InvalidArgument",
    "JobState",
    "JobStatus",
    "MissingChainContext",
    "PollCancelled",
    "PollPolicy",
    "PolymerProofError",
    "ProofConfig",
    "ProofCoordinates",
    "ProofGenerationFailed",
    "ProofGenerationTimedOut",
    "ProofJob",
    "ProofOrchestrator",
    "ProofQueryFailed",
    "ProofRequestFailed",
    "ProofRpcError",
    "event_topic",
    "resolve_log_index",
]
