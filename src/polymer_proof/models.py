#!/usr/bin/env python3
"""Data models for polymer-proof.

This module provides immutable data classes for the proof coordinates sent to
the proof API, the job status values it returns, and the polling policy that
drives the wait loop.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import InvalidArgument, ProofQueryFailed
from .utils.hex_utility import to_quantity


@dataclass(frozen=True, slots=True)
class ProofCoordinates:
    """Identifies exactly one event occurrence on one chain.

    Attributes:
        src_chain_id: Chain ID of the source chain
        src_block_number: Block containing the transaction
        tx_index: Position of the transaction within the block
        log_index: Position of the log within the transaction's logs
    """

    src_chain_id: int
    src_block_number: int
    tx_index: int
    log_index: int

    def __post_init__(self) -> None:
        """Validate and normalise every coordinate to a non-negative int."""
        for name in ("src_chain_id", "src_block_number", "tx_index", "log_index"):
            # Use object.__setattr__ since dataclass is frozen
            object.__setattr__(self, name, to_quantity(getattr(self, name), name))

    @classmethod
    def from_receipt(cls, receipt: Mapping[str, Any], chain_id: int, log_index: int) -> "ProofCoordinates":
        """Build coordinates from a transaction receipt.

        Args:
            receipt: Receipt with ``blockNumber`` and ``transactionIndex``
            chain_id: Chain the receipt was fetched from
            log_index: Transaction-local log index to prove

        Raises:
            InvalidArgument: If the receipt lacks block or transaction index
        """
        try:
            block_number = receipt["blockNumber"]
            tx_index = receipt["transactionIndex"]
        except KeyError as e:
            raise InvalidArgument(f"Transaction receipt is missing {e.args[0]}") from None

        return cls(
            src_chain_id=chain_id,
            src_block_number=block_number,
            tx_index=tx_index,
            log_index=log_index,
        )

    def to_params(self) -> list[int]:
        """Ordered parameter array for ``log_requestProof``."""
        return [self.src_chain_id, self.src_block_number, self.tx_index, self.log_index]

    def __str__(self) -> str:
        return (
            f"ProofCoordinates(chain={self.src_chain_id}, "
            f"block={self.src_block_number}, "
            f"tx={self.tx_index}, "
            f"log={self.log_index})"
        )


class JobState(str, Enum):
    """States a proof job moves through on the proof API."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETE, JobState.ERROR)


@dataclass(frozen=True, slots=True)
class JobStatus:
    """Status of a proof job as reported by ``log_queryProof``.

    The typed core covers the fields the wait loop depends on. Any other
    field returned by the service is kept verbatim in ``extra``.

    Attributes:
        state: Current job state
        proof: Proof payload, present when the job is complete
        failure_reason: Failure description, present when the job errored
        extra: Read-only mapping of additional fields from the service
    """

    state: JobState
    proof: str | None = None
    failure_reason: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_rpc(cls, result: Mapping[str, Any]) -> "JobStatus":
        """Parse the ``result`` object of a ``log_queryProof`` response.

        Raises:
            ProofQueryFailed: If the status field is missing or unknown, or a
                complete status carries no proof
        """
        raw = dict(result)
        status = raw.pop("status", None)
        try:
            state = JobState(status)
        except ValueError:
            raise ProofQueryFailed(
                f"Unknown proof job status: {status!r}",
                method="log_queryProof",
            ) from None

        proof = raw.pop("proof", None)
        if state is JobState.COMPLETE and not proof:
            raise ProofQueryFailed(
                "Proof job reported complete without a proof",
                method="log_queryProof",
            )

        return cls(
            state=state,
            proof=proof,
            failure_reason=raw.pop("failureReason", None),
            extra=raw,
        )

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the wire shape returned by the service."""
        data: dict[str, Any] = {"status": self.state.value}
        if self.proof is not None:
            data["proof"] = self.proof
        if self.failure_reason is not None:
            data["failureReason"] = self.failure_reason
        data.update(self.extra)
        return data


@dataclass(frozen=True, slots=True)
class PollPolicy:
    """Governs the wait loop.

    Attributes:
        max_attempts: Number of status queries before giving up (>= 1)
        interval_ms: Delay between consecutive queries in milliseconds (>= 0)
    """

    max_attempts: int
    interval_ms: int

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise InvalidArgument(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise InvalidArgument(f"max_attempts must be at least 1, got {self.max_attempts}")
        if isinstance(self.interval_ms, bool) or not isinstance(self.interval_ms, (int, float)):
            raise InvalidArgument(f"interval must be a number of milliseconds, got {self.interval_ms!r}")
        if self.interval_ms < 0:
            raise InvalidArgument(f"interval must be non-negative, got {self.interval_ms}")

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000


@dataclass(frozen=True, slots=True)
class ProofJob:
    """A submitted job returned without waiting for the proof.

    Attributes:
        job_id: Job handle issued by the proof API
        receipt: The receipt the job was requested for
    """

    job_id: str
    receipt: Mapping[str, Any] | None = None
