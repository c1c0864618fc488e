"""
Proof orchestration for polymer-proof.

This module submits proof requests for receipt logs to the Polymer proof API
and waits for the resulting jobs to reach a terminal state.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from web3 import Web3

from . import __version__
from .config import ProofConfig
from .exceptions import (
    EmptyHandle,
    InvalidArgument,
    MissingChainContext,
    PollCancelled,
    ProofGenerationFailed,
    ProofGenerationTimedOut,
)
from .log_resolver import resolve_log_index
from .models import JobState, JobStatus, PollPolicy, ProofCoordinates, ProofJob
from .utils.logging_utility import enable_debug_logging
from .utils.rpc_utility import ProofApiClient

logger = logging.getLogger(__name__)


class ProofOrchestrator:
    """
    Requests Polymer proofs for event logs and waits for them to be generated.

    Holds no per-job state: every job is identified only by the handle the
    proof API returns, so many jobs may be submitted and polled concurrently.
    """

    def __init__(
        self,
        config: ProofConfig,
        w3: Web3 | None = None,
        api_client: ProofApiClient | None = None,
    ) -> None:
        """
        Initialize the ProofOrchestrator.

        Args:
            config: Proof API configuration
            w3: Web3 instance for the source chain (supplies chain id and receipts)
            api_client: Proof API client (built from config when omitted)
        """
        self.config = config
        self.w3 = w3
        self.api_client = api_client or ProofApiClient(
            api_url=config.api_url,
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

        if config.debug:
            enable_debug_logging()

        logger.debug(f"Initialized ProofOrchestrator with config: {config!r}")

    @classmethod
    def from_env(cls, w3: Web3 | None = None) -> "ProofOrchestrator":
        """
        Create a ProofOrchestrator from environment variables.

        Raises:
            ConfigurationError: If POLYMER_API_KEY is missing or a value is invalid
        """
        config = ProofConfig.from_env()
        config.log_config()
        return cls(config, w3=w3)

    def info(self) -> dict[str, str]:
        """Version of this package and the proof API it talks to."""
        return {"version": __version__, "api_url": self.config.api_url}

    async def submit(self, coordinates: ProofCoordinates) -> str:
        """
        Request a proof for one event log.

        Performs exactly one round trip; retrying a failed submission is left
        to the caller.

        Returns:
            Job ID issued by the proof API

        Raises:
            ProofRequestFailed: On HTTP/transport failure or a service error
        """
        logger.debug(f"Submitting proof request for {coordinates}")
        job_id = await self.api_client.request_proof(coordinates)
        logger.debug(f"Proof job created with ID: {job_id}")
        return job_id

    async def request_proof(
        self,
        src_chain_id: int,
        src_block_number: int | str,
        tx_index: int | str,
        log_index: int,
    ) -> str:
        """Build coordinates from raw values and submit them."""
        coordinates = ProofCoordinates(
            src_chain_id=src_chain_id,
            src_block_number=src_block_number,
            tx_index=tx_index,
            log_index=log_index,
        )
        return await self.submit(coordinates)

    async def query_status(self, job_id: str) -> JobStatus:
        """
        Fetch the current status of a proof job. Never cached.

        Raises:
            EmptyHandle: If job_id is empty
            ProofQueryFailed: On HTTP/transport failure or a service error
        """
        if not job_id or not str(job_id).strip():
            raise EmptyHandle()

        result = await self.api_client.query_proof(job_id)
        return JobStatus.from_rpc(result)

    async def poll(
        self,
        job_id: str,
        policy: PollPolicy | None = None,
        *,
        max_attempts: int | None = None,
        interval: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> JobStatus:
        """
        Poll a proof job until it completes, fails or runs out of attempts.

        The delay between attempts is constant and only applied between two
        queries, never before the first or after the last one.

        Args:
            job_id: Job ID returned by submit
            policy: Poll policy; built from overrides and config when omitted
            max_attempts: Override for the configured max attempts
            interval: Override for the configured interval (milliseconds)
            cancel_event: Setting this event aborts the loop at its next check

        Returns:
            The ``complete`` job status

        Raises:
            EmptyHandle: If job_id is empty
            InvalidArgument: If policy is combined with max_attempts or interval
            ProofGenerationFailed: If the job reaches the ``error`` state
            ProofGenerationTimedOut: If max_attempts queries return no terminal state
            PollCancelled: If cancel_event is set while polling
        """
        if not job_id or not str(job_id).strip():
            raise EmptyHandle()

        if policy is not None and (max_attempts is not None or interval is not None):
            raise InvalidArgument("Pass either a PollPolicy or max_attempts/interval overrides, not both")
        policy = policy or self.config.poll_policy(max_attempts, interval)
        logger.debug(
            f"Polling for proof completion (max {policy.max_attempts} attempts, "
            f"interval {policy.interval_ms}ms)"
        )

        for attempt in range(1, policy.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelled(job_id, attempt - 1)

            logger.debug(f"Polling attempt {attempt}/{policy.max_attempts}")
            status = await self.query_status(job_id)

            match status.state:
                case JobState.COMPLETE:
                    logger.debug("Proof generation complete!")
                    return status
                case JobState.ERROR:
                    logger.error(f"Proof job {job_id} failed: {status.failure_reason}")
                    raise ProofGenerationFailed(job_id, status.failure_reason)

            if attempt < policy.max_attempts:
                logger.debug(f"Job {job_id} is {status.state.value}, waiting {policy.interval_ms}ms before next attempt...")
                await self._wait(policy.interval_seconds, cancel_event, job_id, attempt)

        raise ProofGenerationTimedOut(job_id, policy.max_attempts)

    async def wait(
        self,
        job_id: str,
        max_attempts: int | None = None,
        interval: int | None = None,
    ) -> JobStatus:
        """Poll a job using config defaults for any omitted setting."""
        return await self.poll(job_id, max_attempts=max_attempts, interval=interval)

    async def _wait(
        self,
        seconds: float,
        cancel_event: asyncio.Event | None,
        job_id: str,
        attempt: int,
    ) -> None:
        """Suspend between attempts, waking early only to cancel."""
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise PollCancelled(job_id, attempt)

    def _resolve_chain_id(self, chain_id: int | None) -> int:
        if chain_id is not None:
            return chain_id

        if self.w3 is None:
            raise MissingChainContext("Chain ID not found: no chain_id given and no Web3 client configured")

        try:
            resolved = self.w3.eth.chain_id
        except Exception as e:
            raise MissingChainContext(f"Chain ID not found in client: {e}") from e

        if not resolved:
            raise MissingChainContext("Chain ID not found in client")
        return int(resolved)

    async def prove_receipt(
        self,
        receipt: Mapping[str, Any],
        *,
        event_signature: str | None = None,
        log_index: int | None = None,
        chain_id: int | None = None,
        max_attempts: int | None = None,
        interval: int | None = None,
        return_job: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> JobStatus | ProofJob:
        """
        Request a proof for a log in a transaction receipt.

        Args:
            receipt: Transaction receipt containing the log
            event_signature: Event signature used to locate the log
            log_index: Explicit transaction-local log index (wins over event_signature)
            chain_id: Source chain ID; read from the Web3 client when omitted
            max_attempts: Override for the configured max attempts
            interval: Override for the configured interval (milliseconds)
            return_job: Return the job handle immediately instead of polling
            cancel_event: Setting this event aborts polling

        Returns:
            ProofJob when return_job is set, otherwise the ``complete`` JobStatus

        Raises:
            InvalidArgument: If the receipt or the log selector is missing/invalid
            EventNotFound: If event_signature matches no log
            MissingChainContext: If no chain ID is available
            ProofRequestFailed: If the proof request fails
            ProofGenerationFailed, ProofGenerationTimedOut, PollCancelled: While polling
        """
        if not receipt:
            raise InvalidArgument("Transaction receipt is required")

        # Validate overrides before anything touches the network
        policy = None if return_job else self.config.poll_policy(max_attempts, interval)

        resolved_index = resolve_log_index(receipt, event_signature=event_signature, log_index=log_index)
        coordinates = ProofCoordinates.from_receipt(
            receipt,
            chain_id=self._resolve_chain_id(chain_id),
            log_index=resolved_index,
        )

        logger.debug(f"Transaction receipt details: {coordinates}, transactionHash={_tx_hash(receipt)}")

        job_id = await self.submit(coordinates)

        if return_job:
            return ProofJob(job_id=job_id, receipt=receipt)

        return await self.poll(job_id, policy, cancel_event=cancel_event)

    async def prove_transaction(self, tx_hash: str, **options: Any) -> JobStatus | ProofJob:
        """
        Fetch a transaction receipt from the source chain and prove one of its logs.

        Accepts the same keyword options as prove_receipt.

        Raises:
            MissingChainContext: If no Web3 client is configured
        """
        if self.w3 is None:
            raise MissingChainContext("A Web3 client is required to fetch transaction receipts")

        receipt = self.w3.eth.get_transaction_receipt(Web3.to_hex(hexstr=tx_hash))
        logger.debug(f"Fetched receipt for {tx_hash} in block {receipt['blockNumber']}")
        return await self.prove_receipt(receipt, **options)


def _tx_hash(receipt: Mapping[str, Any]) -> str | None:
    tx_hash = receipt.get("transactionHash")
    if isinstance(tx_hash, (bytes, bytearray)):
        return Web3.to_hex(bytes(tx_hash))
    return tx_hash
