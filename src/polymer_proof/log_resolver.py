"""
Log resolution for polymer-proof.

Finds the transaction-local index of the log to prove, either from an explicit
index or by matching an event signature against each log's first topic.
"""

import logging
from collections.abc import Mapping
from typing import Any

from web3 import Web3

from .exceptions import EventNotFound, InvalidArgument
from .utils.hex_utility import normalize_topic

logger = logging.getLogger(__name__)


def event_topic(event_signature: str) -> str:
    """
    Compute the topic hash of an event signature.

    Args:
        event_signature: Canonical signature, e.g. "Transfer(address,address,uint256)"

    Returns:
        0x-prefixed lowercase keccak256 hash of the signature
    """
    return normalize_topic(Web3.keccak(text=event_signature))


def resolve_log_index(
    receipt: Mapping[str, Any],
    event_signature: str | None = None,
    log_index: int | None = None,
) -> int:
    """
    Determine the transaction-local log index to prove.

    An explicit ``log_index`` wins over ``event_signature``. When matching by
    signature the first log whose topics[0] equals the signature hash is used.

    Args:
        receipt: Transaction receipt with an ordered ``logs`` list
        event_signature: Event signature to look for
        log_index: Explicit transaction-local log index

    Returns:
        Transaction-local index (position within transaction's logs)

    Raises:
        InvalidArgument: If neither selector is given or log_index is invalid
        EventNotFound: If no log matches the event signature
    """
    if log_index is not None:
        if isinstance(log_index, bool) or not isinstance(log_index, int):
            raise InvalidArgument(f"logIndex must be an integer, got {log_index!r}")
        if log_index < 0:
            raise InvalidArgument("logIndex must be non-negative")
        return log_index

    if not event_signature:
        raise InvalidArgument("eventSignature or logIndex is required")

    topic = event_topic(event_signature)

    for i, log in enumerate(receipt.get("logs") or []):
        topics = log.get("topics") or []
        if topics and normalize_topic(topics[0]) == topic:
            logger.debug(f"Found {event_signature} at transaction-local index {i}")
            return i

    raise EventNotFound(event_signature, topic)
