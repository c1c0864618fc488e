"""
Helpers for normalising values read from transaction receipts.

Receipts fetched through web3 carry ints and HexBytes, while raw JSON-RPC
receipts carry hex strings. Both shapes are accepted here.
"""

from typing import Any

from web3 import Web3

from ..exceptions import InvalidArgument


def to_quantity(value: Any, field: str) -> int:
    """
    Normalise a receipt quantity to a non-negative int.

    Args:
        value: int, hex string ("0x3039") or decimal string ("12345")
        field: Field name used in error messages

    Returns:
        The value as a Python int (arbitrary precision, never truncated)

    Raises:
        InvalidArgument: If the value is missing, negative or not numeric
    """
    match value:
        case bool():
            raise InvalidArgument(f"{field} must be an integer, got {value!r}")
        case int():
            quantity = value
        case str() if value.lower().startswith("0x"):
            try:
                quantity = int(value, 16)
            except ValueError:
                raise InvalidArgument(f"{field} is not a valid hex quantity: {value!r}") from None
        case str():
            try:
                quantity = int(value, 10)
            except ValueError:
                raise InvalidArgument(f"{field} is not a valid integer: {value!r}") from None
        case _:
            raise InvalidArgument(f"{field} must be an integer, got {type(value).__name__}")

    if quantity < 0:
        raise InvalidArgument(f"{field} must be non-negative, got {quantity}")
    return quantity


def normalize_topic(topic: Any) -> str:
    """Return a topic as lowercase 0x-prefixed hex, whether given as bytes or str."""
    if isinstance(topic, (bytes, bytearray)):
        return Web3.to_hex(bytes(topic)).lower()
    topic_str = str(topic).lower()
    return topic_str if topic_str.startswith("0x") else "0x" + topic_str
