from .hex_utility import normalize_topic, to_quantity
from .logging_utility import enable_debug_logging, setup_logging
from .rpc_utility import ProofApiClient

__all__ = [
    "ProofApiClient",
    "enable_debug_logging",
    "normalize_topic",
    "setup_logging",
    "to_quantity",
]
