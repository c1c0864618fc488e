import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
PACKAGE_LOGGER = "polymer_proof"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)


def enable_debug_logging() -> None:
    """Lower the package logger to DEBUG so request/poll details are emitted.

    The level is set on the shared "polymer_proof" logger for the whole
    process and stays in place until changed again.
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)
