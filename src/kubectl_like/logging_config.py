import logging
import sys


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def verbosity_to_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int = logging.WARNING):
    """Configure diagnostic logging.

    Diagnostics go to stderr so they never mix with the filtered log lines
    written to stdout.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Clear existing handlers and add our configured handler
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # The docker SDK and urllib3 are chatty at DEBUG
    for name in ('urllib3', 'docker'):
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    return root_logger
