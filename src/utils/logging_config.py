"""
Shared logging setup for handlers and services.
"""
import logging
import logging.config
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_configured = False


def configure_logging() -> None:
    """
    Configure root logging once per process.

    Uses the file referenced by LOGGING_CONFIG when set, otherwise falls back to
    basicConfig at LOG_LEVEL (default INFO).
    """
    global _configured
    if _configured:
        return

    log_conf = os.environ.get('LOGGING_CONFIG')
    if log_conf:
        logging.config.fileConfig(log_conf, disable_existing_loggers=False)
    else:
        logging.basicConfig(
            level=os.environ.get('LOG_LEVEL', 'INFO'),
            format=LOG_FORMAT
        )
    _configured = True
