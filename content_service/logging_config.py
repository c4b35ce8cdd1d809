"""
Logging setup for the content service.

Request threads and the recommendation query workers log through a queue
that a single listener drains to stdout. Load balancer health probes hit
``/health`` every few seconds, so their access lines are dropped unless
debug logging is on.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

# Driver and runtime loggers kept at WARNING outside debug mode.
QUIET_LOGGERS = (
    "pymongo",
    "pymongo.command",
    "pymongo.connection",
    "pymongo.serverSelection",
    "pymongo.topology",
    "urllib3",
    "asyncio",
)

HEALTH_CHECK_PATH = "/health"


class HealthCheckAccessFilter(logging.Filter):
    """Drop werkzeug access lines for health probes."""

    def __init__(self, path: str = HEALTH_CHECK_PATH):
        super().__init__()
        self._marker = f'"GET {path} '

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "werkzeug" or record.levelno >= logging.WARNING:
            return True
        return self._marker not in record.getMessage()


class ThreadSafeLoggingConfig:
    """Queue-based logging shared by request and worker threads."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    @property
    def is_running(self) -> bool:
        return self._log_listener is not None

    def setup_logging(self, debug: bool = False) -> None:
        """
        Route every log record through a queue to one stdout handler.

        Calling it again restarts the listener with the new level.

        Args:
            debug: Log at DEBUG and keep library and health probe lines
        """
        if self.is_running:
            self.stop()

        self._log_queue = Queue()
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        if not debug:
            console_handler.addFilter(HealthCheckAccessFilter())

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(logging.handlers.QueueHandler(self._log_queue))
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    def stop(self) -> None:
        """Flush pending records and stop the listener."""
        if self._log_listener:
            self._log_listener.stop()
        self._log_listener = None
        self._log_queue = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False) -> None:
    """Configure process-wide logging; see ThreadSafeLoggingConfig.setup_logging."""
    logging_config.setup_logging(debug)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()
