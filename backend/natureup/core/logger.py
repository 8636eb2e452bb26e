import logging
import os
from logging.handlers import RotatingFileHandler
from natureup.core.config import settings

NO_TRACE = "-"


class TraceIdFilter(logging.Filter):
    """Gives every record a trace_id so the format string never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = NO_TRACE
        return True


class LoggerConfig:
    """
    Application logger: rotating file plus console, both tagged with the
    request trace id when one is known.
    """
    def __init__(
        self, env=20, logger_name="NatureUP", log_directory="logs", log_file="app.log",
        max_bytes=1024 * 1024 * 10, backup_count=5
    ):
        self.logger_name = logger_name
        self.log_directory = os.path.abspath(log_directory)
        self.log_file_path = os.path.join(self.log_directory, log_file)
        self.env = env
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] %(message)s"

        self.logger = logging.getLogger(self.logger_name)
        self.logger.propagate = False
        try:
            self.setup_logger()
        except OSError as e:
            # Read-only filesystems still get console output
            print(f"Failed to setup file logging: {str(e)}")
            self._attach(logging.StreamHandler())

    def _attach(self, handler: logging.Handler):
        handler.setLevel(self.env)
        handler.setFormatter(logging.Formatter(self.log_format))
        handler.addFilter(TraceIdFilter())
        self.logger.addHandler(handler)

    def setup_logger(self):
        self.logger.setLevel(self.env)
        if self.logger.handlers:
            return

        os.makedirs(self.log_directory, exist_ok=True)
        self._attach(RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
        ))
        self._attach(logging.StreamHandler())

    def log(self, level: int, message: str, extra: dict = None):
        """
        Log a message. A "trace_id" key in `extra` goes into the record's
        trace column; any other keys are appended to the message.
        """
        extra = dict(extra or {})
        trace_id = extra.pop("trace_id", NO_TRACE)
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message, extra={"trace_id": trace_id})

    def trace(self, level: int, trace_id: str, message: str):
        self.log(level, message, extra={"trace_id": trace_id})


logs = LoggerConfig(
    env=settings.LOGGER,
    logger_name="NATUREUP-BE",
    log_directory=settings.LOG_DIRECTORY,
    log_file="app.log"
)
