from .logger import LogContext, get_logger, log_event, setup_logging
from .metrics import RunMetrics

__all__ = ["LogContext", "get_logger", "log_event", "setup_logging", "RunMetrics"]
