from .error_handler import log_exceptions, convert_exceptions, to_operation_error
from .execution_timer import ExecutionTimer, format_elapsed
from .logging_config import LoggerManager, log_manager

__all__ = [
    "log_exceptions",
    "convert_exceptions",
    "to_operation_error",
    "ExecutionTimer",
    "format_elapsed",
    "LoggerManager",
    "log_manager",
]
