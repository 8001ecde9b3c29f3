import functools
import inspect
from typing import TypeVar, Callable, Optional, Type, Dict
from loguru import logger
from ..exceptions import TierMigratorException, OperationException

T = TypeVar('T')


def log_exceptions(
    log_level: str = "ERROR",
    include_traceback: bool = True,
    custom_message: Optional[str] = None
):
    """
    Decorator to log exceptions before re-raising them.

    Args:
        log_level: Log level for exception logging
        include_traceback: Whether to include traceback in log
        custom_message: Custom message to include in log
    """
    def _log(func, e):
        message = custom_message or f"Exception in {func.__name__}"
        if include_traceback:
            logger.opt(exception=True).log(log_level, f"{message}: {e}")
        else:
            logger.log(log_level, f"{message}: {e}")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                _log(func, e)
                raise

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log(func, e)
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


def convert_exceptions(exception_map: Dict[Type[Exception], Type[TierMigratorException]]):
    """
    Decorator to convert third-party exceptions to tier migrator exceptions.

    Exceptions that already belong to the tier migrator hierarchy pass through
    untouched. Works on plain functions, coroutines and async generators.

    Args:
        exception_map: Dictionary mapping exception types to tier migrator exception types
    """
    def _convert(e: Exception):
        if isinstance(e, TierMigratorException):
            return e
        for source_exc, target_exc in exception_map.items():
            if isinstance(e, source_exc):
                return target_exc(str(e), details={"original_exception": type(e).__name__})
        return e

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_gen_wrapper(*args, **kwargs):
            try:
                async for item in func(*args, **kwargs):
                    yield item
            except Exception as e:
                converted = _convert(e)
                if converted is e:
                    raise
                raise converted from e

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                converted = _convert(e)
                if converted is e:
                    raise
                raise converted from e

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                converted = _convert(e)
                if converted is e:
                    raise
                raise converted from e

        if inspect.isasyncgenfunction(func):
            return async_gen_wrapper
        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def to_operation_error(e: Exception, context: str = "") -> TierMigratorException:
    """Wrap an arbitrary exception as an OperationException, keeping project exceptions as-is."""
    if isinstance(e, TierMigratorException):
        return e
    message = f"{context}: {e}" if context else str(e)
    converted = OperationException(
        message,
        error_code="OPERATION_ERROR",
        details={"original_exception": type(e).__name__, "message": str(e)}
    )
    converted.__cause__ = e
    return converted
