import functools
import inspect
import logging
from typing import Callable

from app.core.exceptions import ProgressError
from app.schemas.progress import ProgressResult

logger = logging.getLogger(__name__)


def _failure(func_name: str, exc: ProgressError) -> ProgressResult:
    logger.warning(f"{func_name} rejected: {exc.code} - {exc.message}")
    return ProgressResult(
        success=False,
        message=exc.message,
        error=exc.code,
        status_code=exc.status_code,
    )


def progress_operation(func: Callable) -> Callable:
    """Turn ``ProgressError`` raised by ``func`` into a failed ``ProgressResult``.

    Anything else (database or storage failures) propagates to the caller.
    """
    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ProgressError as exc:
            return _failure(func.__name__, exc)

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ProgressError as exc:
            return _failure(func.__name__, exc)

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
