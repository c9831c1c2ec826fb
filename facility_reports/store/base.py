import functools
import logging

from ..errors import ReportsError, StoreError

logger = logging.getLogger(__name__)


def store_operation(func):
    """
    Surface backend failures as StoreError.

    Engine errors (NotFoundError and friends) pass through untouched;
    anything else raised by the backend is logged with its traceback and
    re-raised as a generic StoreError. Nothing is retried.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ReportsError:
            raise
        except Exception as exc:
            logger.exception("Store call %s failed", func.__qualname__)
            raise StoreError() from exc

    return wrapper
