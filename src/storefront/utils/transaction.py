"""
Transaction management helpers.

Domain services wrap every multi-step mutation in transaction_scope so a
failure at any step leaves no partial effect behind.
"""

import functools
import time
from contextlib import contextmanager
from typing import Callable

from sqlalchemy.exc import OperationalError, DBAPIError
from sqlalchemy.orm import Session

from storefront.utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def transaction_scope(db: Session, auto_commit: bool = True):
    """
    Commit on success, roll back and re-raise on any error.

    Usage:
        with transaction_scope(db):
            db.add(order)

    Does NOT close the session; the request dependency owns its lifetime.
    """
    try:
        yield db
        if auto_commit:
            db.commit()
            logger.debug("Transaction committed successfully")
    except Exception as e:
        db.rollback()
        logger.warning(f"Transaction rolled back: {e}")
        raise


def retry_on_deadlock(max_retries: int = 3, initial_backoff: float = 0.1):
    """
    Retry a service method when the database reports a deadlock.

    Backoff is initial_backoff * 2 ** attempt. Other database errors are
    re-raised immediately. The wrapped callable must be safe to re-run,
    which holds for methods whose whole body runs in transaction_scope.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, DBAPIError) as e:
                    if "deadlock" not in str(e).lower() or attempt == max_retries - 1:
                        raise
                    backoff_time = initial_backoff * (2 ** attempt)
                    logger.warning(
                        f"Deadlock detected in {func.__name__}, "
                        f"retrying in {backoff_time:.2f}s (attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(backoff_time)

        return wrapper
    return decorator
