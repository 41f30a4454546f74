"""Retry helpers for optimistic-concurrency conflicts."""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger_engine.exceptions import StaleVersionError

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3

T = TypeVar("T")


def _log_conflict(retry_state: RetryCallState) -> None:
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.info(
        "Concurrent modification (%s), retrying attempt %s",
        exception,
        retry_state.attempt_number + 1,
    )


def retry_on_conflict(
    func: Callable[..., T] | None = None,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    max_wait: float = 0.5,
) -> Any:
    """Re-run an operation that failed with ``StaleVersionError``.

    Only wrap operations that re-read their aggregate by id on every call
    (``post(entry_id)``, ``cancel(invoice_id)``...); retrying a call that
    carries a stale object would fail again.

    Usage:
        post = retry_on_conflict(ledger.journal.post)
        entry = post(entry_id)

        @retry_on_conflict(attempts=5)
        def settle(invoice_id: int) -> Invoice:
            return ledger.invoices.mark_as_paid(invoice_id)
    """

    def decorate(f: Callable[..., T]) -> Callable[..., T]:
        @wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            retrying = Retrying(
                retry=retry_if_exception_type(StaleVersionError),
                wait=wait_exponential(multiplier=0.01, max=max_wait),
                stop=stop_after_attempt(attempts),
                before_sleep=_log_conflict,
                reraise=True,
            )
            return retrying(f, *args, **kwargs)

        return wrapper

    if func is not None:
        return decorate(func)
    return decorate
