"""Retry decorator for handling transient API errors."""

import time
import random
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import config
from .logger import get_logger

logger = get_logger()

# Define a generic type variable for the decorated function's return type
F = TypeVar('F', bound=Callable[..., Any])

def retry_on_exception(
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    jitter: float = 0.1,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[[F], F]:
    """Decorator to retry a function call upon specific exceptions with exponential backoff.

    Args:
        exceptions: A tuple of exception types to catch and retry on.
        max_attempts: Maximum number of attempts (including the initial one).
        initial_delay: Delay before the first retry in seconds.
        backoff_factor: Multiplier for the delay in subsequent retries.
        jitter: Factor for adding random jitter to delay (delay * jitter * random.uniform(-1, 1)).
        should_retry: Optional predicate; a caught exception it rejects is re-raised immediately.
        sleep: Function used to wait between attempts (defaults to time.sleep).

    Returns:
        A decorator function.
    """
    def decorator(func: F) -> F:
        name = getattr(func, "__qualname__", repr(func))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempts = 0
            delay = initial_delay
            while attempts < max_attempts:
                attempts += 1
                try:
                    if config.DEBUG and attempts > 1:
                        logger.debug(f"Retrying {name} (Attempt {attempts}/{max_attempts})...")
                    return func(*args, **kwargs)
                except exceptions as e:
                    if should_retry is not None and not should_retry(e):
                        raise
                    if attempts >= max_attempts:
                        logger.error(
                            f"Function {name} failed after {max_attempts} attempts due to {type(e).__name__}.",
                            exc_info=config.DEBUG
                        )
                        raise

                    actual_jitter = delay * jitter * random.uniform(-1, 1)
                    wait_time = max(0, delay + actual_jitter)

                    logger.warning(
                        f"Function {name} failed with {type(e).__name__} (Attempt {attempts}/{max_attempts}). "
                        f"Retrying in {wait_time:.2f} seconds...",
                        exc_info=config.DEBUG
                    )
                    (sleep or time.sleep)(wait_time)
                    delay *= backoff_factor
            raise RuntimeError(f"Function {name} failed unexpectedly after exhausting retries.")

        return wrapper # type: ignore
    return decorator
