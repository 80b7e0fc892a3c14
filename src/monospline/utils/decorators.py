import functools
import logging
import time

__all__ = [
    "log_runtime",
]

def log_runtime(label: str = None, level: int = logging.INFO):
    """Decorator to log the runtime of a function or method.

    The record goes to the logger of the module that defines the decorated function.
    """
    def decorator(func):
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            duration = time.perf_counter() - start
            logger.log(level, f"{label or func.__qualname__} completed in {duration:.3f} seconds")
            return result
        return wrapper
    return decorator
