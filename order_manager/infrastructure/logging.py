"""
Logging infrastructure.

Provides logger setup and the execution-logging decorator used by the
application services.
"""
import functools
import logging
import time
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def log_execution(logger: Optional[logging.Logger] = None):
    """
    Log entry, exit and failure of an async method, with timing.

    Output looks like:
        OrderApplicationService :: get_order :: Entry
        OrderApplicationService :: get_order :: Arguments :: args=(1,) kwargs={}   (DEBUG only)
        OrderApplicationService :: get_order :: Exit :: executionTime=3ms
        OrderApplicationService :: get_order :: Exception :: executionTime=2ms :: error=...

    Exceptions are logged and re-raised unchanged.
    """

    def decorator(func):
        log = logger or logging.getLogger(func.__module__)
        owner = func.__qualname__.split(".")[0]

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            log.info(f"{owner} :: {func.__name__} :: Entry")
            # args[0] is self; arguments may hold customer data, so DEBUG only
            log.debug(f"{owner} :: {func.__name__} :: Arguments :: args={args[1:]} kwargs={kwargs}")
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = (time.perf_counter() - start_time) * 1000
                log.error(
                    f"{owner} :: {func.__name__} :: Exception :: "
                    f"executionTime={elapsed:.0f}ms :: error={e}"
                )
                raise
            elapsed = (time.perf_counter() - start_time) * 1000
            log.info(f"{owner} :: {func.__name__} :: Exit :: executionTime={elapsed:.0f}ms")
            return result

        return wrapper

    return decorator
