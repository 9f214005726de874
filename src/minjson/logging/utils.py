import logging
import os
import sys
import threading
from typing import Any, Union, Optional

import psutil
import structlog
from structlog.processors import CallsiteParameter
from structlog.typing import FilteringBoundLogger

_AnyLogger = FilteringBoundLogger | structlog.stdlib.AsyncBoundLogger | Any


# noinspection PyPep8Naming
def getLogger(*args: Any, **initial_values: Any) -> _AnyLogger:
    return structlog.get_logger(*args, **initial_values)


# noinspection PyUnusedLocal
def uppercase_log_level(logger, log_method, event_dict):
    # Replace the level with its uppercase version
    event_dict["level"] = log_method.upper()
    return event_dict


def _resolve_exc_info(exc_info: Any) -> Optional[BaseException]:
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1]
    if exc_info:
        return sys.exc_info()[1]
    return None


# noinspection PyUnusedLocal
def exception_json(logger, log_method, event_dict):
    """
    structlog processor that replaces ``exc_info`` with an ``exception`` field holding the
    compact JSON record of the exception, tagged with the current thread.
    """
    from minjson.core.exception_serializer import ExceptionSerializer

    exc = _resolve_exc_info(event_dict.pop("exc_info", None))
    if exc is not None:
        event_dict["exception"] = ExceptionSerializer.to_json(exc, threading.current_thread())
    return event_dict


class PythonLoggingInterceptHandler(logging.Handler):
    """
    A logging handler that intercepts standard logging records and re-emits them via structlog.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Retrieve the corresponding structlog logging using the record’s name.
        logger = structlog.get_logger(record.name)

        # Re-emit the logging record’s message along with any extra context.
        level = record.levelno
        ctx = dict(record.__dict__)
        msg = record.getMessage()
        logger.log(level, msg, **ctx)


def min_log_level_from_env(min_level):
    env_level = os.environ.get("LOG_LEVEL", "")
    match env_level.upper():
        case "CRITICAL":
            min_level = logging.CRITICAL
        case "FATAL":
            min_level = logging.CRITICAL
        case "ERROR":
            min_level = logging.ERROR
        case "WARNING":
            min_level = logging.WARNING
        case "WARN":
            min_level = logging.WARNING
        case "INFO":
            min_level = logging.INFO
        case "DEBUG":
            min_level = logging.DEBUG
        case _:
            min_level = logging.NOTSET
    return min_level


def _is_interactive() -> bool:
    # Check if stderr is a TTY (terminal)
    if sys.stderr.isatty():
        return True

    # Check if the debugger is running
    if "pydevd" in sys.modules:
        return True

    # Check if this is running in a jupyter notebook
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file and main_file.endswith(".ipynb"):
        return True

    # Check if this is running in PyCharm
    if os.environ.get("PYCHARM_HOSTED", "") == "1":
        return True

    # Check if an IntelliJ-based IDE started us
    try:
        for parent in psutil.Process().parents():
            if "idea" in parent.name().lower():
                return True
    except psutil.Error:
        return False
    return False


def configure(min_level: Union[str, int, None] = logging.NOTSET, pretty: Optional[bool] = None, compact_exceptions: bool = True):
    """
    Configure structlog and route stdlib logging through it.

    - ``min_level=None`` reads ``LOG_LEVEL`` from the environment.
    - ``pretty=True`` forces the colored console renderer, ``pretty=False`` forces JSON lines,
      ``None`` picks the console renderer for terminals and IDEs and JSON otherwise.
    - With JSON output and ``compact_exceptions``, exceptions are rendered by ``exception_json``.
    """
    if min_level is None:
        min_level = min_log_level_from_env(min_level)
    if isinstance(min_level, str):
        min_level = logging.getLevelName(min_level.upper())

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.THREAD_NAME,
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO
            ]),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        uppercase_log_level,
    ]

    if pretty is None:
        pretty = _is_interactive()

    if pretty:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True, sort_keys=True),
        ]
    else:
        processors = shared_processors + [
            exception_json if compact_exceptions else structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False
    )

    logging.basicConfig(
        force=True,
        level=min_level,
        handlers=[
            PythonLoggingInterceptHandler()
        ]
    )
