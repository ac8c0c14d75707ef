import inspect
import json
import logging
import sys
import time
import traceback
from functools import wraps
from pathlib import Path

from kanban_board.core import get_settings
from kanban_board.core.errors import BoardError

log_dir = Path(__file__).parent
log_dir.mkdir(exist_ok=True)

# ANSI colours for console output
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
PURPLE = '\033[95m'
CYAN = '\033[96m'
BOLD = '\033[1m'
END = '\033[0m'

# Headers never written to the debug log
HIDDEN_HEADERS = {"x-api-key", "authorization", "cookie"}


def format_object(obj):
    if isinstance(obj, (list, dict, tuple, set)):
        try:
            return json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(obj)
    if hasattr(obj, '__dict__'):
        return str({k: v for k, v in obj.__dict__.items() if not k.startswith('_')})
    return str(obj)


class DebugLogger:
    """Verbose logger for debugging: caller info, coloured console output, debug.log file"""

    def __init__(self, name="debug", level=logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

        file_handler = logging.FileHandler(log_dir / "debug.log", encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def debug(self, message, *args, **kwargs):
        """Debug record prefixed with the calling file, line and function"""
        frame = inspect.currentframe().f_back
        filename = frame.f_code.co_filename
        try:
            filename = filename[filename.index("kanban_board"):]
        except ValueError:
            pass

        caller_info = f"{BLUE}[{filename}:{frame.f_lineno} - {frame.f_code.co_name}]{END}"
        self.logger.debug(f"{caller_info} {message}", *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(f"{GREEN}{message}{END}", *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(f"{YELLOW}{message}{END}", *args, **kwargs)

    def error(self, message, *args, **kwargs):
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.error(f"{RED}{message}{END}", *args, **kwargs)

    def start_func(self, func_name, params=None):
        params_str = f" with params: {format_object(params)}" if params else ""
        self.debug(f"{PURPLE}Entering {func_name}{END}{params_str}")

    def end_func(self, func_name, result=None, execution_time=None):
        result_str = ""
        if result is not None:
            formatted = format_object(result)
            result_str = f", result: {formatted[:1000]}"
            if len(formatted) > 1000:
                result_str += "... [truncated]"

        time_str = f", took {execution_time:.4f}s" if execution_time else ""
        self.debug(f"{PURPLE}Leaving {func_name}{END}{result_str}{time_str}")

    def log_exception(self, message="Unhandled exception"):
        exc_type, exc_value, _ = sys.exc_info()
        if exc_type:
            self.error(f"{message}: {exc_type.__name__}: {exc_value}")
        else:
            self.error(message)

    def log_request(self, request):
        """Incoming HTTP request, secrets stripped from headers"""
        client = getattr(request, 'client', None)
        headers = {
            key: value for key, value in dict(getattr(request, 'headers', {})).items()
            if key.lower() not in HIDDEN_HEADERS
        }

        self.debug(
            f"{CYAN}HTTP request:{END} {request.method} {request.url}\n"
            f"{CYAN}Client:{END} {client.host if client else 'unknown'}\n"
            f"{CYAN}Headers:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )

    def log_response(self, response, process_time=None):
        status_code = getattr(response, 'status_code', 0)
        color = GREEN if 200 <= status_code < 400 else YELLOW if 400 <= status_code < 500 else RED

        info = f"{CYAN}HTTP response:{END} {color}status {status_code}{END}"
        if process_time is not None:
            info += f"\n{CYAN}Processing time:{END} {process_time:.3f}s"
        self.debug(info)


def _call_args(func, args, kwargs):
    func_args = dict(zip(inspect.getfullargspec(func).args, args))
    func_args.update(kwargs)
    # Sessions and bound instances only add noise
    for name in ('self', 'cls', 'db'):
        func_args.pop(name, None)
    return func_args


def _report_failure(active, func_name, exc):
    if isinstance(exc, BoardError):
        # Expected outcome reported to the caller, no traceback needed
        active.warning(f"{func_name} -> {exc.__class__.__name__}: {exc.message}")
    else:
        active.log_exception(f"Error in {func_name}")


def log_function(logger=None):
    """Decorator logging entry, exit, duration and failures of sync and async functions"""

    def decorator(func):
        name = func.__qualname__

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                active = logger or debug_logger
                active.start_func(name, _call_args(func, args, kwargs))
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    _report_failure(active, name, exc)
                    raise
                active.end_func(name, result, time.perf_counter() - started)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            active = logger or debug_logger
            active.start_func(name, _call_args(func, args, kwargs))
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _report_failure(active, name, exc)
                raise
            active.end_func(name, result, time.perf_counter() - started)
            return result

        return wrapper

    return decorator


debug_logger = DebugLogger(level=logging.DEBUG if get_settings().DEBUG else logging.INFO)
