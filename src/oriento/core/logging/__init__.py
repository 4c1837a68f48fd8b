# oriento/core/logging/
# ├─ __init__.py     # public API: setup_logging, stop_queue_logging, set_request_id, RequestIDMiddleware
# ├─ builder.py      # make_dict_config(settings) + setup_logging(settings) + queue wiring
# ├─ formatters.py   # JsonFormatter, ColorFormatter
# ├─ filters.py      # RequestIdFilter (+ contextvar helpers), RedactFilter
# ├─ handlers.py     # handler dicts for dictConfig (console / file / error)
# └─ middleware.py   # X-Request-ID middleware

from .builder import setup_logging, make_dict_config, stop_queue_logging
from .filters import set_request_id, get_request_id, reset_request_id, RequestIdFilter, RedactFilter
from .middleware import RequestIDMiddleware

__all__ = [
    "setup_logging",
    "make_dict_config",
    "stop_queue_logging",
    "set_request_id",
    "get_request_id",
    "reset_request_id",
    "RequestIdFilter",
    "RedactFilter",
    "RequestIDMiddleware",
]
