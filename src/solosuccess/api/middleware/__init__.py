"""FastAPI middleware components."""

from solosuccess.api.middleware.request_id import (
    RequestIDMiddleware,
    get_request_id,
    set_request_id,
    add_request_id_to_log,
)

__all__ = [
    "RequestIDMiddleware",
    "get_request_id",
    "set_request_id",
    "add_request_id_to_log",
]
