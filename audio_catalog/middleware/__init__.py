"""HTTP middleware: request id / access log and request timeout.

Applied in create_app; the last added is the outermost.
"""

from audio_catalog.middleware.request_id import RequestIDMiddleware
from audio_catalog.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
