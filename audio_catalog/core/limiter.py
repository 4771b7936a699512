"""Rate limiter shared by main (app.state.limiter) and route modules.

Write routes are decorated with limit_writes; admin maintenance routes
(compatibility repair, cache warmup) with limit_admin.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"
ADMIN_ENDPOINT_LIMIT = "10/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_admin = limiter.limit(ADMIN_ENDPOINT_LIMIT)
