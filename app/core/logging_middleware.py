import logging
import json
import time
import random
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Configure a specific logger for structured events
# We don't propagate to the root logger to avoid double logging if root captures everything
structured_logger = logging.getLogger("api.structured_log")
structured_logger.propagate = False

# Fall back to a bare StreamHandler when logging.ini did not configure one
if not structured_logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(message)s"
    )  # Raw message only (which will be JSON)
    handler.setFormatter(formatter)
    structured_logger.addHandler(handler)
    structured_logger.setLevel(logging.INFO)

# Request methods that change recipe data
WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to implement wide-event structured logging with tail sampling.

    Rules:
    1. Always log errors (Status >= 500)
    2. Always log slow requests (> 500ms)
    3. Sample the remaining requests at SAMPLE_RATE
    """

    SLOW_THRESHOLD_MS = 500
    SAMPLE_RATE = 0.05

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = None
        error_details = None
        status_code = 500  # Default to 500 if exception occurs

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error_details = str(e)
            raise e  # Re-raise exception after capturing it
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            should_log = (
                status_code >= 500
                or duration_ms > self.SLOW_THRESHOLD_MS
                or random.random() < self.SAMPLE_RATE
            )

            if should_log:
                # Path parameters are only known once routing has happened
                path_params = request.scope.get("path_params") or {}

                log_payload = {
                    "timestamp": time.time(),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                    "query_params": dict(request.query_params),
                    "recipe_id": path_params.get("recipe_id"),
                    "is_write": request.method in WRITE_METHODS,
                    "error": error_details,
                }

                # Dump to JSON and log
                structured_logger.info(json.dumps(log_payload))

        return response
