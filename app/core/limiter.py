from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Initialize rate limiter - uses client IP address for rate limit key
# Disabled during testing (when DATABASE_URL contains 'test')
_is_testing = "test" in settings.DATABASE_URL.lower()
limiter = Limiter(key_func=get_remote_address, enabled=not _is_testing)
