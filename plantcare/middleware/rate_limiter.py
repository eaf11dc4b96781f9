"""
Rate limiter shared by the application and its routers.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from plantcare.config import settings


limiter = Limiter(key_func=get_remote_address)

ANALYZE_RATE_LIMIT = f"{settings.rate_limit_requests}/minute"
