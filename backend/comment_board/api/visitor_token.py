import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from comment_board.config import Settings

logger = logging.getLogger(__name__)

TOKEN_EXPIRATION_COOKIE = "token-expiration"


def parse_expiration(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        expiration = datetime.fromisoformat(value)
    except ValueError:
        return None
    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)
    return expiration


class VisitorTokenMiddleware(BaseHTTPMiddleware):
    """Give every visitor a long-lived ownership token in a cookie.

    A visitor without a token, or whose token has expired, gets a fresh
    uuid4 token. The token in effect is exposed to handlers as
    ``request.state.visitor_token``.
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        token = request.cookies.get(self.settings.token_cookie_name)
        expiration = parse_expiration(request.cookies.get(TOKEN_EXPIRATION_COOKIE))
        now = datetime.now(timezone.utc)

        issue_token = not token or expiration is None or expiration <= now
        if issue_token:
            token = str(uuid4())
            expiration = now + timedelta(days=self.settings.token_max_age_days)
            logger.debug(f"Issued visitor token expiring at {expiration.isoformat()}")

        request.state.visitor_token = token
        response = await call_next(request)

        if issue_token:
            self._set_cookies(response, token, expiration)
        return response

    def _set_cookies(self, response: Response, token: str, expiration: datetime):
        production = self.settings.is_production
        options = {
            "max_age": self.settings.token_max_age_days * 24 * 60 * 60,
            "domain": self.settings.cookie_domain or None,
            "httponly": True,
            "secure": production,
            "samesite": "strict" if production else "lax",
        }
        response.set_cookie(self.settings.token_cookie_name, token, **options)
        response.set_cookie(TOKEN_EXPIRATION_COOKIE, expiration.isoformat(), **options)
