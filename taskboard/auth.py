"""Bearer-token authentication strategies.

Handlers depend on ``require_identity`` only; which strategy verifies the
token is chosen when the application is built.
"""

import base64
import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from fastapi import Header, Request

from taskboard.errors import Unauthorized
from taskboard.models import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    """Who a verified token belongs to. ``user_id`` is None when unknown."""

    token: str
    user_id: str | None = None


class AuthStrategy(ABC):
    """Issues tokens on login and verifies them on every task request."""

    @abstractmethod
    def issue(self, user: User) -> str:
        """Return a new token for ``user``."""

    @abstractmethod
    def verify(self, token: str) -> Identity:
        """Return the identity behind ``token`` or raise ``Unauthorized``."""

    def revoke(self, token: str) -> None:
        """Forget ``token``. Strategies that keep no state have nothing to do."""


class PlaceholderAuthStrategy(AuthStrategy):
    """Accepts any non-empty bearer value. Not a security boundary."""

    def issue(self, user: User) -> str:
        """Return an opaque base64 token naming the user."""
        raw = f"{user.id}:{int(time.time() * 1000)}"
        return base64.b64encode(raw.encode()).decode()

    def verify(self, token: str) -> Identity:
        """Accept any non-empty token without identifying its owner."""
        if not token:
            raise Unauthorized()
        return Identity(token=token)


class IssuedTokenAuthStrategy(AuthStrategy):
    """Accepts only tokens this process handed out."""

    def __init__(self) -> None:
        """Initialize an empty token registry."""
        self._tokens: dict[str, str] = {}

    def issue(self, user: User) -> str:
        """Return a token and remember which user it belongs to."""
        raw = f"{user.id}:{int(time.time() * 1000)}:{secrets.token_hex(8)}"
        token = base64.b64encode(raw.encode()).decode()
        self._tokens[token] = user.id
        return token

    def verify(self, token: str) -> Identity:
        """Resolve a token this strategy issued."""
        user_id = self._tokens.get(token)
        if user_id is None:
            raise Unauthorized()
        return Identity(token=token, user_id=user_id)

    def revoke(self, token: str) -> None:
        """Drop a token so later requests carrying it are rejected."""
        self._tokens.pop(token, None)


def build_strategy(mode: str) -> AuthStrategy:
    """Pick the strategy named by ``Settings.auth_mode``."""
    if mode == "issued":
        return IssuedTokenAuthStrategy()
    return PlaceholderAuthStrategy()


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization`` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized()
    return token


def require_identity(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Identity:
    """FastAPI dependency guarding the task routes."""
    strategy: AuthStrategy = request.app.state.auth
    try:
        return strategy.verify(parse_bearer(authorization))
    except Unauthorized:
        logger.info("Rejected %s %s: bad bearer token", request.method, request.url.path)
        raise
