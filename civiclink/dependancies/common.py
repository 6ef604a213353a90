# Third-party imports
from fastapi import Depends, WebSocket
from fastapi.security import OAuth2PasswordBearer
from starlette.requests import HTTPConnection

# Local application imports
from civiclink.core.exceptions import Unauthorized
from civiclink.core.identity import Actor
from civiclink.core.realtime import FanoutBus
from civiclink.services.ai import ImageVerifier
from civiclink.services.identity import decode_actor_token
from civiclink.services.notifications import NotificationDispatcher
from civiclink.settings import settings

# Bearer tokens are issued by the identity provider; tokenUrl only feeds the docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)


async def get_current_actor(token: str | None = Depends(oauth2_scheme)) -> Actor | None:
    """
    Actor for the request's bearer token, or None when no token was sent.

    A token that is present but invalid or expired is rejected outright
    rather than downgraded to anonymous.
    """
    if not token:
        return None
    return decode_actor_token(token)


def get_fanout_bus(connection: HTTPConnection) -> FanoutBus:
    return connection.app.state.fanout_bus


def get_dispatcher(bus: FanoutBus = Depends(get_fanout_bus)) -> NotificationDispatcher:
    return NotificationDispatcher(bus)


def get_websocket_actor(websocket: WebSocket) -> Actor:
    """
    Authenticate a websocket from its ``token`` query parameter or bearer header.

    Browsers cannot set headers on a websocket handshake, hence the query
    parameter.

    Raises:
        Unauthorized: no token, or the token does not decode.
    """
    token = websocket.query_params.get("token")
    if not token:
        authorization = websocket.headers.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()
    if not token:
        raise Unauthorized()
    return decode_actor_token(token)


def get_image_verifier() -> ImageVerifier:
    return ImageVerifier()
