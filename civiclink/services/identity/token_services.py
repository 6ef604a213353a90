# Standard library imports
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

# Third-party imports
import jwt

# Local application imports
from civiclink.core.exceptions import Unauthorized
from civiclink.core.identity import Actor, ActorRole
from civiclink.settings import settings


def create_actor_token(actor: Actor, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed access token for an actor.

    Production tokens come from the identity provider; this is used for
    development seeding and tests, and mirrors the claims we read.

    Args:
        actor: The actor the token identifies
        expires_delta: Optional custom expiration time

    Returns:
        The encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": str(actor.id),
        "role": actor.role.value,
        "exp": expire,
        "iat": now,
        "token_type": "access",  # nosec B105
        "jti": str(uuid4()),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_actor_token(token: str) -> Actor:
    """
    Resolve a bearer token to an actor.

    Raises:
        Unauthorized: the token is expired, malformed, or missing claims.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized("Token has expired") from e
    except jwt.PyJWTError as e:
        raise Unauthorized("Invalid or expired token") from e

    if payload.get("token_type", "access") != "access":  # nosec B105
        raise Unauthorized("Invalid or expired token")

    try:
        user_id = UUID(str(payload.get("sub")))
        role = ActorRole(payload.get("role", ActorRole.CITIZEN.value))
    except ValueError as e:
        raise Unauthorized("Invalid or expired token") from e

    return Actor(id=user_id, role=role)
