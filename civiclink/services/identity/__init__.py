# Local application imports
from civiclink.services.identity.token_services import create_actor_token, decode_actor_token

__all__ = ["create_actor_token", "decode_actor_token"]
