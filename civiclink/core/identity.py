"""
Identity context.

The acting user is always passed explicitly into service calls as an
``Actor`` (or ``None`` when the caller is anonymous). There is no
module-level "current user".
"""

# Standard library imports
from dataclasses import dataclass
import enum
from uuid import UUID

# Local application imports
from civiclink.core.exceptions import Forbidden, Unauthorized

# Actor used by background jobs (department classification) that act on
# behalf of the platform rather than a person.
SYSTEM_ACTOR_ID = UUID("00000000-0000-0000-0000-000000000000")


class ActorRole(str, enum.Enum):
    CITIZEN = "citizen"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    id: UUID
    role: ActorRole = ActorRole.CITIZEN

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    @classmethod
    def system(cls) -> "Actor":
        return cls(id=SYSTEM_ACTOR_ID, role=ActorRole.ADMIN)


def require_actor(actor: Actor | None) -> Actor:
    if actor is None:
        raise Unauthorized()
    return actor


def require_admin(actor: Actor | None) -> Actor:
    actor = require_actor(actor)
    if not actor.is_admin:
        raise Forbidden("Administrator role required")
    return actor
