from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from civiclink.core.exceptions import Forbidden, Unauthorized
from civiclink.core.identity import Actor, ActorRole, require_actor, require_admin
from civiclink.services.identity import create_actor_token, decode_actor_token
from civiclink.settings import settings


class TestTokens:
    def test_round_trip(self):
        actor = Actor(id=uuid4(), role=ActorRole.ADMIN)

        assert decode_actor_token(create_actor_token(actor)) == actor

    def test_expired_token(self):
        token = create_actor_token(Actor(id=uuid4()), expires_delta=timedelta(seconds=-5))

        with pytest.raises(Unauthorized) as exc_info:
            decode_actor_token(token)
        assert exc_info.value.message == "Token has expired"

    def test_wrong_signature(self):
        token = jwt.encode({"sub": str(uuid4()), "role": "admin"}, "another-secret-key-of-sufficient-size", "HS256")

        with pytest.raises(Unauthorized):
            decode_actor_token(token)

    def test_missing_subject(self):
        token = jwt.encode({"role": "citizen"}, settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)

        with pytest.raises(Unauthorized):
            decode_actor_token(token)

    def test_unknown_role(self):
        token = jwt.encode({"sub": str(uuid4()), "role": "mayor"}, settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)

        with pytest.raises(Unauthorized):
            decode_actor_token(token)


class TestGuards:
    def test_require_actor(self):
        actor = Actor(id=uuid4())

        assert require_actor(actor) is actor
        with pytest.raises(Unauthorized):
            require_actor(None)

    def test_require_admin(self):
        with pytest.raises(Forbidden):
            require_admin(Actor(id=uuid4()))
        assert require_admin(Actor.system()).is_admin
