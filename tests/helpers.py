from civiclink.core.identity import Actor
from civiclink.schemas.issues import IssueCreate
from civiclink.services.identity import create_actor_token


def make_issue_payload(**overrides) -> IssueCreate:
    data = {
        "title": "Pothole on Main Street",
        "description": "Deep pothole in the left lane near the bakery, cars swerve around it.",
        "category": "roads",
        "address": "12 Main Street",
        "latitude": 52.52,
        "longitude": 13.40,
    }
    data.update(overrides)
    return IssueCreate(**data)


def auth_headers(actor: Actor) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_actor_token(actor)}"}
