# Standard library imports
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict


class VoteStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    issue_id: UUID
    active: bool
    new_count: int
