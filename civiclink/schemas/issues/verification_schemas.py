# Third-party imports
from pydantic import BaseModel, Field

# Local application imports
from civiclink.models.issues.issue import IssueCategory
from civiclink.services.ai.image_verifier import ImageVerdictKind


class ImageVerificationRequest(BaseModel):
    image_base64: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: IssueCategory


class ImageVerificationResponse(BaseModel):
    skipped: bool
    verdict: ImageVerdictKind | None = None
    explanation: str | None = None
