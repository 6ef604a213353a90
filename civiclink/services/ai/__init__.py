# Local application imports
from civiclink.services.ai.department_classifier import DepartmentClassifier
from civiclink.services.ai.gateway import AIGateway, AIServiceError
from civiclink.services.ai.image_verifier import ImageVerdict, ImageVerdictKind, ImageVerifier, parse_verdict

__all__ = [
    "AIGateway",
    "AIServiceError",
    "DepartmentClassifier",
    "ImageVerdict",
    "ImageVerdictKind",
    "ImageVerifier",
    "parse_verdict",
]
