# Standard library imports
from dataclasses import dataclass
import enum
import json
import re

# Local application imports
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.services.ai.gateway import AIGateway, AIServiceError

logger = get_contextual_logger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant that analyzes civic issue photos. Verify if the uploaded image matches the "
    "reported problem. Be helpful but strict about image relevance. Respond with:\n"
    '- "appropriate": if image clearly shows the reported issue\n'
    '- "unclear": if image quality is poor or issue is not clearly visible\n'
    '- "irrelevant": if image doesn\'t match the reported issue at all\n'
    "Also provide a brief explanation in 1-2 sentences."
)

CODE_FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
EXPLANATION_LIMIT = 200


class ImageVerdictKind(str, enum.Enum):
    APPROPRIATE = "appropriate"
    UNCLEAR = "unclear"
    IRRELEVANT = "irrelevant"


@dataclass(frozen=True)
class ImageVerdict:
    verdict: ImageVerdictKind
    explanation: str


def parse_verdict(answer: str) -> ImageVerdict:
    """
    Read a verdict out of a model answer.

    Accepts bare JSON, JSON in a code fence, or JSON embedded in prose. When
    no usable JSON is found the verdict is guessed from keywords and the
    answer itself becomes the explanation.
    """
    match = CODE_FENCE_RE.search(answer) or JSON_OBJECT_RE.search(answer)
    candidate = match.group(1) if match and match.groups() else (match.group(0) if match else answer)

    try:
        data = json.loads(candidate)
        return ImageVerdict(
            verdict=ImageVerdictKind(str(data["verdict"]).strip().lower()),
            explanation=str(data.get("explanation", "")).strip(),
        )
    except (ValueError, KeyError, TypeError, AttributeError):
        lowered = answer.lower()
        if "irrelevant" in lowered:
            verdict = ImageVerdictKind.IRRELEVANT
        elif "appropriate" in lowered and "inappropriate" not in lowered:
            verdict = ImageVerdictKind.APPROPRIATE
        else:
            verdict = ImageVerdictKind.UNCLEAR
        return ImageVerdict(verdict=verdict, explanation=answer.strip()[:EXPLANATION_LIMIT])


class ImageVerifier:
    """Checks that a photo shows the reported problem. ``None`` means skip verification."""

    def __init__(self, gateway: AIGateway | None = None) -> None:
        self.gateway = gateway or AIGateway()

    async def verify(self, image_base64: str, title: str, description: str, category: str) -> ImageVerdict | None:
        prompt = (
            f"Issue Title: {title}\n"
            f"Category: {category}\n"
            f"Description: {description}\n\n"
            "Does this image appropriately show the reported civic issue? "
            'Respond with JSON: {"verdict": "appropriate/unclear/irrelevant", "explanation": "brief explanation"}'
        )
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image_base64}},
                ],
            },
        ]

        try:
            answer = await self.gateway.complete(messages)
        except AIServiceError as e:
            logger.warning(f"Image verification skipped: {e}")
            return None

        if not answer:
            return None
        return parse_verdict(answer)
