# Local application imports
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.services.ai.gateway import AIGateway, AIServiceError
from civiclink.settings import settings

logger = get_contextual_logger(__name__)

SYSTEM_PROMPT = "You are a civic issue classifier. Respond only with the department name."


class DepartmentClassifier:
    """Suggests the department responsible for an issue; never raises."""

    def __init__(
        self,
        gateway: AIGateway | None = None,
        departments: list[str] | None = None,
        default_department: str | None = None,
    ) -> None:
        self.gateway = gateway or AIGateway()
        self.departments = departments or list(settings.DEPARTMENTS)
        self.default_department = default_department or settings.DEFAULT_DEPARTMENT

    def build_prompt(self, title: str, description: str, category: str) -> str:
        department_lines = "\n".join(f"- {department}" for department in self.departments)
        return (
            "Analyze this civic issue and assign it to the most appropriate department.\n\n"
            f"Title: {title}\n"
            f"Description: {description}\n"
            f"Category: {category}\n\n"
            f"Available departments:\n{department_lines}\n\n"
            "Respond with ONLY the department name, nothing else."
        )

    def match_department(self, answer: str) -> str:
        """Map a free-text answer onto a known department, else the default."""
        normalized = answer.strip().strip(".\"'").lower()
        for department in self.departments:
            if normalized == department.lower():
                return department
        for department in self.departments:
            if department.lower() in normalized:
                return department
        return self.default_department

    async def classify(self, title: str, description: str, category: str) -> str:
        try:
            answer = await self.gateway.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_prompt(title, description, category)},
                ],
                temperature=0.3,
            )
        except AIServiceError as e:
            logger.warning(f"Department classification unavailable, using {self.default_department}: {e}")
            return self.default_department

        department = self.match_department(answer)
        if department == self.default_department and answer.strip() != department:
            logger.info(f"Unrecognised department answer {answer[:50]!r}, using {department}")
        return department
