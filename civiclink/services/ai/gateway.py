# Standard library imports
from typing import Any

# Third-party imports
import httpx

# Local application imports
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.settings import settings

logger = get_contextual_logger(__name__)


class AIServiceError(Exception):
    """The AI gateway could not produce an answer."""


class AIGateway:
    """
    Minimal client for an OpenAI-compatible chat-completions endpoint.

    ``transport`` lets callers (tests) swap the network layer for an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.AI_GATEWAY_URL
        self.api_key = api_key if api_key is not None else settings.AI_GATEWAY_API_KEY
        self.model = model or settings.AI_MODEL
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def complete(self, messages: list[dict[str, Any]], temperature: float | None = None) -> str:
        """
        Send ``messages`` and return the first choice's text content.

        Raises:
            AIServiceError: no API key, a transport or HTTP error, or a malformed body.
        """
        if not self.enabled:
            raise AIServiceError("AI gateway API key is not configured")

        body: dict[str, Any] = {"model": self.model, "messages": messages}
        if temperature is not None:
            body["temperature"] = temperature

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"AI gateway returned {exc.response.status_code}: {exc.response.text[:200]}")
            raise AIServiceError(f"AI gateway error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"AI gateway request failed: {exc}")
            raise AIServiceError("AI gateway unreachable") from exc
        except ValueError as exc:
            raise AIServiceError("AI gateway returned invalid JSON") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AIServiceError("AI gateway response has no content") from exc
        if not isinstance(content, str):
            raise AIServiceError("AI gateway response content is not text")
        return content.strip()
